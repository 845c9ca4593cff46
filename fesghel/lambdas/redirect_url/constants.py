MISSING_KEY = 'MISSING_KEY'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
