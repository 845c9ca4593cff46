INVALID_JSON_BODY = 'INVALID_JSON_BODY'
INVALID_URL = 'INVALID_URL'
INVALID_NAME = 'INVALID_NAME'
KEY_ALREADY_EXISTS = 'KEY_ALREADY_EXISTS'
KEY_SPACE_EXHAUSTED = 'KEY_SPACE_EXHAUSTED'
KEY_COLLISION = 'KEY_COLLISION'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
