# Short key generation
KEY_LENGTH = 6
MAX_KEY_ATTEMPTS = 5

# Caller supplied key names ("-" asks for a generated key)
GENERATED_KEY_NAME = '-'
KEY_NAME_PATTERN = r'[A-Za-z0-9_-]{1,64}'

# MongoDB defaults
DEFAULT_MONGO_ADDRESS = 'mongodb://127.0.0.1:27017'
DEFAULT_MONGO_DATABASE = 'fesghel'
URLS_COLLECTION = 'urls'
KEY_INDEX_NAME = 'key_unique'

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
PROJECT_ROOT_ENV = 'PROJECT_ROOT'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# Configuration file and overrides: FESGHEL_<BACKEND>_<FIELD>=value
CONFIG_FILE_ENV = 'FESGHEL_CONFIG_FILE'
CONFIG_ENV_PREFIX = 'FESGHEL'
ACTIVE_BACKEND_ENV = 'FESGHEL_ACTIVE_BACKEND'
