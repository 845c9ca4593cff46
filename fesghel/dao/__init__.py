from fesghel.dao.base import ShortURLBaseDAO
from fesghel.dao.exceptions import DAOError, ShortURLAlreadyExistsError, DataStoreError
from fesghel.dao.mongo import ShortURLMongoDAO
from fesghel.dao.redis import ShortURLRedisDAO
from fesghel.dao.factory import build_short_url_dao


__all__ = [
    'ShortURLBaseDAO',
    'ShortURLMongoDAO',
    'ShortURLRedisDAO',
    'DAOError',
    'ShortURLAlreadyExistsError',
    'DataStoreError',
    'build_short_url_dao',
]
