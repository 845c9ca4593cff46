from fesghel.dao.redis.redis_key_schema import RedisKeySchema
from fesghel.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from fesghel.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'ShortURLRedisDAO',
    'RedisClientMixin',
]
