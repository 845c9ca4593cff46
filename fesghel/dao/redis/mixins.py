"""Redis client setup shared by Redis-backed DAOs

Example:
    >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    ...     pass
    ...
    >>> dao = ShortURLRedisDAO(redis_host='127.0.0.1', prefix='fesghel:prod')
    >>> await dao._healthcheck()
    True
"""

import redis
import redis.asyncio

from fesghel.dao.redis.redis_key_schema import RedisKeySchema
from fesghel.dao.redis.helpers import redis_location
from fesghel.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Own an async Redis client and the key schema of one namespace.

    Attributes:
        redis (redis.asyncio.Redis):
            Client used by subclasses. Its connection pool is lazy, so nothing
            connects before the first command.
        keys (RedisKeySchema):
            Key names under `prefix`.

    Only a client built by the mixin is closed by `close()`; one passed in
    through `redis_client` belongs to the caller.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_client: redis.asyncio.Redis | None = None,
        prefix: str | None = None,
    ):
        """Use `redis_client` as is, or build one from the connection parameters

        Port and db may come in as strings (environment overrides) and are
        converted to integers.
        """
        if redis_client is None:
            redis_client = redis.asyncio.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )
            self._owns_client = True
        else:
            self._owns_client = False

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

    async def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; raise DataStoreError (or return False) when it doesn't answer"""
        try:
            await self.redis.ping()
        except redis.exceptions.RedisError as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True

    async def close(self) -> None:
        if self._owns_client:
            await self.redis.aclose()
