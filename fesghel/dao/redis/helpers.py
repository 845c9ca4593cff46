import functools
import redis
import redis.asyncio
from typing import TypeVar, Any
from collections.abc import Callable, Awaitable

from fesghel.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Awaitable[Any]])


def redis_location(client: redis.asyncio.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting async DAO methods to handle Redis errors

    Args:
        method (Callable[..., Awaitable[Any]]):
            Async DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Awaitable[Any]]:
            Wrapped method which raises DataStoreError on connectivity (or any other) issues with Redis.

    Example:
        >>> @handle_redis_errors
        ... async def get_url(self, key):
        ...     return await self.redis.get(key)
    """

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis operation failed at {redis_location(self.redis)}: {e}') from e

    return wrapper
