"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO. Each
short URL is stored as its JSON `{url, key}` document under
`<prefix>:links:<key>`.

Responsibilities:
    - Store short URLs atomically (SET NX is the uniqueness constraint);
    - Fetch short URLs by key;
    - Raise appropriate DAO exceptions on collisions and Redis errors.

Classes:
    ShortURLRedisDAO:
        DAO for storing and fetching ShortURLModel in a Redis datastore.

Example:
    >>> from fesghel.models import ShortURLModel
    >>> from fesghel.dao.redis import ShortURLRedisDAO

    >>> dao = await ShortURLRedisDAO(prefix="app:dev").initialize()

    >>> await dao.store(ShortURLModel(url="https://example.com/page", key="abc123"))
    <ShortURLRedisDAO>

    >>> retrieved = await dao.fetch("abc123")
    >>> retrieved.url
    'https://example.com/page'
"""

import json

from beartype import beartype

from fesghel.models import ShortURLModel
from fesghel.dao.base import ShortURLBaseDAO
from fesghel.dao.redis.mixins import RedisClientMixin
from fesghel.dao.redis.helpers import handle_redis_errors
from fesghel.dao.exceptions import ShortURLAlreadyExistsError, DataStoreError
from fesghel.utils import metrics


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    Attributes (see RedisClientMixin):
        redis (redis.asyncio.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        initialize(**kwargs) -> ShortURLRedisDAO:
            PING Redis. No index is needed, SET NX enforces key uniqueness.

        store(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Store a short URL document unless its key already exists.
            Raises ShortURLAlreadyExistsError when a URL with the same key exists.
            Raises DataStoreError on Redis errors.

        fetch(key: str, **kwargs) -> ShortURLModel | None:
            Fetch a short URL document by key. Returns None when absent.
            Raises DataStoreError on Redis errors or an undecodable document.
    """

    async def initialize(self, **kwargs) -> 'ShortURLRedisDAO':
        await self._healthcheck()
        return self

    @handle_redis_errors
    @beartype
    async def store(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Store a short URL mapping in Redis

        Existence check and write are a single `SET ... NX` command, so of any
        number of concurrent stores with the same key exactly one succeeds.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same key already exists.
            DataStoreError:
                If a Redis error occurs.
        """
        link_key = self.keys.link_key(short_url.key)
        with metrics.time_db_write():
            created = await self.redis.set(link_key, json.dumps(short_url.to_document()), nx=True)
        if not created:
            raise ShortURLAlreadyExistsError(short_url.key)
        return self

    @handle_redis_errors
    @beartype
    async def fetch(self, key: str, **kwargs) -> ShortURLModel | None:
        """Fetch a stored short URL mapping by key

        Args:
            key (str):
                The key identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel | None:
                The stored ShortURLModel, or None if the key doesn't exist.

        Raises:
            DataStoreError:
                If Redis errors occur or the stored document can't be decoded.
        """
        with metrics.time_db_read():
            raw = await self.redis.get(self.keys.link_key(key))
        if raw is None:
            return None

        try:
            return ShortURLModel.from_document(json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            raise DataStoreError(f"Stored short URL document with key '{key}' is malformed.") from e
