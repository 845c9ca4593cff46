"""Data Access Object (DAO) implementation for managing shortened URLs in MongoDB

This module provides a MongoDB-based implementation of ShortURLBaseDAO. Each
short URL is one `{url, key}` document in the `urls` collection, which carries
a unique index on `key`.

Responsibilities:
    - Create the unique index on `key` (hard precondition for duplicate detection);
    - Store and fetch short URLs;
    - Count and time every read and write (fesghel.utils.metrics);
    - Translate driver errors into DAO exceptions.

Classes:
    ShortURLMongoDAO:
        DAO for storing and fetching ShortURLModel in a MongoDB collection.

Example:
    >>> from fesghel.models import ShortURLModel
    >>> from fesghel.dao.mongo import ShortURLMongoDAO

    >>> dao = await ShortURLMongoDAO(mongo_address='mongodb://127.0.0.1:27017').initialize()
    >>> await dao.store(ShortURLModel(url='https://example.com/page', key='abc123'))
    <ShortURLMongoDAO>

    >>> retrieved = await dao.fetch('abc123')
    >>> retrieved.url
    'https://example.com/page'
    >>> await dao.fetch('nope42') is None
    True
"""

import logging

import pymongo.errors
from beartype import beartype
from pymongo import ASCENDING

from fesghel.models import ShortURLModel
from fesghel.dao.base import ShortURLBaseDAO
from fesghel.dao.mongo.mixins import MongoClientMixin
from fesghel.dao.mongo.helpers import handle_mongo_errors
from fesghel.dao.exceptions import ShortURLAlreadyExistsError, DataStoreError
from fesghel.utils.constants import KEY_INDEX_NAME
from fesghel.utils import metrics


logger = logging.getLogger(__name__)


class ShortURLMongoDAO(MongoClientMixin, ShortURLBaseDAO):
    """MongoDB-based Data Access Object (DAO) for managing short URL mappings

    Attributes (see MongoClientMixin):
        mongo (pymongo.AsyncMongoClient):
            MongoDB client used to communicate with the deployment.
        collection (AsyncCollection):
            Collection holding `{url, key}` documents.

    Methods:
        initialize(**kwargs) -> ShortURLMongoDAO:
            Ping MongoDB and create the unique index on `key`.
            Raises DataStoreError when either step fails.

        store(short_url: ShortURLModel, **kwargs) -> ShortURLMongoDAO:
            Insert a short URL document.
            Raises ShortURLAlreadyExistsError when a document with the same key exists.
            Raises DataStoreError on any other MongoDB failure.

        fetch(key: str, **kwargs) -> ShortURLModel | None:
            Find the short URL document by key. Returns None when absent.
            Raises DataStoreError on MongoDB failure or undecodable document.
    """

    @handle_mongo_errors
    async def initialize(self, **kwargs) -> 'ShortURLMongoDAO':
        """Ping MongoDB and ensure the unique index on `key` exists

        `create_index` is idempotent, so this is safe to call on every cold start.

        Returns:
            ShortURLMongoDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If MongoDB is unreachable or the index can't be created
                (e.g. existing duplicate keys in the collection).
        """
        await self._healthcheck()
        await self.collection.create_index([('key', ASCENDING)], unique=True, name=KEY_INDEX_NAME)
        logger.debug('Ensured unique index on short URL key.', extra={'index': KEY_INDEX_NAME})
        return self

    @handle_mongo_errors
    @beartype
    async def store(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMongoDAO':
        """Insert a short URL document into MongoDB

        The unique index on `key` makes the insert atomic with respect to
        duplicate detection: of any number of concurrent inserts with the same
        key, exactly one succeeds.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLMongoDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same key already exists.
            DataStoreError:
                If any other MongoDB error occurs.
        """
        try:
            with metrics.time_db_write():
                await self.collection.insert_one(short_url.to_document())
        except pymongo.errors.DuplicateKeyError as e:
            raise ShortURLAlreadyExistsError(short_url.key) from e
        return self

    @handle_mongo_errors
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
                The stored ShortURLModel, or None if no document has this key.

        Raises:
            DataStoreError:
                If MongoDB errors occur or the stored document can't be decoded.
        """
        with metrics.time_db_read():
            document = await self.collection.find_one({'key': key}, projection={'_id': False})
        if document is None:
            return None

        try:
            return ShortURLModel.from_document(document)
        except ValueError as e:
            raise DataStoreError(f"Stored short URL document with key '{key}' is malformed.") from e
