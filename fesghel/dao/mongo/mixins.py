"""MongoDB mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Initialize the async MongoDB client, database and collection handles
    - Healthcheck the MongoDB deployment
    - Close the client

Classes:
    - MongoClientMixin: Base mixin to inject MongoDB client setup, healthcheck & teardown.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLMongoDAO(MongoClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLMongoDAO(mongo_address='mongodb://127.0.0.1:27017')
        >>> await dao._healthcheck()
        True
"""

from typing import Optional

import pymongo.errors
from pymongo import AsyncMongoClient

from fesghel.dao.exceptions import DataStoreError
from fesghel.dao.mongo.helpers import redact_mongo_address
from fesghel.utils.constants import DEFAULT_MONGO_ADDRESS, DEFAULT_MONGO_DATABASE, URLS_COLLECTION


class MongoClientMixin:
    """Mixin MongoDB client setup and health check for MongoDB-backed DAOs.

    The client is shared by every operation of the DAO; pymongo pools and
    synchronizes connections internally, so the DAO is safe to use from many
    concurrent tasks on the same event loop.

    Attributes:
        mongo (pymongo.AsyncMongoClient):
            Active MongoDB client instance used by subclasses.

        collection (pymongo.asynchronous.collection.AsyncCollection):
            Collection holding the DAO's documents.

        mongo_location (str):
            `<address>/<database>` with credentials removed, for error messages.
    """

    def __init__(
        self,
        mongo_address: Optional[str] = DEFAULT_MONGO_ADDRESS,
        mongo_name: Optional[str] = DEFAULT_MONGO_DATABASE,
        mongo_collection: Optional[str] = URLS_COLLECTION,
        mongo_client: Optional[AsyncMongoClient] = None,
    ):
        """Initialize a MongoDB-based DAO

        The option is given to either use an existing MongoDB client instance or
        create one from a connection string. No I/O happens here; the client
        connects on the first operation.

        Args:
            mongo_address (Optional[str]):
                MongoDB connection string. Defaults to 'mongodb://127.0.0.1:27017'.

            mongo_name (Optional[str]):
                Database name. Defaults to 'fesghel'.

            mongo_collection (Optional[str]):
                Collection name. Defaults to 'urls'.

            mongo_client (Optional[AsyncMongoClient]):
                Pre-initialized MongoDB client. If None, a new client is created.
                The DAO only closes clients it created itself.
        """
        if mongo_client is None:
            mongo_client = AsyncMongoClient(mongo_address)
            self._owns_client = True
        else:
            self._owns_client = False

        self.mongo = mongo_client
        self.mongo_address = mongo_address
        self.mongo_database = mongo_name
        self.mongo_location = f'{redact_mongo_address(mongo_address)}/{mongo_name}'
        self.collection = mongo_client[mongo_name][mongo_collection]

    async def _healthcheck(self, raise_error: bool = True) -> bool:
        """Ping MongoDB to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if MongoDB is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If MongoDB can't be reached and raise_error=True.
        """
        try:
            await self.mongo.admin.command('ping')
        except pymongo.errors.PyMongoError as e:
            if raise_error:
                raise DataStoreError(f"Can't connect to MongoDB at {self.mongo_location}. Check the provided configuration parameters.") from e
            return False
        else:
            return True

    async def close(self) -> None:
        """Close the client, unless it was handed in through `mongo_client`"""
        if self._owns_client:
            await self.mongo.close()
