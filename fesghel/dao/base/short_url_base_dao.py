"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., MongoDB, Redis).

Responsibilities:
    - Provide an interface for storing and fetching ShortURLModel objects.
    - Standardize error handling across multiple data store implementations.
    - Enforce a consistent async API for use by Lambda functions.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from fesghel.models import ShortURLModel
        >>> from fesghel.dao.mongo import ShortURLMongoDAO

        >>> async with ShortURLMongoDAO(mongo_address='mongodb://127.0.0.1:27017') as dao:
        ...     await dao.initialize()
        ...     await dao.store(ShortURLModel(url='https://example.com/blog/article-123', key='a1b2c3'))
        ...     retrieved = await dao.fetch('a1b2c3')

        >>> print(retrieved.url)
        https://example.com/blog/article-123
"""

from abc import ABC, abstractmethod

from fesghel.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        initialize(**kwargs) -> ShortURLBaseDAO:
            Healthcheck the data store and ensure the key uniqueness constraint exists.
            Raises DataStoreError if either step fails.

        store(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Store a new ShortURLModel in the data store.
            Raises ShortURLAlreadyExistsError if the key already exists.
            Raises DataStoreError on connection or write failure.

        fetch(key: str, **kwargs) -> ShortURLModel | None:
            Fetch a ShortURLModel from the data store by key.
            Returns None if not found.
            Raises DataStoreError on connection or read failure.

        close() -> None:
            Release the underlying client.

    Entering `async with dao` does no I/O; leaving it closes the client.
    Reads need nothing else. Writers call initialize() first so that
    duplicate detection is in place.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLMongoDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Uniqueness of keys is enforced by the data store itself (unique
          index, SET NX, ...), never by in-process locking. Concurrent stores
          of the same key yield exactly one success.
        - The DAO does not provide an interface to update or delete entries.
    """

    async def __aenter__(self) -> 'ShortURLBaseDAO':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def initialize(self, **kwargs) -> 'ShortURLBaseDAO':
        """Prepare the data store for use

        Must complete before the first store() call relying on duplicate
        detection. fetch() does not need it. Idempotent.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If the data store is unreachable or the uniqueness constraint
                can't be created.
        """
        pass

    @abstractmethod
    async def store(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Store a new ShortURLModel in the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same key already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    async def fetch(self, key: str, **kwargs) -> ShortURLModel | None:
        """Fetch a ShortURLModel from the data store by its key.

        Args:
            key (str):
                The key of the ShortURLModel to be fetched.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel | None: The ShortURLModel instance if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the data store client."""
        pass
