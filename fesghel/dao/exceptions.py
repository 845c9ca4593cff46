"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLAlreadyExistsError:
        Raised when attempting to store a ShortURLModel whose key already exists.

    DataStoreError:
        Raised when there is any other error in the data store (e.g., connection issues, timeouts, etc.).

Example:
    >>> from fesghel.dao.exceptions import ShortURLAlreadyExistsError
    >>> raise ShortURLAlreadyExistsError('abc123')
    Traceback (most recent call last):
        ...
    fesghel.dao.exceptions.ShortURLAlreadyExistsError: Short URL with key 'abc123' already exists.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortURLAlreadyExistsError(DAOError):
    """Exception raised when attempting to store a ShortURLModel that already exists in the data store.

    Attributes:
        key (str):
            The key that collided with an existing record.
    """

    def __init__(self, key: str):
        super().__init__(f"Short URL with key '{key}' already exists.")
        self.key = key


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, undecodable documents, etc.

    The original backend exception is chained via `raise ... from` and
    available as `cause`.
    """

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__
