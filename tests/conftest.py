"""Shared fixtures and in-memory data store doubles.

FakeMongoClient and FakeRedis mimic the subset of the pymongo async API and
redis.asyncio API used by the DAOs. Both enforce key uniqueness the way the
real servers do: the existence check and the write happen without yielding to
the event loop, so concurrent stores of the same key have exactly one winner.
Every operation yields once before doing its work so concurrent tasks
interleave.

Set `.error` on a collection, the admin handle or the Redis double to make the
next operations raise it (simulates outages).
"""

import asyncio
from types import SimpleNamespace

import pymongo.errors
import pytest
from pytest import MonkeyPatch


# -------------------------------
# MongoDB doubles
# -------------------------------


class FakeCollection:
    def __init__(self, name: str):
        self.name = name
        self.documents: list[dict] = []
        self.indexes: dict[str, dict] = {}
        self.error: Exception | None = None
        self.insert_calls = 0

    def _raise_if_broken(self) -> None:
        if self.error is not None:
            raise self.error

    def _unique_fields(self) -> list[str]:
        return [spec['field'] for spec in self.indexes.values() if spec['unique']]

    async def create_index(self, keys, unique: bool = False, name: str | None = None):
        await asyncio.sleep(0)
        self._raise_if_broken()
        [(field, _direction)] = keys
        name = name or f'{field}_1'
        if unique:
            values = [d.get(field) for d in self.documents]
            if len(values) != len(set(values)):
                raise pymongo.errors.DuplicateKeyError('E11000 duplicate key error (index build)', code=11000)
        self.indexes[name] = {'field': field, 'unique': unique}
        return name

    async def insert_one(self, document: dict):
        await asyncio.sleep(0)
        self.insert_calls += 1
        self._raise_if_broken()
        for field in self._unique_fields():
            if any(d.get(field) == document.get(field) for d in self.documents):
                raise pymongo.errors.DuplicateKeyError(
                    f'E11000 duplicate key error collection: {self.name} dup key: {{ {field}: "{document.get(field)}" }}',
                    code=11000,
                )
        document.setdefault('_id', len(self.documents) + 1)
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document['_id'], acknowledged=True)

    async def find_one(self, filter: dict, projection: dict | None = None):
        await asyncio.sleep(0)
        self._raise_if_broken()
        for d in self.documents:
            if all(d.get(k) == v for k, v in filter.items()):
                found = dict(d)
                if projection and projection.get('_id') is False:
                    found.pop('_id', None)
                return found
        return None


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(f'{self.name}.{name}'))


class FakeAdmin:
    def __init__(self):
        self.error: Exception | None = None
        self.commands: list[str] = []

    async def command(self, name: str):
        await asyncio.sleep(0)
        self.commands.append(name)
        if self.error is not None:
            raise self.error
        return {'ok': 1.0}


class FakeMongoClient:
    def __init__(self):
        self.databases: dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin()
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase(name))

    async def close(self) -> None:
        self.closed = True


# -------------------------------
# Redis double
# -------------------------------


class FakeRedis:
    def __init__(self):
        self.data: dict[str, str] = {}
        self.error: Exception | None = None
        self.closed = False
        self.connection_pool = SimpleNamespace(connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0})

    def _raise_if_broken(self) -> None:
        if self.error is not None:
            raise self.error

    async def ping(self) -> bool:
        await asyncio.sleep(0)
        self._raise_if_broken()
        return True

    async def set(self, name: str, value: str, nx: bool = False):
        await asyncio.sleep(0)
        self._raise_if_broken()
        if nx and name in self.data:
            return None
        self.data[name] = value
        return True

    async def get(self, name: str):
        await asyncio.sleep(0)
        self._raise_if_broken()
        return self.data.get(name)

    async def aclose(self) -> None:
        self.closed = True


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def urls_collection(mongo_client: FakeMongoClient) -> FakeCollection:
    return mongo_client['fesghel']['urls']


@pytest.fixture
def redis_client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: MonkeyPatch) -> None:
    """Keep tests independent from the developer's shell environment."""
    for name in ('APP_ENV', 'APP_NAME', 'AWS_SAM_LOCAL', 'PROJECT_ROOT', 'FESGHEL_CONFIG_FILE', 'FESGHEL_ACTIVE_BACKEND'):
        monkeypatch.delenv(name, raising=False)
