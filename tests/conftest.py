"""
Shared fixtures: in-memory stand-ins for the Mongo and Redis drivers, wired
through the real ``DBClient`` / ``RedisClient`` wrappers, plus an app and an
httpx client over ASGI.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError
from redis.exceptions import ConnectionError as RedisConnectionError

from files_manager.clients.cache import RedisClient
from files_manager.clients.db import DBClient
from files_manager.clients.storage import LocalPayloadStore
from files_manager.core.config import Settings
from files_manager.main import create_app
from files_manager.models.schemas import UserCreate
from files_manager.services.files import FileService
from files_manager.services.sessions import SessionManager
from files_manager.services.users import UserService


# =============================================================================
# FAKE MONGO
# =============================================================================


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(key in doc and doc[key] == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self.docs = docs

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return list(self.docs if length is None else self.docs[:length])


class FakeCollection:
    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.unique_keys: set[str] = set()

    async def create_index(self, key: str, unique: bool = False):
        if unique:
            self.unique_keys.add(key)
        return f"{key}_1"

    async def find_one(self, query: Dict[str, Any]):
        for doc in self.docs:
            if _matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc: Dict[str, Any]):
        for key in self.unique_keys:
            if any(existing.get(key) == doc.get(key) for existing in self.docs):
                raise DuplicateKeyError(f"duplicate {key}")
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: Dict[str, Any], patch: Dict[str, Any]):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(patch.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query: Dict[str, Any]) -> int:
        return sum(1 for doc in self.docs if _matches(doc, query))

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> FakeCursor:
        docs = [dict(doc) for doc in self.docs]
        for stage in pipeline:
            if "$match" in stage:
                docs = [doc for doc in docs if _matches(doc, stage["$match"])]
            elif "$skip" in stage:
                docs = docs[stage["$skip"]:]
            elif "$limit" in stage:
                docs = docs[: stage["$limit"]]
        return FakeCursor(docs)


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}
        self.alive = True

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def command(self, name: str):
        if not self.alive:
            raise ServerSelectionTimeoutError("no servers")
        return {"ok": 1}


class FakeMongoClient:
    def __init__(self):
        self.databases: Dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        return self.databases.setdefault(name, FakeDatabase())

    def close(self):
        self.closed = True


# =============================================================================
# FAKE REDIS
# =============================================================================


class FakeRedis:
    """Keys expire against ``now``, which tests move forward by hand."""

    def __init__(self):
        self.now = 0.0
        self.store: Dict[str, tuple[str, Optional[float]]] = {}
        self.alive = True
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.now >= expires_at:
            del self.store[key]
            return None
        return value

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        self.store[key] = (value, self.now + ex if ex else None)
        return True

    async def delete(self, key: str) -> int:
        return 1 if self.store.pop(key, None) is not None else 0

    async def ping(self) -> bool:
        if not self.alive:
            raise RedisConnectionError("connection refused")
        return True

    async def aclose(self):
        self.closed = True


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def fake_mongo() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(folder_path=str(tmp_path / "files"), db_database="files_manager_test")


@pytest.fixture
def db(fake_mongo, settings) -> DBClient:
    return DBClient(settings.mongo_url, settings.db_database, client=fake_mongo)


@pytest.fixture
def cache(fake_redis, settings) -> RedisClient:
    return RedisClient(settings.redis_url, client=fake_redis)


@pytest.fixture
def storage(settings) -> LocalPayloadStore:
    return LocalPayloadStore(settings.folder_path)


@pytest_asyncio.fixture
async def sessions(db, cache) -> SessionManager:
    await db.connect()
    return SessionManager(db, cache, ttl=60 * 60 * 24)


@pytest.fixture
def users(db) -> UserService:
    return UserService(db)


@pytest.fixture
def file_service(db, storage) -> FileService:
    return FileService(db, storage, page_size=20)


@pytest_asyncio.fixture
async def alice(users, sessions) -> SimpleNamespace:
    user = await users.register(UserCreate(email="alice@x.com", password="secret"))
    token = await sessions.create_session("alice@x.com", "secret")
    return SimpleNamespace(id=user.id, email=user.email, token=token)


@pytest_asyncio.fixture
async def bob(users, sessions) -> SimpleNamespace:
    user = await users.register(UserCreate(email="bob@x.com", password="hunter2"))
    token = await sessions.create_session("bob@x.com", "hunter2")
    return SimpleNamespace(id=user.id, email=user.email, token=token)


@pytest.fixture
def app(settings, db, cache, storage):
    return create_app(settings, db=db, cache=cache, storage=storage)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
