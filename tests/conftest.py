import uuid

import pytest
from fastapi.testclient import TestClient

from telemetry_api.errors import StorageError
from telemetry_api.main import create_app
from telemetry_api.settings import Settings


class InMemoryTelemetryStore:
    """Same interface as MongoTelemetryStore, backed by a list."""

    def __init__(self):
        self.documents = []
        self.available = True
        self.closed = False

    def _check(self):
        if not self.available:
            raise StorageError("connection refused")

    async def insert(self, reading):
        self._check()
        doc = reading.model_dump()
        doc["_id"] = uuid.uuid4().hex[:24]
        self.documents.append(doc)
        return doc["_id"]

    async def list_all(self):
        self._check()
        return sorted(self.documents, key=lambda d: d["timestamp"], reverse=True)

    async def count(self):
        self._check()
        return len(self.documents)

    async def ping(self):
        self._check()

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(_env_file=None, mongodb_uri="mongodb://unused:27017")


@pytest.fixture
def store():
    return InMemoryTelemetryStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
