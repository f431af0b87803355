import logging
from datetime import timezone
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from prometheus_client import Counter

from .errors import StorageError
from .models import TelemetryReading
from .settings import Settings

logger = logging.getLogger(__name__)

mongo_errors = Counter('mongo_errors_total', 'Total number of MongoDB operation errors', ['operation'])

class MongoTelemetryStore:
    """Append-only access to the telemetry collection.

    Driver exceptions never leave this class; they are re-raised as ``StorageError``.
    """

    def __init__(self, collection, client=None):
        self.collection = collection
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoTelemetryStore":
        timeout = settings.storage_timeout_ms
        client = AsyncIOMotorClient(
            settings.mongodb_uri,
            tz_aware=True,
            serverSelectionTimeoutMS=timeout,
            connectTimeoutMS=timeout,
            socketTimeoutMS=timeout,
        )
        db = client[settings.mongo_db]
        return cls(db[settings.telemetry_collection], client=client)

    def _fail(self, operation: str, exc: Exception) -> StorageError:
        mongo_errors.labels(operation=operation).inc()
        logger.error(f"MongoDB {operation} failed: {exc}")
        return StorageError(str(exc))

    async def insert(self, reading: TelemetryReading) -> str:
        try:
            result = await self.collection.insert_one(reading.model_dump())
        except PyMongoError as e:
            raise self._fail("insert", e) from e
        return str(result.inserted_id)

    async def list_all(self) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find().sort("timestamp", DESCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._fail("find", e) from e
        for document in documents:
            ts = document["timestamp"]
            if ts.tzinfo is None:
                document["timestamp"] = ts.replace(tzinfo=timezone.utc)
        return documents

    async def count(self) -> int:
        try:
            return await self.collection.count_documents({})
        except PyMongoError as e:
            raise self._fail("count", e) from e

    async def ping(self):
        if self.client is None:
            return
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            raise self._fail("ping", e) from e

    def close(self):
        if self.client is not None:
            self.client.close()
