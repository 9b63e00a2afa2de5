import json
import logging
from typing import Any, Dict, List

from redis import Redis
from milkledger.core.config import settings
from milkledger.core.errors import StorageCorrupted

logger = logging.getLogger(__name__)

# Each collection is stored wholesale as one JSON list under its own key.

class MemoryBackend:
    """Key-value backend kept in process; state is lost on restart."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def load(self, collection: str) -> List[Dict[str, Any]]:
        raw = self._data.get(collection)
        return json.loads(raw) if raw else []

    def save(self, collection: str, records: List[Dict[str, Any]]):
        self._data[collection] = json.dumps(records)


class RedisBackend:
    def __init__(self, client: Redis, prefix: str = "milkledger"):
        self.client = client
        self.prefix = prefix

    def key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}"

    def load(self, collection: str) -> List[Dict[str, Any]]:
        raw = self.client.get(self.key(collection))
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.error("Unreadable %s payload at %s", collection, self.key(collection))
            raise StorageCorrupted(f"Stored {collection} at {self.key(collection)} is unreadable") from e
        if not isinstance(records, list):
            logger.error("Expected a list for %s at %s", collection, self.key(collection))
            raise StorageCorrupted(f"Stored {collection} at {self.key(collection)} is not a list")
        return records

    def save(self, collection: str, records: List[Dict[str, Any]]):
        self.client.set(self.key(collection), json.dumps(records))


def get_client() -> Redis:
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)

def backend_from_settings():
    if settings.STORAGE_BACKEND == "redis":
        return RedisBackend(get_client(), prefix=settings.STORE_PREFIX)
    if settings.STORAGE_BACKEND != "memory":
        raise ValueError(f"Unknown STORAGE_BACKEND {settings.STORAGE_BACKEND!r}")
    return MemoryBackend()
