from milkledger.store.backends import MemoryBackend, RedisBackend, backend_from_settings
from milkledger.store.record_store import RecordStore

__all__ = ["MemoryBackend", "RedisBackend", "RecordStore", "backend_from_settings"]
