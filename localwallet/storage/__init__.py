from localwallet.storage.database import build_engine, build_session_factory, drop_db, init_db
from localwallet.storage.slots import (
    InMemoryStorageSlot,
    SqlStorageSlot,
    StorageError,
    StorageSlot,
)

__all__ = [
    "InMemoryStorageSlot",
    "SqlStorageSlot",
    "StorageError",
    "StorageSlot",
    "build_engine",
    "build_session_factory",
    "drop_db",
    "init_db",
]
