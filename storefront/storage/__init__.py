"""
Storage: local durable key-value state.

    from storefront import storage as St

    storage = St.open_storage(settings.storage_url)
    match storage.get("cart"):
        case Ok(raw):
            ...
        case Error(e):
            ...
"""

from storefront.storage._store import (
    Storage,
    StorageError,
    FunctionalStorage,
    storage_from,
    MemoryStorage,
)
from storefront.storage._sqlalchemy import (
    KeyValueTable,
    SQLAlchemyStorage,
    open_storage,
)

__all__ = (
    # Protocol
    "Storage",
    "StorageError",
    # Backends
    "FunctionalStorage",
    "storage_from",
    "MemoryStorage",
    "KeyValueTable",
    "SQLAlchemyStorage",
    "open_storage",
)
