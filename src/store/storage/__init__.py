"""File storage factory.

Provides get_storage() / set_storage() to swap implementations:
- InMemoryStorage for development and testing
- HostedStorage when STORAGE_URL is configured
"""

import os

from store.storage.hosted_adapter import HostedStorage
from store.storage.memory_adapter import InMemoryStorage
from store.storage.port import FileStorage

_current_storage: FileStorage | None = None


def get_storage() -> FileStorage:
    """Return the current file storage, building it from the environment on first use."""
    global _current_storage
    if _current_storage is None:
        bucket = os.environ.get("STORAGE_BUCKET", "product-images")
        storage_url = os.environ.get("STORAGE_URL")
        if storage_url:
            _current_storage = HostedStorage(storage_url, os.environ.get("STORAGE_API_KEY", ""), bucket=bucket)
        else:
            _current_storage = InMemoryStorage(bucket=bucket)
    return _current_storage


def set_storage(storage: FileStorage) -> None:
    """Override the active file storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to the default storage."""
    global _current_storage
    _current_storage = None
