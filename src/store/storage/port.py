"""File storage port (abstract interface).

Product images are uploaded as opaque bytes under a caller-chosen key and
served back from a public URL.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """The storage backend rejected an upload or could not be reached."""


@dataclass(frozen=True)
class StoredObject:
    key: str
    public_url: str
    content_type: str | None = None
    size: int = 0


class FileStorage(ABC):
    """Abstract file storage interface."""

    @abstractmethod
    def upload(self, key: str, content: bytes, content_type: str | None = None) -> StoredObject:
        """Store ``content`` under ``key``."""
        ...

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return the URL the object is served from."""
        ...
