"""In-memory file storage for development and testing."""

from store.storage.port import FileStorage, StorageError, StoredObject


class InMemoryStorage(FileStorage):
    def __init__(self, bucket: str = "product-images", base_url: str = "http://localhost:8000/storage") -> None:
        self.bucket = bucket
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    def upload(self, key: str, content: bytes, content_type: str | None = None) -> StoredObject:
        if key in self.objects:
            raise StorageError(f"Object {key} already exists")
        self.objects[key] = (content, content_type)
        return StoredObject(key=key, public_url=self.public_url(key), content_type=content_type, size=len(content))

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{self.bucket}/{key}"
