"""Hosted object storage adapter.

Uploads to a storage REST API that exposes objects at
``/storage/v1/object/<bucket>/<key>`` and serves public buckets from
``/storage/v1/object/public/<bucket>/<key>``.
"""

import requests
import structlog

from store.storage.port import FileStorage, StorageError, StoredObject

logger = structlog.get_logger(__name__)

REQUEST_TIMEOUT = 30


class HostedStorage(FileStorage):
    def __init__(self, base_url: str, api_key: str, bucket: str = "product-images") -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket

    def upload(self, key: str, content: bytes, content_type: str | None = None) -> StoredObject:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
            "Content-Type": content_type or "application/octet-stream",
            "Cache-Control": "3600",
            "x-upsert": "false",
        }
        try:
            response = requests.post(
                f"{self.base_url}/storage/v1/object/{self.bucket}/{key}",
                data=content,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise StorageError(str(exc)) from exc

        if not response.ok:
            logger.error("Upload rejected", key=key, status_code=response.status_code, body=response.text)
            raise StorageError(f"Upload of {key} failed with status {response.status_code}")

        return StoredObject(key=key, public_url=self.public_url(key), content_type=content_type, size=len(content))

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{key}"
