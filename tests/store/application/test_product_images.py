from unittest.mock import MagicMock, patch

import pytest
import requests
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from store.product.images import image_key, upload_product_image
from store.product.product import Product
from store.storage import get_storage, set_storage
from store.storage.hosted_adapter import HostedStorage
from store.storage.memory_adapter import InMemoryStorage
from store.storage.port import StorageError

PNG = b"\x89PNG\r\n\x1a\nfake-image"


class TestUploadProductImage:
    def test_upload_links_public_url(self, add_product):
        product = add_product()

        url = upload_product_image(str(product.id), "tea.png", PNG, "image/png")

        assert url.startswith("http://localhost:8000/storage/product-images/")
        assert url.endswith(".png")
        assert current_domain.repository_for(Product).get(product.id).image_url == url

        key = url.rsplit("/", 1)[-1]
        assert get_storage().objects[key] == (PNG, "image/png")

    def test_unsupported_type(self, add_product):
        product = add_product()

        with pytest.raises(ValidationError) as exc:
            upload_product_image(str(product.id), "notes.pdf", b"%PDF", "application/pdf")
        assert "file" in exc.value.messages

    def test_empty_file(self, add_product):
        product = add_product()

        with pytest.raises(ValidationError):
            upload_product_image(str(product.id), "tea.png", b"", "image/png")

    def test_unknown_product_uploads_nothing(self):
        storage = InMemoryStorage()
        set_storage(storage)

        with pytest.raises(ObjectNotFoundError):
            upload_product_image("missing", "tea.png", PNG, "image/png")
        assert storage.objects == {}


class TestImageKey:
    def test_keeps_extension(self):
        assert image_key("Tea.JPG").endswith(".jpg")

    def test_missing_extension(self):
        assert image_key("tea").endswith(".bin")

    def test_keys_are_unique(self):
        assert image_key("a.png") != image_key("a.png")


class TestHostedStorage:
    def test_upload_posts_to_bucket(self):
        storage = HostedStorage("https://files.example.com/", "service-key", bucket="product-images")
        response = MagicMock(ok=True, status_code=200)

        with patch("store.storage.hosted_adapter.requests.post", return_value=response) as post:
            stored = storage.upload("abc.png", PNG, "image/png")

        assert post.call_args.args[0] == "https://files.example.com/storage/v1/object/product-images/abc.png"
        assert post.call_args.kwargs["headers"]["Content-Type"] == "image/png"
        assert stored.public_url == "https://files.example.com/storage/v1/object/public/product-images/abc.png"
        assert stored.size == len(PNG)

    def test_rejected_upload(self):
        storage = HostedStorage("https://files.example.com", "service-key")
        response = MagicMock(ok=False, status_code=409, text="Duplicate")

        with patch("store.storage.hosted_adapter.requests.post", return_value=response):
            with pytest.raises(StorageError):
                storage.upload("abc.png", PNG, "image/png")

    def test_network_failure(self):
        storage = HostedStorage("https://files.example.com", "service-key")

        with patch(
            "store.storage.hosted_adapter.requests.post",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(StorageError):
                storage.upload("abc.png", PNG, "image/png")
