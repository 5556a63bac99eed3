"""Unit tests for photogallery.services.blob_store: Azure adapter (mocked SDK) and in-memory store."""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from photogallery.core.config import Settings
from photogallery.services.blob_store import (
    AzureBlobStore,
    BlobStoreError,
    BlobStoreNotConfiguredError,
    InMemoryBlobStore,
    build_blob_store,
)


def _container(names: list[str] | None = None) -> MagicMock:
    """Build a MagicMock ContainerClient listing the given blob names."""
    container = MagicMock()
    container.container_name = "photos"
    container.list_blobs.return_value = [SimpleNamespace(name=n) for n in (names or [])]
    container.get_blob_client.side_effect = lambda name: SimpleNamespace(
        url=f"https://acct.blob.core.windows.net/photos/{name}"
    )
    return container


class TestAzureEnsureContainer(unittest.TestCase):
    """ensure_container creates only when missing."""

    def test_creates_when_missing(self) -> None:
        container = _container()
        container.exists.return_value = False
        self.assertTrue(AzureBlobStore(container).ensure_container())
        container.create_container.assert_called_once()

    def test_noop_when_present(self) -> None:
        container = _container()
        container.exists.return_value = True
        self.assertFalse(AzureBlobStore(container).ensure_container())
        container.create_container.assert_not_called()

    def test_error_wrapped(self) -> None:
        container = _container()
        container.exists.side_effect = HttpResponseError(message="auth failed")
        with self.assertRaises(BlobStoreError) as ctx:
            AzureBlobStore(container).ensure_container()
        self.assertEqual(ctx.exception.operation, "ensure_container")


class TestAzureOperations(unittest.TestCase):
    """list/put/delete map to the container client and wrap AzureError."""

    def test_list_maps_names_to_urls_in_order(self) -> None:
        store = AzureBlobStore(_container(["b.jpg", "a.png"]))
        images = store.list_objects()
        self.assertEqual([i.name for i in images], ["b.jpg", "a.png"])
        self.assertEqual(images[1].url, "https://acct.blob.core.windows.net/photos/a.png")

    def test_list_failure_is_all_or_nothing(self) -> None:
        container = _container()

        def failing_listing():
            yield SimpleNamespace(name="a.png")
            raise HttpResponseError(message="connection reset")

        container.list_blobs.return_value = failing_listing()
        with self.assertRaises(BlobStoreError):
            AzureBlobStore(container).list_objects()

    def test_put_uploads_without_overwrite(self) -> None:
        container = _container()
        AzureBlobStore(container).put_object("1.png", b"data", "image/png")
        kwargs = container.upload_blob.call_args.kwargs
        self.assertEqual(kwargs["name"], "1.png")
        self.assertEqual(kwargs["data"], b"data")
        self.assertFalse(kwargs["overwrite"])
        self.assertEqual(kwargs["content_settings"].content_type, "image/png")

    def test_put_error_wrapped(self) -> None:
        container = _container()
        container.upload_blob.side_effect = HttpResponseError(message="quota")
        with self.assertRaises(BlobStoreError):
            AzureBlobStore(container).put_object("1.png", b"data")

    def test_delete_missing_blob_wrapped(self) -> None:
        container = _container()
        container.delete_blob.side_effect = ResourceNotFoundError(message="BlobNotFound")
        with self.assertRaises(BlobStoreError) as ctx:
            AzureBlobStore(container).delete_object("gone.png")
        self.assertEqual(ctx.exception.operation, "delete")

    def test_check_connected(self) -> None:
        container = _container()
        container.exists.return_value = True
        self.assertTrue(AzureBlobStore(container).check_connected())
        container.exists.side_effect = HttpResponseError(message="down")
        self.assertFalse(AzureBlobStore(container).check_connected())


class TestInMemoryBlobStore(unittest.TestCase):
    """In-memory store follows the same contract."""

    def setUp(self) -> None:
        self.store = InMemoryBlobStore(container_name="photos", base_url="http://test/blobs/")

    def test_put_list_delete(self) -> None:
        self.store.put_object("1.png", b"one", "image/png")
        self.store.put_object("2.jpg", b"two")
        self.assertEqual([i.name for i in self.store.list_objects()], ["1.png", "2.jpg"])
        self.assertEqual(self.store.list_objects()[0].url, "http://test/blobs/photos/1.png")
        self.assertEqual(self.store.get_object("1.png"), (b"one", "image/png"))
        self.store.delete_object("1.png")
        self.assertEqual([i.name for i in self.store.list_objects()], ["2.jpg"])

    def test_put_existing_name_fails(self) -> None:
        self.store.put_object("1.png", b"one")
        with self.assertRaises(BlobStoreError):
            self.store.put_object("1.png", b"again")

    def test_delete_missing_fails(self) -> None:
        with self.assertRaises(BlobStoreError):
            self.store.delete_object("missing.png")

    def test_ensure_container(self) -> None:
        self.assertTrue(self.store.ensure_container())
        self.assertFalse(self.store.ensure_container())


class TestBuildBlobStore(unittest.TestCase):
    """build_blob_store picks the backend from settings."""

    def test_memory_backend(self) -> None:
        store = build_blob_store(Settings(_env_file=None, BLOB_BACKEND="memory"))
        self.assertIsInstance(store, InMemoryBlobStore)

    def test_azure_requires_connection_string(self) -> None:
        with self.assertRaises(BlobStoreNotConfiguredError):
            build_blob_store(Settings(_env_file=None, BLOB_BACKEND="azure", AZURE_STORAGE_CONNECTION_STRING=None))

    def test_azure_backend_uses_connection_string(self) -> None:
        settings = Settings(
            _env_file=None,
            BLOB_BACKEND="azure",
            AZURE_STORAGE_CONNECTION_STRING="UseDevelopmentStorage=true",
            AZURE_STORAGE_CONTAINER_NAME="pics",
        )
        with patch("photogallery.services.blob_store.BlobServiceClient") as service_cls:
            service_cls.from_connection_string.return_value.get_container_client.return_value = _container()
            store = build_blob_store(settings)
        service_cls.from_connection_string.assert_called_once_with("UseDevelopmentStorage=true")
        service_cls.from_connection_string.return_value.get_container_client.assert_called_once_with("pics")
        self.assertIsInstance(store, AzureBlobStore)


if __name__ == "__main__":
    unittest.main()
