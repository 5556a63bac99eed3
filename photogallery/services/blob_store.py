"""Blob store adapters: Azure Blob Storage and an in-process store for dev/tests."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Protocol
from urllib.parse import quote

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from photogallery.schemas.gallery import ImageObject

if TYPE_CHECKING:
    from photogallery.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class BlobStoreError(Exception):
    """Raised when the underlying store rejects or fails an operation."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.message = message
        self.operation = operation
        super().__init__(message)


class BlobStoreNotConfiguredError(BlobStoreError):
    """Raised when the configured backend is missing required settings."""


class BlobStore(Protocol):
    container_name: str

    def ensure_container(self) -> bool: ...

    def list_objects(self) -> list[ImageObject]: ...

    def put_object(self, name: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None: ...

    def delete_object(self, name: str) -> None: ...

    def check_connected(self) -> bool: ...


class AzureBlobStore:
    """Blob store backed by one Azure Storage container."""

    def __init__(self, container_client: ContainerClient) -> None:
        self.container = container_client
        self.container_name = container_client.container_name

    @classmethod
    def from_connection_string(cls, connection_string: str, container_name: str) -> AzureBlobStore:
        service = BlobServiceClient.from_connection_string(connection_string)
        return cls(service.get_container_client(container_name))

    def ensure_container(self) -> bool:
        """Create the container if missing. Returns True if it was created."""
        try:
            if self.container.exists():
                logger.info("Container %r exists.", self.container_name)
                return False
            self.container.create_container()
        except AzureError as e:
            raise BlobStoreError(str(e), operation="ensure_container") from e
        logger.info("Container %r created.", self.container_name)
        return True

    def list_objects(self) -> list[ImageObject]:
        """List every blob in the container, in the order the service returns them."""
        try:
            return [
                ImageObject(name=blob.name, url=self.container.get_blob_client(blob.name).url)
                for blob in self.container.list_blobs()
            ]
        except AzureError as e:
            raise BlobStoreError(str(e), operation="list") from e

    def put_object(self, name: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        try:
            self.container.upload_blob(
                name=name,
                data=data,
                overwrite=False,
                content_settings=ContentSettings(content_type=content_type),
            )
        except AzureError as e:
            raise BlobStoreError(str(e), operation="put") from e

    def delete_object(self, name: str) -> None:
        try:
            self.container.delete_blob(name)
        except AzureError as e:
            raise BlobStoreError(str(e), operation="delete") from e

    def check_connected(self) -> bool:
        """Verify the container is reachable."""
        try:
            return bool(self.container.exists())
        except AzureError:
            return False


class InMemoryBlobStore:
    """
    Process-local store with the same contract as AzureBlobStore.

    Objects keep insertion order. Putting an existing name or deleting a
    missing one raises BlobStoreError, as the Azure service does.
    """

    def __init__(self, container_name: str = "photos", base_url: str = "http://localhost:3000/blobs") -> None:
        self.container_name = container_name
        self.base_url = base_url.rstrip("/")
        self.container_exists = False
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def url_for(self, name: str) -> str:
        return f"{self.base_url}/{self.container_name}/{quote(name)}"

    def ensure_container(self) -> bool:
        created = not self.container_exists
        self.container_exists = True
        return created

    def list_objects(self) -> list[ImageObject]:
        with self._lock:
            names = list(self._objects)
        return [ImageObject(name=n, url=self.url_for(n)) for n in names]

    def put_object(self, name: str, data: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> None:
        with self._lock:
            if name in self._objects:
                raise BlobStoreError(f"The specified blob already exists: {name}", operation="put")
            self._objects[name] = (bytes(data), content_type)

    def delete_object(self, name: str) -> None:
        with self._lock:
            if name not in self._objects:
                raise BlobStoreError(f"The specified blob does not exist: {name}", operation="delete")
            del self._objects[name]

    def get_object(self, name: str) -> tuple[bytes, str] | None:
        return self._objects.get(name)

    def check_connected(self) -> bool:
        return True


def build_blob_store(settings: Settings) -> BlobStore:
    """Create the blob store selected by BLOB_BACKEND."""
    if settings.BLOB_BACKEND == "memory":
        return InMemoryBlobStore(
            container_name=settings.AZURE_STORAGE_CONTAINER_NAME,
            base_url=settings.MEMORY_BLOB_BASE_URL,
        )
    if settings.AZURE_STORAGE_CONNECTION_STRING is None:
        raise BlobStoreNotConfiguredError(
            "AZURE_STORAGE_CONNECTION_STRING must be set when BLOB_BACKEND=azure"
        )
    return AzureBlobStore.from_connection_string(
        settings.AZURE_STORAGE_CONNECTION_STRING.get_secret_value(),
        settings.AZURE_STORAGE_CONTAINER_NAME,
    )
