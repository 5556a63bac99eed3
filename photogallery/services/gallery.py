"""Gallery operations over a blob store: list, upload, delete."""

import logging
import os
import secrets
import time

from photogallery.schemas.auth import Identity
from photogallery.schemas.gallery import ImageObject, UploadResult
from photogallery.services.blob_store import DEFAULT_CONTENT_TYPE, BlobStore, BlobStoreError

logger = logging.getLogger(__name__)

# Random hex chars appended to the millisecond timestamp in generated names.
NAME_SUFFIX_BYTES = 4


class GalleryError(Exception):
    """Base for gallery operation failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NoFileError(GalleryError):
    """Raised when an upload carries no file."""


class MissingNameError(GalleryError):
    """Raised when a delete request names no object."""


class FileTooLargeError(GalleryError):
    """Raised when an upload exceeds the configured size limit."""


class StoreFailure(GalleryError):
    """Raised when the blob store fails; message is safe to show to users."""


def generate_blob_name(original_name: str, now_ms: int | None = None) -> str:
    """
    Storage key for an upload: <epoch millis>-<random hex><extension>.

    The random part keeps names distinct for uploads within the same millisecond.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    ext = os.path.splitext(os.path.basename(original_name or ""))[1].lower()
    return f"{now_ms}-{secrets.token_hex(NAME_SUFFIX_BYTES)}{ext}"


def list_gallery(store: BlobStore) -> list[ImageObject]:
    """Fresh listing of every stored image, in store order. All or nothing."""
    try:
        return list(store.list_objects())
    except BlobStoreError as e:
        logger.exception("Error listing blobs: %s", e.message)
        raise StoreFailure("Error retrieving images.") from e


def upload_image(
    store: BlobStore,
    data: bytes | None,
    original_name: str | None,
    identity: Identity,
    content_type: str | None = None,
    max_bytes: int | None = None,
) -> UploadResult:
    """Write one uploaded file to the store under a generated name."""
    if data is None or not original_name:
        raise NoFileError("No file uploaded.")
    if max_bytes is not None and len(data) > max_bytes:
        raise FileTooLargeError(
            f"File size must not exceed {max_bytes // (1024 * 1024)} MB."
        )
    name = generate_blob_name(original_name)
    content_type = content_type or DEFAULT_CONTENT_TYPE
    try:
        store.put_object(name, data, content_type)
    except BlobStoreError as e:
        logger.exception("Upload error: %s", e.message)
        raise StoreFailure("Error uploading image.") from e
    logger.info(
        "Image uploaded",
        extra={"blob_name": name, "size": len(data), "username": identity.username},
    )
    return UploadResult(name=name, size=len(data), content_type=content_type)


def delete_image(store: BlobStore, name: str | None, identity: Identity) -> None:
    """Remove one object. Callers must have checked the admin role."""
    if name is None or not name.strip():
        raise MissingNameError("No image name given.")
    try:
        store.delete_object(name)
    except BlobStoreError as e:
        logger.exception("Delete error: %s", e.message)
        raise StoreFailure("Error deleting image.") from e
    logger.info("Image deleted", extra={"blob_name": name, "username": identity.username})
