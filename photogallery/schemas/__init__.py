"""Pydantic request/response schemas."""

from photogallery.schemas.auth import Identity, Role, User
from photogallery.schemas.gallery import ImageObject, UploadResult
from photogallery.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "Identity",
    "ImageObject",
    "Role",
    "UploadResult",
    "User",
]
