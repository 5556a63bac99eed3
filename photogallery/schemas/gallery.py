"""Schemas for gallery listing and upload results."""

from pydantic import BaseModel, Field


class ImageObject(BaseModel):
    """A stored image: its storage key and public URL."""

    name: str = Field(..., description="Blob name (storage key)")
    url: str = Field(..., description="Public URL derived from container and name")


class UploadResult(BaseModel):
    """Outcome of a successful upload."""

    name: str = Field(..., description="Generated blob name")
    size: int = Field(..., ge=0, description="Payload size in bytes")
    content_type: str = Field(default="application/octet-stream")
