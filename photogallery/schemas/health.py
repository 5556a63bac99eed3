"""Response model for GET /health."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus whether the photo container answered."""

    status: Literal["ok"] = Field(default="ok", description="Always ok while the process serves requests")
    environment: str = Field(description="APP_ENV the process was started with")
    storage: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Result of probing the blob container, if it was probed",
    )
