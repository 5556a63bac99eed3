"""GET /health: process liveness and blob container reachability."""

from typing import Annotated

from fastapi import APIRouter, Depends

from photogallery.core.config import Settings
from photogallery.core.dependencies import get_app_settings, get_blob_store
from photogallery.schemas.health import HealthResponse
from photogallery.services.blob_store import BlobStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def get_health(
    settings: Annotated[Settings, Depends(get_app_settings)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> HealthResponse:
    """
    Report whether the photo container can be reached.

    Stays 200 when storage is down so the app can still serve login pages;
    callers read the `storage` field instead.
    """
    storage_status = "connected" if store.check_connected() else "disconnected"
    return HealthResponse(environment=settings.APP_ENV, storage=storage_status)
