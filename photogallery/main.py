"""FastAPI application factory. No business logic; only wiring, lifespan and error handlers."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from photogallery.api import router
from photogallery.api.auth import LoginRequired
from photogallery.core.config import Settings, get_settings
from photogallery.services.blob_store import BlobStore, BlobStoreError, build_blob_store
from photogallery.services.directory import UserDirectory, build_directory
from photogallery.services.sessions import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Make sure the blob container exists before serving. Failure is logged, not fatal."""
    store: BlobStore = app.state.blob_store
    try:
        store.ensure_container()
    except BlobStoreError as e:
        logger.exception(
            "Could not ensure blob container",
            extra={"container": store.container_name, "reason": e.message[:500]},
        )
    yield


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(exc.path, status_code=status.HTTP_303_SEE_OTHER)


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Server error: %s %s", request.method, request.url.path)
    return PlainTextResponse(
        "Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def create_app(
    settings: Settings | None = None,
    *,
    blob_store: BlobStore | None = None,
    directory: UserDirectory | None = None,
    sessions: SessionStore | None = None,
) -> FastAPI:
    """
    Build the application with its stores.

    Anything not passed in is built from settings, so tests can inject
    in-memory stores and production reads everything from the environment.
    """
    if settings is None:
        settings = get_settings()
    app = FastAPI(
        title="Photo Gallery",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.blob_store = blob_store if blob_store is not None else build_blob_store(settings)
    app.state.directory = directory if directory is not None else build_directory(settings)
    app.state.sessions = (
        sessions
        if sessions is not None
        else SessionStore(ttl=timedelta(minutes=settings.SESSION_EXPIRE_MINUTES))
    )

    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router)
    return app


def get_app() -> FastAPI:
    """Factory entrypoint for uvicorn (`uvicorn photogallery.main:get_app --factory`)."""
    load_dotenv()
    return create_app()
