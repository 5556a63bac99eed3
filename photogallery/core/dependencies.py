"""Request-scoped access to the stores attached to the application."""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from photogallery.core.config import Settings
from photogallery.services.blob_store import BlobStore
from photogallery.services.directory import UserDirectory
from photogallery.services.sessions import SessionStore

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_directory(request: Request) -> UserDirectory:
    return request.app.state.directory


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store
