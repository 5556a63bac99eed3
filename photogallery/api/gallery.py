"""Gallery pages: home, listing, upload and admin-only delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from photogallery.api.auth import get_current_identity, require_admin, require_authenticated
from photogallery.core.config import Settings
from photogallery.core.dependencies import get_app_settings, get_blob_store, templates
from photogallery.core.security import is_admin
from photogallery.schemas.auth import Identity
from photogallery.services.blob_store import BlobStore
from photogallery.services.gallery import (
    FileTooLargeError,
    MissingNameError,
    NoFileError,
    StoreFailure,
    delete_image,
    list_gallery,
    upload_image,
)

router = APIRouter()

GALLERY_PATH = "/gallery"


def _to_gallery() -> RedirectResponse:
    return RedirectResponse(GALLERY_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    identity: Annotated[Identity | None, Depends(get_current_identity)],
) -> Response:
    """Landing page; signed-in users go straight to the gallery."""
    if identity is not None:
        return _to_gallery()
    return templates.TemplateResponse(request, "home.html", {})


@router.get(GALLERY_PATH, response_class=HTMLResponse)
def gallery(
    request: Request,
    identity: Annotated[Identity, Depends(require_authenticated)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    """Render every stored image. The store is listed on each request."""
    try:
        images = list_gallery(store)
    except StoreFailure as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return templates.TemplateResponse(
        request,
        "gallery.html",
        {"images": images, "user": identity, "can_delete": is_admin(identity)},
    )


@router.get("/upload", response_class=HTMLResponse)
def upload_form(
    request: Request,
    identity: Annotated[Identity, Depends(require_authenticated)],
) -> Response:
    return templates.TemplateResponse(request, "upload.html", {"user": identity})


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


@router.post("/upload")
async def upload(
    request: Request,
    identity: Annotated[Identity, Depends(require_authenticated)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """
    Store the uploaded file (form field `image`) under a generated name.

    Any signed-in user may upload; only admins may delete. A missing `image`
    field, or one carrying a plain value instead of a file, counts as no file.
    """
    form = await request.form()
    image = form.get("image")
    data: bytes | None = None
    filename: str | None = None
    content_type: str | None = None
    if _is_upload_file(image):
        data = await image.read()
        filename = getattr(image, "filename", None)
        content_type = getattr(image, "content_type", None)
    try:
        await run_in_threadpool(
            upload_image,
            store,
            data,
            filename,
            identity,
            content_type=content_type,
            max_bytes=settings.MAX_UPLOAD_MB * 1024 * 1024,
        )
    except NoFileError as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    except FileTooLargeError as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
    except StoreFailure as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return _to_gallery()


def _delete(store: BlobStore, name: str | None, identity: Identity) -> Response:
    try:
        delete_image(store, name, identity)
    except MissingNameError as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    except StoreFailure as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return _to_gallery()


@router.post("/delete", dependencies=[Depends(require_authenticated)])
def delete(
    identity: Annotated[Identity, Depends(require_admin)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
    name: Annotated[str, Form()] = "",
) -> Response:
    """Delete the object named by form field `name` (admin only)."""
    return _delete(store, name, identity)


@router.post("/delete/{blob_name:path}", dependencies=[Depends(require_authenticated)])
def delete_by_path(
    blob_name: str,
    identity: Annotated[Identity, Depends(require_admin)],
    store: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    return _delete(store, blob_name, identity)
