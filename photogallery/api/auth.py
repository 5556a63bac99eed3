"""Registration, login and logout pages plus the auth dependencies (require_authenticated, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from photogallery.core.config import Settings
from photogallery.core.dependencies import get_app_settings, get_directory, get_sessions, templates
from photogallery.core.security import create_session_cookie, decode_session_cookie, is_admin
from photogallery.schemas.auth import Identity, Role
from photogallery.services.directory import (
    DuplicateUsernameError,
    RegistrationError,
    UserDirectory,
)
from photogallery.services.sessions import SessionStore

logger = logging.getLogger(__name__)
router = APIRouter()

LOGIN_PATH = "/login"


class LoginRequired(Exception):
    """Raised by require_authenticated; converted to a redirect to the login page."""

    def __init__(self, path: str = LOGIN_PATH) -> None:
        self.path = path
        super().__init__(path)


def _session_token(request: Request, settings: Settings) -> str | None:
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not cookie:
        return None
    return decode_session_cookie(cookie, settings.SESSION_SECRET.get_secret_value())


def get_current_identity(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    sessions: Annotated[SessionStore, Depends(get_sessions)],
) -> Identity | None:
    """Dependency: identity bound to the request's session cookie, or None."""
    return sessions.get(_session_token(request, settings))


def require_authenticated(
    identity: Annotated[Identity | None, Depends(get_current_identity)],
) -> Identity:
    """Dependency: require a valid session. Redirects to the login page otherwise."""
    if identity is None:
        raise LoginRequired()
    return identity


def require_admin(
    identity: Annotated[Identity | None, Depends(get_current_identity)],
) -> Identity:
    """Dependency: require role 'admin'. Raises 403 for anyone else, including anonymous callers."""
    if identity is None or not is_admin(identity):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied.",
        )
    return identity


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request) -> Response:
    return templates.TemplateResponse(
        request, "register.html", {"error": None, "roles": list(Role)}
    )


@router.post("/register", response_class=HTMLResponse)
def register(
    request: Request,
    directory: Annotated[UserDirectory, Depends(get_directory)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = "",
) -> Response:
    """Create a user and send them to the login page; re-render the form on error."""
    try:
        directory.register(username, password, role)
    except RegistrationError as e:
        status_code = (
            status.HTTP_409_CONFLICT
            if isinstance(e, DuplicateUsernameError)
            else status.HTTP_400_BAD_REQUEST
        )
        logger.info("Registration rejected", extra={"username": username, "reason": e.message})
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error": e.message, "roles": list(Role), "username": username},
            status_code=status_code,
        )
    return RedirectResponse(f"{LOGIN_PATH}?registered=1", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login", response_class=HTMLResponse)
def login_form(
    request: Request,
    error: str | None = None,
    registered: str | None = None,
) -> Response:
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": bool(error), "registered": bool(registered)},
    )


@router.post("/login")
def login(
    request: Request,
    directory: Annotated[UserDirectory, Depends(get_directory)],
    sessions: Annotated[SessionStore, Depends(get_sessions)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """Check credentials; on success start a session and set its cookie."""
    identity = directory.authenticate(username, password)
    if identity is None:
        logger.info("Login failed", extra={"username": username})
        return RedirectResponse(f"{LOGIN_PATH}?error=1", status_code=status.HTTP_303_SEE_OTHER)

    # A fresh login replaces whatever session the browser already held.
    sessions.destroy(_session_token(request, settings))
    token = sessions.create(identity)
    cookie = create_session_cookie(
        token,
        settings.SESSION_SECRET.get_secret_value(),
        settings.SESSION_EXPIRE_MINUTES,
    )
    response = RedirectResponse("/gallery", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        cookie,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info("Login succeeded", extra={"username": identity.username, "role": identity.role.value})
    return response


@router.get("/logout")
def logout(
    request: Request,
    sessions: Annotated[SessionStore, Depends(get_sessions)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RedirectResponse:
    """Destroy the current session if there is one. Safe to call when logged out."""
    sessions.destroy(_session_token(request, settings))
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
