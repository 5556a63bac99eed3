"""In-memory user directory: registration and credential lookup."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from photogallery.core.security import hash_password, verify_password
from photogallery.schemas.auth import Identity, Role, User

if TYPE_CHECKING:
    from photogallery.core.config import Settings

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Raised when a registration request cannot be accepted."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingFieldError(RegistrationError):
    """Raised when username, password or role is empty."""


class InvalidRoleError(RegistrationError):
    """Raised when the requested role is not a known Role."""


class DuplicateUsernameError(RegistrationError):
    """Raised when the username is already taken (case-sensitive)."""


def _present(value: object) -> bool:
    """False for None, empty and whitespace-only strings."""
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


class UserDirectory:
    """
    Process-lifetime mapping of username -> User.

    Registration's duplicate check and insert run under one lock so that two
    concurrent registrations for the same new username cannot both succeed.
    """

    def __init__(
        self,
        users: Iterable[User] = (),
        *,
        hash_passwords: bool = False,
    ) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()
        self.hash_passwords = hash_passwords
        for user in users:
            self.register(user.username, user.password, user.role)

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def get(self, username: str) -> User | None:
        return self._users.get(username)

    def register(self, username: str, password: str, role: Role | str) -> User:
        """
        Add a new user and return it.

        Raises MissingFieldError, InvalidRoleError or DuplicateUsernameError.
        """
        if not _present(username) or not _present(password) or not _present(role):
            raise MissingFieldError("Username, password and role are required.")
        try:
            parsed_role = Role(role)
        except ValueError as e:
            raise InvalidRoleError(f"Unknown role: {role}") from e

        stored_password = hash_password(password) if self.hash_passwords else password
        with self._lock:
            if username in self._users:
                raise DuplicateUsernameError("Username already exists.")
            user = User(username=username, password=stored_password, role=parsed_role)
            self._users[username] = user
        logger.info(
            "User registered",
            extra={"username": username, "role": parsed_role.value},
        )
        return user

    def authenticate(self, username: str, password: str) -> Identity | None:
        """Return the identity for an exact (username, password) match, else None."""
        user = self._users.get(username)
        if user is None:
            return None
        if not verify_password(password, user.password, hashed=self.hash_passwords):
            return None
        return user.identity()


def build_directory(settings: Settings) -> UserDirectory:
    """Create the directory, seeded with the configured admin account if any."""
    directory = UserDirectory(hash_passwords=settings.PASSWORD_HASHING)
    if settings.SEED_ADMIN_USERNAME:
        directory.register(
            settings.SEED_ADMIN_USERNAME,
            settings.SEED_ADMIN_PASSWORD.get_secret_value(),
            Role.ADMIN,
        )
    return directory
