"""Schemas for users, roles and authenticated identities."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Coarse authorization label."""

    ADMIN = "admin"
    USER = "user"


class Identity(BaseModel):
    """Authenticated user (username, role) carried by a session."""

    model_config = ConfigDict(frozen=True)

    username: str
    role: Role


class User(BaseModel):
    """
    Directory entry.

    password holds plain text unless PASSWORD_HASHING is enabled, in which
    case it holds a bcrypt hash.
    """

    username: str = Field(..., min_length=1, description="Unique, case-sensitive")
    password: str = Field(..., min_length=1)
    role: Role = Role.USER

    def identity(self) -> Identity:
        return Identity(username=self.username, role=self.role)
