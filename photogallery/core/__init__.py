"""Core app configuration, security helpers and store dependencies."""

from photogallery.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
