"""Core configuration, security primitives and database wiring."""

from adminauth.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
