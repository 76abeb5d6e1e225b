"""Configuration for the phone directory."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
