"""Data models for the phone directory."""

from .schemas import (
    DirectorySnapshot,
    PhoneNumber,
    PhoneType,
    Subscriber,
)

__all__ = [
    "DirectorySnapshot",
    "PhoneNumber",
    "PhoneType",
    "Subscriber",
]
