"""Persistence gateways for the subscriber collection."""

from phone_directory.repositories.base import DirectoryRepository
from phone_directory.repositories.json_repository import JsonFileDirectoryRepository
from phone_directory.repositories.memory_repository import InMemoryDirectoryRepository

__all__ = [
    "DirectoryRepository",
    "JsonFileDirectoryRepository",
    "InMemoryDirectoryRepository",
]
