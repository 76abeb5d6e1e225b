"""Abstract persistence gateway for the subscriber collection."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from phone_directory.models.schemas import Subscriber


class DirectoryRepository(ABC):
    """Durable storage of the whole subscriber collection as one snapshot."""

    @abstractmethod
    def load(self) -> List[Subscriber]:
        """Load the stored collection.

        Returns:
            Subscribers in stored order, or an empty list if no snapshot exists

        Raises:
            PersistenceError: If the snapshot exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, subscribers: Sequence[Subscriber]) -> None:
        """Replace the stored snapshot with the given collection.

        Raises:
            PersistenceError: If the snapshot cannot be written
        """
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check whether a snapshot is currently stored."""
        pass

    @abstractmethod
    def delete(self) -> bool:
        """Delete the stored snapshot.

        Returns:
            True if a snapshot was deleted, False if there was none
        """
        pass

    def backup(self, target: str) -> bool:
        """Copy the current snapshot to ``target``.

        Returns:
            True if the backup was written, False otherwise
        """
        return False
