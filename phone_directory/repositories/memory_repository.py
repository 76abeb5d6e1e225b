"""In-memory implementation of DirectoryRepository (no file)."""

from typing import Dict, List, Optional, Sequence

from phone_directory.models.schemas import Subscriber
from phone_directory.repositories.base import DirectoryRepository


class InMemoryDirectoryRepository(DirectoryRepository):
    """Keeps the last saved snapshot in memory.

    Snapshots are deep copies, so later changes to the service's records do
    not leak into what was "stored" until the next save.
    """

    def __init__(self, subscribers: Optional[Sequence[Subscriber]] = None) -> None:
        self._snapshot: Optional[List[Subscriber]] = None
        self._backups: Dict[str, List[Subscriber]] = {}
        if subscribers is not None:
            self._snapshot = self._copy(subscribers)

    @staticmethod
    def _copy(subscribers: Sequence[Subscriber]) -> List[Subscriber]:
        return [subscriber.model_copy(deep=True) for subscriber in subscribers]

    def load(self) -> List[Subscriber]:
        if self._snapshot is None:
            return []
        return self._copy(self._snapshot)

    def save(self, subscribers: Sequence[Subscriber]) -> None:
        self._snapshot = self._copy(subscribers)

    def exists(self) -> bool:
        return self._snapshot is not None

    def delete(self) -> bool:
        if self._snapshot is None:
            return False
        self._snapshot = None
        return True

    def backup(self, target: str) -> bool:
        if self._snapshot is None:
            return False
        self._backups[target] = self._copy(self._snapshot)
        return True

    def get_backup(self, target: str) -> Optional[List[Subscriber]]:
        """Return a copy of a named backup, or None."""
        backup = self._backups.get(target)
        return self._copy(backup) if backup is not None else None
