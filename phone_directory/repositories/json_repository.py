"""JSON snapshot file implementation of DirectoryRepository."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError as SchemaError

from phone_directory.config.logging import LoggingService
from phone_directory.config.settings import settings
from phone_directory.exceptions import PersistenceError
from phone_directory.models.schemas import DirectorySnapshot, Subscriber
from phone_directory.repositories.base import DirectoryRepository

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)

PathLike = Union[str, os.PathLike]


class JsonFileDirectoryRepository(DirectoryRepository):
    """Stores the directory as a single UTF-8 JSON snapshot file.

    Every save writes the whole collection to a temporary file in the
    target directory and then renames it over the snapshot, so a crash
    mid-write leaves the previous snapshot intact.
    """

    def __init__(self, path: Optional[PathLike] = None, backup_dir: Optional[PathLike] = None):
        self.path = Path(path if path is not None else settings.data_file)
        self.backup_dir = Path(backup_dir if backup_dir is not None else settings.backup_dir)

    def _resolve_backup_target(self, target: PathLike) -> Path:
        """Resolve a relative backup target against the backup directory."""
        target_path = Path(target)
        if target_path.is_absolute() or target_path.parent != Path("."):
            return target_path
        return self.backup_dir / target_path

    def load(self) -> List[Subscriber]:
        """Load subscribers from the snapshot file."""
        if not self.path.exists():
            logger.info(
                "Snapshot file not found, starting empty",
                extra={"path": str(self.path), "operation": "load"}
            )
            return []

        try:
            data = self.path.read_text(encoding="utf-8")
            snapshot = DirectorySnapshot.model_validate_json(data)

        except SchemaError as e:
            logger.error(
                "Failed to parse stored snapshot",
                extra={"path": str(self.path), "error": str(e), "operation": "load"}
            )
            raise PersistenceError("Corrupted data in snapshot file", path=str(self.path)) from e

        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                "Failed to read snapshot file",
                extra={"path": str(self.path), "error": str(e), "operation": "load"}
            )
            raise PersistenceError(f"Failed to read snapshot: {e}", path=str(self.path)) from e

        logger.info(
            "Snapshot loaded",
            extra={
                "path": str(self.path),
                "operation": "load",
                "subscriber_count": len(snapshot.subscribers),
            }
        )
        return list(snapshot.subscribers)

    def save(self, subscribers: Sequence[Subscriber]) -> None:
        """Write all subscribers to the snapshot file."""
        snapshot = DirectorySnapshot(subscribers=list(subscribers))
        payload = snapshot.model_dump_json(indent=2)

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=self.path.parent
            )
            os.close(fd)
            with open(tmp_name, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None

        except OSError as e:
            logger.error(
                "Failed to write snapshot file",
                extra={"path": str(self.path), "error": str(e), "operation": "save"}
            )
            raise PersistenceError(f"Failed to save subscribers: {e}", path=str(self.path)) from e

        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(
            "Snapshot saved",
            extra={
                "path": str(self.path),
                "operation": "save",
                "subscriber_count": len(snapshot.subscribers),
            }
        )

    def exists(self) -> bool:
        """Check whether the snapshot file exists."""
        return self.path.exists()

    def delete(self) -> bool:
        """Delete the snapshot file."""
        if not self.path.exists():
            return False

        try:
            self.path.unlink()
        except OSError as e:
            logging_service.log_error(
                "Failed to delete snapshot file",
                e,
                operation="delete",
                path=str(self.path)
            )
            return False

        logger.info(
            "Snapshot file deleted",
            extra={"path": str(self.path), "operation": "delete"}
        )
        return True

    def backup(self, target: PathLike) -> bool:
        """Byte-copy the current snapshot file to ``target``."""
        target_path = self._resolve_backup_target(target)

        if not self.path.exists():
            logger.warning(
                "Snapshot file does not exist for backup",
                extra={"path": str(self.path), "operation": "backup"}
            )
            return False

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.path, target_path)
        except OSError as e:
            logging_service.log_error(
                "Failed to create snapshot backup",
                e,
                operation="backup",
                path=str(self.path),
                target=str(target_path)
            )
            return False

        logger.info(
            "Snapshot backup created",
            extra={"path": str(self.path), "target": str(target_path), "operation": "backup"}
        )
        return True
