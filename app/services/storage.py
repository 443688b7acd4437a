import hashlib
import os
import time
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from app.core.exceptions import StorageError
from app.core.logging_config import logger


class DocumentStorage:
    """
    Filesystem storage for uploaded document bytes.

    Files live under ``{root}/{general|tenant_<id>}/<sha256>.<ext>``; the
    database stores the path relative to the root. New files are first
    written to a hidden staging file next to their final location and moved
    into place with ``promote`` once their metadata has been committed.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def build_filename(self, original_filename: str) -> str:
        """
        Derive a stored filename from the original name and the current time.

        The hash is salted with the time, it is not a content hash.
        """
        salted = f"{original_filename}{time.time_ns()}".encode("utf-8")
        file_hash = hashlib.sha256(salted).hexdigest()
        return f"{file_hash}{PurePosixPath(original_filename).suffix}"

    def relative_path(self, filename: str, tenant_id: Optional[int] = None) -> str:
        bucket = f"tenant_{tenant_id}" if tenant_id else "general"
        return str(PurePosixPath(bucket, filename))

    def full_path(self, relative_path: str) -> Path:
        root = self.root.resolve()
        path = (root / relative_path).resolve()
        if root not in path.parents:
            raise StorageError("Ungültiger Dateipfad")
        return path

    def staging_path(self, relative_path: str) -> Path:
        path = self.full_path(relative_path)
        return path.with_name(f".{path.name}.part")

    def stage(self, relative_path: str, content: bytes) -> Path:
        """
        Write bytes to the staging file of ``relative_path``.

        Creates the bucket directory if needed.

        Returns:
            Path of the staging file
        """
        staged = self.staging_path(relative_path)
        try:
            staged.parent.mkdir(parents=True, exist_ok=True)
            staged.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write {staged}: {e}")
            raise StorageError("Datei konnte nicht gespeichert werden") from e
        return staged

    def promote(self, staged: Path, relative_path: str) -> Path:
        """Atomically move a staged file to its final location."""
        target = self.full_path(relative_path)
        try:
            os.replace(staged, target)
        except OSError as e:
            logger.error(f"Failed to move {staged} to {target}: {e}")
            raise StorageError("Datei konnte nicht gespeichert werden") from e
        return target

    def discard(self, staged: Path) -> None:
        try:
            staged.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove staged file {staged}: {e}")

    def read(self, relative_path: str) -> bytes:
        path = self.full_path(relative_path)
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StorageError("Datei konnte nicht gelesen werden") from e

    def delete(self, relative_path: str) -> None:
        """
        Remove a stored file.

        A file that is already missing is an error, not a no-op.
        """
        path = self.full_path(relative_path)
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise StorageError("Datei konnte nicht gelöscht werden") from e
