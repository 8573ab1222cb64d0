"""Durable store interface and the local filesystem implementation.

The checkpoint manager only talks to storage through DurableStore, so a
remote backend (HDFS, object storage) can be dropped in as long as it gives
list-after-write visibility.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Protocol, runtime_checkable

from loguru import logger

from ..errors import StorageError


@runtime_checkable
class DurableStore(Protocol):
    """Hierarchical, path-addressed blob storage."""

    def exists(self, path: str) -> bool: ...

    def list_children(self, path: str) -> List[str]: ...

    def read_blob(self, path: str) -> bytes: ...

    def write_blob(self, path: str, data: bytes) -> None: ...

    def delete_blob(self, path: str) -> None: ...


class LocalFileStore:
    """DurableStore backed by the local filesystem.

    OSErrors are re-raised as StorageError. Writes go through a temp file
    in the target directory so a blob is either complete or absent.
    """

    def exists(self, path: str) -> bool:
        try:
            return Path(path).exists()
        except OSError as e:
            raise StorageError(f"Failed to stat {path}: {e}") from e

    def list_children(self, path: str) -> List[str]:
        try:
            return [child.name for child in Path(path).iterdir()]
        except OSError as e:
            raise StorageError(f"Failed to list {path}: {e}") from e

    def read_blob(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write_blob(self, path: str, data: bytes) -> None:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Write to temp file in same directory (for atomic rename)
            fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def delete_blob(self, path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
