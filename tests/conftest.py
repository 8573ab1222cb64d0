"""Pytest fixtures for roundkeeper tests."""

import pytest
import torch.nn as nn
from pathlib import Path
from typing import List, Set

# Add parent directory to path for imports
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from roundkeeper.checkpoint import LocalFileStore  # noqa: E402
from roundkeeper.errors import StorageError  # noqa: E402


class FaultyStore(LocalFileStore):
    """LocalFileStore that fails on selected operations."""

    def __init__(self):
        self.fail_write = False
        self.fail_read = False
        self.fail_delete: Set[str] = set()
        self.crash_on_delete = False
        self.deleted: List[str] = []

    def write_blob(self, path: str, data: bytes) -> None:
        if self.fail_write:
            raise StorageError(f"injected write failure for {path}")
        super().write_blob(path, data)

    def read_blob(self, path: str) -> bytes:
        if self.fail_read:
            raise StorageError(f"injected read failure for {path}")
        return super().read_blob(path)

    def delete_blob(self, path: str) -> None:
        if self.crash_on_delete:
            # Simulates the process dying between write and cleanup
            raise KeyboardInterrupt("injected crash")
        if Path(path).name in self.fail_delete:
            raise StorageError(f"injected delete failure for {path}")
        super().delete_blob(path)
        self.deleted.append(path)


@pytest.fixture
def store():
    """Local filesystem store."""
    return LocalFileStore()


@pytest.fixture
def faulty_store():
    """Store with injectable failures."""
    return FaultyStore()


@pytest.fixture
def tmp_checkpoint_dir(tmp_path):
    """Create temporary directory for checkpoints."""
    checkpoint_dir = tmp_path / "checkpoints"
    checkpoint_dir.mkdir(parents=True, exist_ok=True)
    return checkpoint_dir


@pytest.fixture
def dummy_model():
    """Small model for fast save/load tests."""
    return nn.Sequential(nn.Linear(4, 8), nn.ReLU(), nn.Linear(8, 2))


@pytest.fixture
def write_versions(tmp_checkpoint_dir):
    """Write placeholder checkpoint files for the given versions."""

    def _write(*versions: int) -> None:
        for v in versions:
            (tmp_checkpoint_dir / f"{v}.model").write_bytes(b"placeholder")

    return _write
