"""roundkeeper: recovery checkpoints for round-based training jobs."""

__version__ = "0.1.0"

from .checkpoint import CheckpointManager, LocalFileStore  # noqa: E402
from .errors import (  # noqa: E402
    CheckpointError,
    DeserializationError,
    InvalidConfiguration,
    StorageError,
)

__all__ = [
    "CheckpointManager",
    "LocalFileStore",
    "CheckpointError",
    "DeserializationError",
    "InvalidConfiguration",
    "StorageError",
]
