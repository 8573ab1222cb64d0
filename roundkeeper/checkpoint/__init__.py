"""Recovery checkpoints for round-based training.

Checkpoints live as ``<version>.model`` files directly under a checkpoint
root; the directory listing is the only index.
"""

from .codec import MODEL_SUFFIX, checkpoint_path, decode, encode, parse_version
from .io import ModelSerializer, TorchModelSerializer, get_model_state_dict
from .manager import CheckpointManager
from .models import CheckpointEntry, RestoredCheckpoint
from .scanner import list_entries, list_versions
from .store import DurableStore, LocalFileStore

__all__ = [
    "MODEL_SUFFIX",
    "encode",
    "decode",
    "checkpoint_path",
    "parse_version",
    "ModelSerializer",
    "TorchModelSerializer",
    "get_model_state_dict",
    "CheckpointManager",
    "CheckpointEntry",
    "RestoredCheckpoint",
    "list_entries",
    "list_versions",
    "DurableStore",
    "LocalFileStore",
]
