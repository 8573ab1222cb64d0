"""Model (de)serialization on top of a DurableStore.

The checkpoint manager treats the blob format as opaque. The default
serializer uses torch.save/torch.load so state dicts, tensors and lists of
numpy arrays all round-trip.
"""

import io
import pickle
from typing import Any, Protocol

import torch
import torch.nn as nn
from loguru import logger

from ..errors import DeserializationError, StorageError
from .store import DurableStore


class ModelSerializer(Protocol):
    """Writes and reads model state at a storage path."""

    def write_model(self, store: DurableStore, path: str, state: Any) -> None: ...

    def read_model(self, store: DurableStore, path: str) -> Any: ...


def get_model_state_dict(model: Any) -> Any:
    """Return a state dict for modules, or the state unchanged otherwise."""
    if isinstance(model, nn.Module):
        return model.state_dict()
    return model


class TorchModelSerializer:
    """ModelSerializer backed by torch.save/torch.load."""

    def __init__(self, map_location: str = "cpu"):
        self.map_location = map_location

    def write_model(self, store: DurableStore, path: str, state: Any) -> None:
        buffer = io.BytesIO()
        try:
            torch.save(get_model_state_dict(state), buffer)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise StorageError(f"Failed to serialize model for {path}: {e}") from e
        store.write_blob(path, buffer.getvalue())

    def read_model(self, store: DurableStore, path: str) -> Any:
        data = store.read_blob(path)
        try:
            return torch.load(  # nosec B614 - loading trusted checkpoint
                io.BytesIO(data), map_location=self.map_location, weights_only=False
            )
        except Exception as e:
            logger.error(f"Failed to deserialize checkpoint {path}: {e}")
            raise DeserializationError(
                f"Checkpoint {path} is not a readable model: {e}"
            ) from e
