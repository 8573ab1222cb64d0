"""Checkpoint lifecycle manager for round-based training.

This module provides the CheckpointManager class which saves a checkpoint
every few rounds so that a failed job can restart from the latest saved
model instead of from scratch.
"""

from typing import Any, List, Mapping, Optional

from loguru import logger

from ..config import extract_params
from ..errors import InvalidConfiguration, StorageError
from .codec import checkpoint_path, decode, encode
from .io import ModelSerializer, TorchModelSerializer
from .models import CheckpointEntry, RestoredCheckpoint
from .scanner import list_versions
from .store import DurableStore


class CheckpointManager:
    """Manages checkpoints under a single root for one training job.

    Holds no state besides its configuration; every operation re-scans the
    store, so instances can be rebuilt freely. Assumes a single writer per
    checkpoint root.
    """

    def __init__(
        self,
        store: DurableStore,
        checkpoint_path: str = "",
        serializer: Optional[ModelSerializer] = None,
    ):
        """Initialize checkpoint manager.

        Args:
            store: Durable store holding the checkpoint root
            checkpoint_path: Checkpoint root; empty disables checkpointing
            serializer: Model serializer, defaults to TorchModelSerializer
        """
        self.store = store
        self.checkpoint_path = checkpoint_path
        self.serializer = serializer or TorchModelSerializer()

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        store: DurableStore,
        serializer: Optional[ModelSerializer] = None,
    ) -> "CheckpointManager":
        """Build a manager from a training parameter map.

        Raises:
            InvalidConfiguration: If the checkpoint parameters have the wrong type
        """
        path, _ = extract_params(params)
        return cls(store, path, serializer)

    @property
    def enabled(self) -> bool:
        return bool(self.checkpoint_path)

    def _path(self, version: int) -> str:
        return checkpoint_path(self.checkpoint_path, version)

    def _existing_versions(self) -> List[int]:
        return sorted(list_versions(self.store, self.checkpoint_path))

    def _delete_quietly(self, version: int) -> bool:
        path = self._path(version)
        try:
            self.store.delete_blob(path)
        except StorageError as e:
            logger.warning(f"Could not delete stale checkpoint {path}: {e}")
            return False
        return True

    def load_latest(self) -> Optional[RestoredCheckpoint]:
        """Load the checkpoint with the highest version.

        There is no fallback to older checkpoints: a corrupt latest
        checkpoint stops the job.

        Returns:
            The restored checkpoint, or None if no checkpoint exists

        Raises:
            StorageError: If the latest checkpoint cannot be read
            DeserializationError: If it cannot be turned back into a model
        """
        versions = self._existing_versions()
        if not versions:
            logger.debug(f"No checkpoint found under {self.checkpoint_path!r}")
            return None

        version = versions[-1]
        path = self._path(version)
        logger.info(f"Start training from previous checkpoint at {path}")
        state = self.serializer.read_model(self.store, path)
        return RestoredCheckpoint(state=state, version=version, path=path)

    def save_and_prune(self, round_num: int, state: Any) -> CheckpointEntry:
        """Save a new checkpoint, then delete every previous one.

        The new entry is written before anything is deleted, so a crash in
        between leaves both and load_latest picks the newer one.

        Args:
            round_num: Round the state corresponds to
            state: Model state (module, state dict, ...)

        Returns:
            The entry just written

        Raises:
            InvalidConfiguration: If checkpointing is disabled
            StorageError: If the new checkpoint cannot be written
        """
        if not self.enabled:
            raise InvalidConfiguration(
                'parameter "checkpoint_path" must be set to save checkpoints'
            )

        version = encode(round_num)
        previous = [v for v in self._existing_versions() if v != version]
        path = self._path(version)

        logger.info(f"Saving checkpoint model with version {version} to {path}")
        self.serializer.write_model(self.store, path, state)

        removed = [v for v in previous if self._delete_quietly(v)]
        if removed:
            logger.debug(f"Removed previous checkpoint versions {removed}")
        return CheckpointEntry(version=version, path=path)

    def prune_stale(self, current_round: int) -> List[int]:
        """Delete checkpoints whose round is greater than or equal to ``current_round``.

        Best effort: a failed delete is logged and the remaining entries
        are still processed.

        Returns:
            Versions that were deleted
        """
        stale = [v for v in self._existing_versions() if decode(v) >= current_round]
        deleted = [v for v in stale if self._delete_quietly(v)]
        if stale:
            logger.info(
                f"Pruned {len(deleted)}/{len(stale)} checkpoints at or beyond "
                f"round {current_round}"
            )
        return deleted

    def compute_saving_rounds(
        self, saving_frequency: int, total_rounds: int
    ) -> List[int]:
        """Rounds at which to save checkpoints during this run.

        The schedule starts at the latest saved round plus ``saving_frequency``
        and steps by ``saving_frequency`` while below ``total_rounds``;
        ``total_rounds`` is always the last element. A non-positive frequency
        disables checkpointing and yields ``[total_rounds]``.

        Example:
            Latest checkpoint at round 3, frequency 5, 17 rounds -> [8, 13, 17]

        Raises:
            InvalidConfiguration: If a positive frequency is given without a
                checkpoint path
        """
        if saving_frequency <= 0:
            return [total_rounds]
        if not self.enabled:
            raise InvalidConfiguration(
                'parameter "checkpoint_path" should also be set when '
                '"saving_frequency" is positive'
            )

        prev_round = max((decode(v) for v in self._existing_versions()), default=0)
        rounds = list(range(prev_round + saving_frequency, total_rounds, saving_frequency))
        rounds.append(total_rounds)
        return rounds
