"""Data structures describing persisted checkpoints."""

from dataclasses import dataclass
from typing import Any

from .codec import decode


@dataclass(frozen=True)
class CheckpointEntry:
    """One persisted snapshot under the checkpoint root."""

    version: int
    path: str

    @property
    def round(self) -> int:
        return decode(self.version)


@dataclass
class RestoredCheckpoint:
    """Model state loaded from the latest checkpoint.

    Carries the version that produced it so the next save continues the
    same numbering instead of restarting from round zero.
    """

    state: Any
    version: int
    path: str

    @property
    def round(self) -> int:
        return decode(self.version)
