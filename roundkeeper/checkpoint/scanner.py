"""Enumerate checkpoint versions present under a checkpoint root."""

from typing import List, Set

from loguru import logger

from .codec import MODEL_SUFFIX, checkpoint_path, parse_version
from .models import CheckpointEntry
from .store import DurableStore


def list_versions(store: DurableStore, root: str) -> Set[int]:
    """Return every checkpoint version stored directly under ``root``.

    An empty or missing root yields an empty set. Names that end in the
    checkpoint suffix but do not parse as a version are skipped.

    Args:
        store: Durable store to scan
        root: Checkpoint root directory

    Returns:
        Unordered set of versions

    Raises:
        StorageError: If an existing root cannot be listed
    """
    if not root or not store.exists(root):
        return set()

    versions = set()
    for name in store.list_children(root):
        if not name.endswith(MODEL_SUFFIX):
            continue
        version = parse_version(name)
        if version is None:
            logger.debug(f"Ignoring unrecognized entry {name!r} in {root}")
            continue
        versions.add(version)
    return versions


def list_entries(store: DurableStore, root: str) -> List[CheckpointEntry]:
    """Checkpoint entries under ``root`` sorted by ascending version."""
    return [
        CheckpointEntry(version=v, path=checkpoint_path(root, v))
        for v in sorted(list_versions(store, root))
    ]
