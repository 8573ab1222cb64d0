"""Mapping between training rounds, persisted versions and storage paths.

A version is ``round * 2``. The factor is an arbitrary injective encoding;
nothing downstream relies on its value beyond ``decode(encode(r)) == r``.
"""

from typing import Optional

MODEL_SUFFIX = ".model"
_SCALE = 2


def encode(round_num: int) -> int:
    """Return the version under which ``round_num`` is persisted."""
    if round_num < 0:
        raise ValueError(f"round must be non-negative, got {round_num}")
    return round_num * _SCALE


def decode(version: int) -> int:
    """Return the round for ``version``, truncating versions not produced by encode."""
    return version // _SCALE


def checkpoint_path(root: str, version: int) -> str:
    """Storage path of the entry for ``version`` under ``root``."""
    return f"{root.rstrip('/')}/{version}{MODEL_SUFFIX}"


def parse_version(name: str) -> Optional[int]:
    """Parse a directory entry name like ``10.model``.

    Returns:
        The version, or None if the name is not a checkpoint entry
    """
    if not name.endswith(MODEL_SUFFIX):
        return None
    stem = name[: -len(MODEL_SUFFIX)]
    # isdigit() alone accepts unicode digits that int() rejects
    if not (stem.isascii() and stem.isdigit()):
        return None
    return int(stem)
