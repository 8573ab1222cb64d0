"""Error taxonomy for checkpoint management.

All errors derive from CheckpointError so a training driver can stop the
job on any checkpoint failure with a single except clause.
"""


class CheckpointError(Exception):
    """Base class for checkpoint errors."""


class InvalidConfiguration(CheckpointError, ValueError):
    """Bad or missing checkpoint settings. Raised before any storage access."""


class StorageError(CheckpointError, OSError):
    """A list/read/write/delete against the durable store failed."""


class DeserializationError(CheckpointError):
    """A persisted blob cannot be turned back into a model state."""
