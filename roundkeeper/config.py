"""Configuration loading and validation for roundkeeper using Pydantic."""

from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import tomli
from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from .errors import InvalidConfiguration


class CheckpointingConfig(BaseModel):
    """Checkpointing configuration.

    An empty checkpoint_path disables checkpointing, and a saving_frequency
    of zero (or below) disables periodic saves.
    """

    model_config = ConfigDict(extra="forbid")

    checkpoint_path: StrictStr = ""
    saving_frequency: StrictInt = 0

    @property
    def enabled(self) -> bool:
        return bool(self.checkpoint_path)


class TrainingConfig(BaseModel):
    """Training loop configuration."""

    model_config = ConfigDict(extra="forbid")

    num_rounds: int = Field(default=10, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str = Field(default="INFO")
    log_file: str = ""

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log level must be one of {allowed}")
        return v.upper()


class Config(BaseModel):
    """Root configuration model for roundkeeper."""

    model_config = ConfigDict(extra="forbid")

    checkpointing: CheckpointingConfig = Field(default_factory=CheckpointingConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get(self, key: str, default: Any = None) -> Any:
        """Get nested config value using dot notation.

        Example:
            >>> config.get("checkpointing.saving_frequency", 0)
            0
        """
        value: Any = self
        for k in key.split("."):
            if hasattr(value, k):
                value = getattr(value, k)
            elif isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Return full config as dictionary."""
        return self.model_dump()


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


def extract_params(params: Mapping[str, Any]) -> Tuple[str, int]:
    """Pull checkpoint settings out of a flat training parameter map.

    Unrelated keys are ignored so the full job parameter map can be passed in.

    Args:
        params: Parameter map, e.g. {"checkpoint_path": "/ckpt", "saving_frequency": 5}

    Returns:
        Tuple of (checkpoint_path, saving_frequency)

    Raises:
        InvalidConfiguration: If checkpoint_path is not a string or
            saving_frequency is not an integer
    """
    checkpoint_path = params.get("checkpoint_path", "")
    if not isinstance(checkpoint_path, str):
        raise InvalidConfiguration(
            'parameter "checkpoint_path" must be an instance of str, '
            f"got {type(checkpoint_path).__name__}"
        )

    saving_frequency = params.get("saving_frequency", 0)
    if isinstance(saving_frequency, bool) or not isinstance(saving_frequency, int):
        raise InvalidConfiguration(
            'parameter "saving_frequency" must be an instance of int, '
            f"got {type(saving_frequency).__name__}"
        )

    return checkpoint_path, saving_frequency


def load_config(config_path: Union[str, Path]) -> Config:
    """Load and validate TOML configuration file.

    Args:
        config_path: Path to TOML config file

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        InvalidConfiguration: If TOML parsing or validation fails
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    try:
        with open(path, "rb") as f:
            config_dict = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise InvalidConfiguration(f"Failed to parse TOML config: {e}") from e

    try:
        config = Config(**config_dict)
    except ValidationError as e:
        raise InvalidConfiguration(
            f"Invalid configuration in {config_path}: {_first_error(e)}"
        ) from e

    logger.info("Configuration validated successfully")
    logger.info(f"  Checkpoint path: {config.checkpointing.checkpoint_path or '<disabled>'}")
    logger.info(f"  Saving frequency: {config.checkpointing.saving_frequency}")
    logger.info(f"  Rounds: {config.training.num_rounds}")

    return config
