"""Resumable training driver.

Wraps a round-based training function with checkpointing: stale
checkpoints are pruned, the latest one is restored, and the model is saved
at every scheduled round until the requested number of rounds is reached.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from loguru import logger

from .checkpoint.manager import CheckpointManager
from .errors import InvalidConfiguration

# train_rounds(state, start_round, end_round) -> new state
TrainRoundsFn = Callable[[Any, int, int], Any]


@dataclass
class TrainingResult:
    """Outcome of a (possibly resumed) training run."""

    state: Any
    rounds_completed: int
    resumed_from: Optional[int] = None
    saved_rounds: List[int] = field(default_factory=list)


def train_with_checkpoints(
    manager: CheckpointManager,
    train_rounds: TrainRoundsFn,
    total_rounds: int,
    saving_frequency: int = 0,
    initial_state: Any = None,
) -> TrainingResult:
    """Train for ``total_rounds`` rounds, checkpointing along the way.

    Args:
        manager: Checkpoint manager for this job
        train_rounds: Advances the model from start_round to end_round
        total_rounds: Total number of rounds for the job
        saving_frequency: Rounds between checkpoints; <= 0 disables saving
        initial_state: Model state used when no checkpoint exists

    Returns:
        TrainingResult with the final state

    Raises:
        InvalidConfiguration: If saving is requested without a checkpoint path
        StorageError: If loading or saving a checkpoint fails
        DeserializationError: If the latest checkpoint is corrupt
    """
    # Fail on bad configuration before touching storage
    if saving_frequency > 0 and not manager.enabled:
        raise InvalidConfiguration(
            'parameter "checkpoint_path" should also be set when '
            '"saving_frequency" is positive'
        )

    if manager.enabled:
        manager.prune_stale(total_rounds)

    state = initial_state
    current_round = 0
    resumed_from = None

    restored = manager.load_latest()
    if restored is not None:
        state = restored.state
        current_round = resumed_from = restored.round
        logger.info(f"Resuming training from round {current_round}/{total_rounds}")

    schedule = manager.compute_saving_rounds(saving_frequency, total_rounds)
    logger.debug(f"Checkpoint schedule: {schedule}")

    saved_rounds: List[int] = []
    for target_round in schedule:
        if target_round <= current_round:
            continue
        state = train_rounds(state, current_round, target_round)
        current_round = target_round
        logger.info(f"Completed round {current_round}/{total_rounds}")

        # The final model is the job's output, not a recovery point
        if manager.enabled and target_round < total_rounds:
            manager.save_and_prune(target_round, state)
            saved_rounds.append(target_round)

    return TrainingResult(
        state=state,
        rounds_completed=current_round,
        resumed_from=resumed_from,
        saved_rounds=saved_rounds,
    )
