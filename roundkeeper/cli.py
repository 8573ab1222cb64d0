#!/usr/bin/env python3
"""Inspect and maintain a checkpoint root from the command line.

Usage:
    roundkeeper status --config configs/default.toml
    roundkeeper prune --checkpoint-path /ckpt/job --round 20
    roundkeeper schedule --config configs/default.toml
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from .checkpoint import CheckpointManager, LocalFileStore, list_entries
from .config import CheckpointingConfig, Config, load_config
from .errors import CheckpointError, InvalidConfiguration
from .logging_config import setup_logging


def _resolve_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config) if args.config else Config()
    if args.checkpoint_path is not None:
        config.checkpointing = CheckpointingConfig(
            checkpoint_path=args.checkpoint_path,
            saving_frequency=config.checkpointing.saving_frequency,
        )
    return config


def cmd_status(manager: CheckpointManager, config: Config, args) -> None:
    entries = list_entries(manager.store, manager.checkpoint_path)
    if not entries:
        print(f"No checkpoints under {manager.checkpoint_path or '<disabled>'}")
        return
    for entry in entries:
        print(f"version={entry.version:<8d} round={entry.round:<8d} {entry.path}")
    print(f"Latest round: {entries[-1].round}")


def cmd_prune(manager: CheckpointManager, config: Config, args) -> None:
    deleted = manager.prune_stale(args.round)
    print(f"Deleted {len(deleted)} checkpoint(s) at or beyond round {args.round}")


def cmd_schedule(manager: CheckpointManager, config: Config, args) -> None:
    total_rounds = (
        args.total_rounds if args.total_rounds is not None else config.training.num_rounds
    )
    rounds = manager.compute_saving_rounds(
        config.checkpointing.saving_frequency, total_rounds
    )
    print(" ".join(str(r) for r in rounds))


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _add_common_options(parser: argparse.ArgumentParser, default) -> None:
    parser.add_argument(
        "--config", type=str, default=default, help="Path to TOML config file"
    )
    parser.add_argument(
        "--checkpoint-path",
        type=str,
        default=default,
        help="Checkpoint root (overrides the config file)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=default,
        help="Console log level (defaults to WARNING)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roundkeeper",
        description="Inspect and maintain training checkpoints",
    )
    _add_common_options(parser, default=None)

    # Accept the common options after the subcommand too, without letting
    # the subcommand's unset copies clobber values given before it
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, default=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser(
        "status", parents=[common], help="List stored checkpoints"
    )
    status.set_defaults(func=cmd_status)

    prune = subparsers.add_parser(
        "prune", parents=[common], help="Delete checkpoints at or beyond a round"
    )
    prune.add_argument("--round", type=int, required=True)
    prune.set_defaults(func=cmd_prune)

    schedule = subparsers.add_parser(
        "schedule",
        parents=[common],
        help="Print the rounds at which checkpoints will be saved",
    )
    schedule.add_argument("--total-rounds", type=int, default=None)
    schedule.set_defaults(func=cmd_schedule)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level or "WARNING")

    try:
        config = _resolve_config(args)
        if args.config:
            setup_logging(
                level=(args.log_level or config.logging.level).upper(),
                log_file=config.logging.log_file or None,
            )
        manager = CheckpointManager(
            LocalFileStore(), config.checkpointing.checkpoint_path
        )
        args.func(manager, config, args)
    except InvalidConfiguration as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except (CheckpointError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
