"""Fork CLI command wiring."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from cli.progress_bar import fetch_progress_bar
from core.config import ForkOffConfig
from core.types import ForkOptions
from fork.pipeline import run_fork


def add_fork_command(subparsers: Any) -> None:
    """Register fork subcommand."""
    parser = subparsers.add_parser(
        "fork",
        help="Snapshot the live chain and write a forked raw genesis spec",
    )
    parser.add_argument("--chain", required=True, help="Chain to specify when building spec")
    parser.add_argument("--block", help="Hash of the block to snapshot state at")
    parser.add_argument("--profile", help="Optional YAML fork profile")


def run_fork_command(config: ForkOffConfig, args: argparse.Namespace) -> int:
    """Handle fork command invocation."""
    options = ForkOptions(
        chain=args.chain,
        block_hash=args.block,
        chunk_levels=config.chunk_levels,
        quick_mode=config.quick_mode,
        profile_path=Path(args.profile) if args.profile else None,
    )
    with fetch_progress_bar(config) as observer:
        result = run_fork(options, config, observer=observer)
    print(result.output_path)
    return 0
