"""Fetch CLI command wiring."""

from __future__ import annotations

import argparse
from typing import Any

from cli.progress_bar import fetch_progress_bar
from core.config import ForkOffConfig
from fork.pipeline import fetch_state


def add_fetch_command(subparsers: Any) -> None:
    """Register fetch subcommand."""
    parser = subparsers.add_parser("fetch", help="Download live storage into the snapshot cache")
    parser.add_argument("--block", help="Hash of the block to snapshot state at")


def run_fetch_command(config: ForkOffConfig, args: argparse.Namespace) -> int:
    """Handle fetch command invocation."""
    with fetch_progress_bar(config) as observer:
        summary = fetch_state(config, block_hash=args.block, observer=observer)
    print(summary.snapshot_path)
    return 0
