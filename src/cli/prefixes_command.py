"""Prefixes CLI command wiring."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.config import ForkOffConfig
from fork.pipeline import resolve_prefixes


def add_prefixes_command(subparsers: Any) -> None:
    """Register prefixes subcommand."""
    parser = subparsers.add_parser(
        "prefixes",
        help="Print the storage prefixes that a fork would transplant",
    )
    parser.add_argument("--block", help="Hash of the block to read metadata at")
    parser.add_argument("--profile", help="Optional YAML fork profile")


def run_prefixes_command(config: ForkOffConfig, args: argparse.Namespace) -> int:
    """Print one retained prefix per line."""
    profile_path = Path(args.profile) if args.profile else None
    for prefix in resolve_prefixes(config, block_hash=args.block, profile_path=profile_path):
        print(prefix)
    return 0
