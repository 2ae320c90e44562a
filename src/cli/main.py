"""forkoff CLI entry points.
This module exposes the fork, fetch, and prefixes commands.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.fetch_command import add_fetch_command, run_fetch_command
from cli.fork_command import add_fork_command, run_fork_command
from cli.prefixes_command import add_prefixes_command, run_prefixes_command
from core.config import ForkOffConfig, parse_chunk_levels
from core.errors import ForkOffError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="forkoff",
        description="Fork a live Substrate chain into a local raw genesis spec",
    )
    parser.add_argument("--data-root", help="Override FORKOFF_DATA_ROOT for this command")
    parser.add_argument("--endpoint", help="Override HTTP_RPC_ENDPOINT for this command")
    parser.add_argument(
        "--chunks-level",
        help="Override FORK_CHUNKS_LEVEL; storage is fetched in 256^level chunks",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Fetch last-level chunks concurrently (same as QUICK_MODE=1)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_fork_command(subparsers)
    add_fetch_command(subparsers)
    add_prefixes_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the forkoff CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        return _dispatch(config, args, parser)
    except ForkOffError as error:
        _LOGGER.error("command_failed", command=args.command, error=str(error))
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(
    config: ForkOffConfig,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    if args.command == "fork":
        return run_fork_command(config, args)
    if args.command == "fetch":
        return run_fetch_command(config, args)
    if args.command == "prefixes":
        return run_prefixes_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> ForkOffConfig:
    """Build runtime config with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured runtime config.
    """
    config = ForkOffConfig.from_env()
    if args.data_root:
        config = replace(config, data_root=Path(args.data_root).expanduser().resolve())
    if args.endpoint:
        config = replace(config, rpc_endpoint=args.endpoint)
    if args.chunks_level is not None:
        config = replace(config, chunk_levels=parse_chunk_levels(args.chunks_level))
    if args.quick:
        config = replace(config, quick_mode=True)
    return config
