"""Public SDK surface for forkoff.

This module provides a stable import path for scripted forks.
It re-exports the pipeline entry points and typed option models.
"""

from __future__ import annotations

from core.config import ForkOffConfig
from core.types import FetchOptions, ForkOptions, ForkResult, StorageOverride
from fetch.keyspace import iter_chunk_addresses, total_chunks
from fetch.state_fetcher import ChunkedStateFetcher, fetch_snapshot
from fork.pipeline import fetch_state, resolve_prefixes, run_fork
from splice.fork_profile import ForkProfile, default_fork_profile, load_fork_profile
from splice.prefix_registry import build_prefix_set, twox_128_hex
from splice.spec_splicer import splice_fork_spec

__all__ = [
    "ChunkedStateFetcher",
    "FetchOptions",
    "ForkOffConfig",
    "ForkOptions",
    "ForkProfile",
    "ForkResult",
    "StorageOverride",
    "build_prefix_set",
    "default_fork_profile",
    "fetch_snapshot",
    "fetch_state",
    "iter_chunk_addresses",
    "load_fork_profile",
    "resolve_prefixes",
    "run_fork",
    "splice_fork_spec",
    "total_chunks",
    "twox_128_hex",
]
