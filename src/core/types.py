"""Shared typed models.

This module defines immutable data models used by the fetch, splice,
and fork layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.constants import DEFAULT_CHUNK_LEVELS

KeyValuePair = tuple[str, str]
GenesisSpec = dict[str, Any]


@dataclass(frozen=True)
class FetchOptions:
    """Options for one storage snapshot fetch.

    Attributes:
        chunk_levels: Depth of the chunk tree; 256**levels leaf queries.
        quick_mode: Fetch the 256 leaves under each last-level node concurrently.
        block_hash: Optional block to read state at; latest when omitted.
    """

    chunk_levels: int = DEFAULT_CHUNK_LEVELS
    quick_mode: bool = False
    block_hash: str | None = None


@dataclass(frozen=True)
class ForkOptions:
    """Request options for a full fork run.

    Attributes:
        chain: Chain identifier passed to the binary for the original spec.
        block_hash: Optional block to snapshot state at.
        chunk_levels: Depth of the chunk tree.
        quick_mode: Enable leaf-level concurrent fetching.
        profile_path: Optional YAML fork profile overriding the defaults.
    """

    chain: str
    block_hash: str | None = None
    chunk_levels: int = DEFAULT_CHUNK_LEVELS
    quick_mode: bool = False
    profile_path: Path | None = None

    def fetch_options(self) -> FetchOptions:
        """Project the fetch-related fields."""
        return FetchOptions(
            chunk_levels=self.chunk_levels,
            quick_mode=self.quick_mode,
            block_hash=self.block_hash,
        )


@dataclass(frozen=True)
class ModuleMetadata:
    """One runtime module as described by chain metadata.

    Attributes:
        name: Pallet name.
        has_storage: Whether the module declares any storage entries.
        storage_prefix: Prefix its storage keys are hashed from. Legacy
            metadata may use a prefix that differs from the name.
    """

    name: str
    has_storage: bool
    storage_prefix: str | None = None

    @property
    def prefix_name(self) -> str:
        """Storage prefix, falling back to the module name."""
        return self.storage_prefix or self.name


@dataclass(frozen=True)
class PrefixPolicy:
    """Curated module skip list and manually pinned prefixes.

    Attributes:
        skipped_modules: Module names whose storage stays on the fork's own values.
        pinned_prefixes: Full prefixes always retained regardless of metadata.
    """

    skipped_modules: tuple[str, ...]
    pinned_prefixes: tuple[str, ...]


@dataclass(frozen=True)
class StorageOverride:
    """One fixed storage adjustment applied after the transplant.

    Attributes:
        key: Storage key to set or delete.
        value: Hex value to write, or None to delete the key.
        note: Human-readable reason for the override.
    """

    key: str
    value: str | None
    note: str = ""


@dataclass(frozen=True)
class FetchSummary:
    """Outcome of a snapshot fetch request."""

    snapshot_path: Path
    total_chunks: int
    reused_cache: bool


@dataclass(frozen=True)
class ForkResult:
    """Outcome of a completed fork run.

    Attributes:
        output_path: Written forked spec path.
        snapshot_pair_count: Pairs read from the snapshot.
        transplanted_pair_count: Pairs copied into the forked spec.
        prefix_count: Size of the retained prefix set.
    """

    output_path: Path
    snapshot_pair_count: int
    transplanted_pair_count: int
    prefix_count: int
