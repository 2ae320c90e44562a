"""Storage keyspace chunking.

Each chunk level appends one byte to the key prefix, so depth L splits
the keyspace into 256**L disjoint prefixes that cover every key.
"""

from __future__ import annotations

from typing import Iterator

from core.constants import CHUNK_FANOUT, KEYSPACE_ROOT_PREFIX
from core.errors import ForkOffConfigError


def total_chunks(levels: int) -> int:
    """Return the number of leaf chunks at the given depth."""
    _require_levels(levels)
    return CHUNK_FANOUT**levels


def child_prefixes(prefix: str) -> tuple[str, ...]:
    """Expand a chunk prefix into its 256 one-byte-longer children."""
    return tuple(f"{prefix}{byte:02x}" for byte in range(CHUNK_FANOUT))


def iter_chunk_addresses(levels: int, root_prefix: str = KEYSPACE_ROOT_PREFIX) -> Iterator[str]:
    """Yield every leaf chunk address at ``levels`` depth in lexicographic order."""
    _require_levels(levels)
    if levels == 0:
        yield root_prefix
        return
    for child in child_prefixes(root_prefix):
        yield from iter_chunk_addresses(levels - 1, child)


def _require_levels(levels: int) -> None:
    if levels < 0:
        raise ForkOffConfigError(
            f"Chunk levels must be 0 or greater, got {levels}. "
            "Use 0 for a single unbounded query."
        )
