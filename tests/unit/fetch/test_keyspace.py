"""Unit tests for keyspace chunking."""

from __future__ import annotations

import pytest

from core.errors import ForkOffConfigError
from fetch.keyspace import child_prefixes, iter_chunk_addresses, total_chunks


@pytest.mark.parametrize("levels", [0, 1, 2])
def test_chunk_addresses_are_distinct_and_match_total(levels: int) -> None:
    """Depth L should yield exactly 256**L distinct addresses."""
    addresses = list(iter_chunk_addresses(levels))

    assert len(addresses) == total_chunks(levels) == 256**levels and len(set(addresses)) == len(
        addresses
    )


@pytest.mark.parametrize("key", ["0x0000", "0x7f3a", "0xffff01", "0x26aa394eea5630e0"])
def test_every_key_falls_under_exactly_one_chunk(key: str) -> None:
    """Level-2 chunks should partition two-byte-or-longer keys without overlap."""
    owners = [address for address in iter_chunk_addresses(2) if key.startswith(address)]

    assert len(owners) == 1


def test_level_zero_is_the_whole_keyspace() -> None:
    """A depth of zero should be one unbounded query at the root prefix."""
    assert list(iter_chunk_addresses(0)) == ["0x"]


def test_child_prefixes_append_one_byte_in_order() -> None:
    """Children should run from 00 to ff in lexicographic order."""
    children = child_prefixes("0xab")

    assert children[0] == "0xab00" and children[-1] == "0xabff" and list(children) == sorted(
        children
    )


def test_total_chunks_rejects_negative_levels() -> None:
    """Negative depth should be rejected."""
    with pytest.raises(ForkOffConfigError):
        total_chunks(-1)
