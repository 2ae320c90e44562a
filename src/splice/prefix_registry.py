"""Retained storage prefix derivation.

Module storage lives under the twox128 hash of the module's storage
prefix. Every module with storage is retained unless the skip list names
its prefix; pinned prefixes are retained verbatim.
"""

from __future__ import annotations

from typing import Iterable

from substrateinterface.utils.hasher import xxh128

from core.logging_config import get_logger
from core.types import ModuleMetadata, PrefixPolicy

_LOGGER = get_logger(__name__)


def twox_128_hex(text: str) -> str:
    """Return the ``0x``-prefixed 128-bit xxHash used for module prefixes."""
    return "0x" + bytes(xxh128(text.encode("utf-8"))).hex()


def build_prefix_set(
    modules: Iterable[ModuleMetadata],
    policy: PrefixPolicy,
) -> tuple[str, ...]:
    """Build the ordered set of storage prefixes to transplant.

    Args:
        modules: Modules described by chain metadata.
        policy: Skip list and pinned prefixes.

    Returns:
        Pinned prefixes first, then module hashes, without duplicates.
    """
    skipped = set(policy.skipped_modules)
    prefixes: list[str] = list(dict.fromkeys(policy.pinned_prefixes))
    retained_modules: list[str] = []
    for module in modules:
        if not module.has_storage or module.prefix_name in skipped:
            continue
        prefix = twox_128_hex(module.prefix_name)
        if prefix not in prefixes:
            prefixes.append(prefix)
            retained_modules.append(module.prefix_name)
    _LOGGER.info(
        "prefix_set_built",
        prefix_count=len(prefixes),
        retained_modules=retained_modules,
        skipped_modules=sorted(skipped),
    )
    return tuple(prefixes)
