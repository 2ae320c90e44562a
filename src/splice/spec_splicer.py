"""Forked genesis spec assembly.

Splicing runs four steps on a copy of the template spec: identity
rewrite, prefix-filtered storage transplant, override table, and runtime
code injection. Overrides run after the transplant so they always win.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, MutableMapping, Sequence

from core.constants import FORK_NAME_SUFFIX, RUNTIME_CODE_KEY
from core.errors import ForkOffSpecError
from core.hex_strings import normalize_hex_body
from core.logging_config import get_logger
from core.types import GenesisSpec, KeyValuePair, StorageOverride

_LOGGER = get_logger(__name__)


def splice_fork_spec(
    original_spec: GenesisSpec,
    forked_spec: GenesisSpec,
    snapshot: Iterable[KeyValuePair],
    prefixes: Sequence[str],
    runtime_code_hex: str,
    overrides: Sequence[StorageOverride],
) -> GenesisSpec:
    """Build the forked genesis spec.

    Args:
        original_spec: Raw spec of the live chain being forked.
        forked_spec: Raw template spec; left untouched.
        snapshot: Live storage pairs.
        prefixes: Retained storage prefixes.
        runtime_code_hex: Runtime blob as hex, with or without ``0x``.
        overrides: Ordered fixed storage adjustments.

    Returns:
        A new spec document ready for serialization.

    Raises:
        ForkOffSpecError: If either spec lacks identity fields or raw storage.
    """
    spliced_spec = copy.deepcopy(forked_spec)
    _rewrite_identity(original_spec, spliced_spec)
    top = raw_top_storage(spliced_spec)
    transplanted_count = _transplant_storage(top, snapshot, tuple(prefixes))
    _apply_overrides(top, overrides)
    top[RUNTIME_CODE_KEY] = "0x" + normalize_hex_body(runtime_code_hex)
    _LOGGER.info(
        "spec_spliced",
        name=spliced_spec["name"],
        transplanted_count=transplanted_count,
        override_count=len(overrides),
        storage_key_count=len(top),
    )
    return spliced_spec


def raw_top_storage(spec: GenesisSpec) -> MutableMapping[str, Any]:
    """Return the mutable ``genesis.raw.top`` storage map of a spec."""
    genesis = spec.get("genesis")
    raw = genesis.get("raw") if isinstance(genesis, dict) else None
    top = raw.get("top") if isinstance(raw, dict) else None
    if not isinstance(top, dict):
        raise ForkOffSpecError(
            "Genesis spec has no 'genesis.raw.top' storage map. "
            "Build specs with the '--raw' flag."
        )
    return top


def count_retained_pairs(snapshot: Iterable[KeyValuePair], prefixes: Sequence[str]) -> int:
    """Count snapshot pairs whose key matches a retained prefix."""
    prefix_tuple = tuple(prefixes)
    return sum(1 for key, _ in snapshot if prefix_tuple and key.startswith(prefix_tuple))


def _rewrite_identity(original_spec: GenesisSpec, spliced_spec: GenesisSpec) -> None:
    for field_name in ("name", "id"):
        value = original_spec.get(field_name)
        if not isinstance(value, str):
            raise ForkOffSpecError(f"Original genesis spec has no string '{field_name}' field.")
        spliced_spec[field_name] = value + FORK_NAME_SUFFIX
    if "protocolId" in original_spec:
        spliced_spec["protocolId"] = original_spec["protocolId"]
    else:
        spliced_spec.pop("protocolId", None)


def _transplant_storage(
    top: MutableMapping[str, Any],
    snapshot: Iterable[KeyValuePair],
    prefixes: tuple[str, ...],
) -> int:
    if not prefixes:
        return 0
    transplanted_count = 0
    for key, value in snapshot:
        if key.startswith(prefixes):
            top[key] = value
            transplanted_count += 1
    return transplanted_count


def _apply_overrides(
    top: MutableMapping[str, Any],
    overrides: Sequence[StorageOverride],
) -> None:
    for override in overrides:
        if override.value is None:
            top.pop(override.key, None)
        else:
            top[override.key] = override.value
