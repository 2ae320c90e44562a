"""Fork profile loading.

A fork profile holds the curated module skip list, the pinned prefixes,
and the storage override table. The built-in defaults can be replaced
section by section from a YAML file such as::

    version: 1
    skipped_modules: [System, Session, Babe, Grandpa]
    pinned_prefixes: ["0x26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9"]
    overrides:
      - key: "0x5f3e4907f716ac89b6347d15ececedcaf7dad0317324aecae8744b87fc95f2f3"
        value: "0x02"
        note: Staking.ForceEra set to ForceNone
      - key: "0x26aa394eea5630e07c48ae0c9558cef7f9cce9c888469bb1a0dceaa129672ef8"
        delete: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import (
    DEFAULT_PINNED_PREFIXES,
    DEFAULT_SKIPPED_MODULES,
    DEFAULT_STORAGE_OVERRIDES,
)
from core.errors import ForkOffProfileError
from core.hex_strings import is_hex_string
from core.types import PrefixPolicy, StorageOverride

SUPPORTED_PROFILE_VERSION = 1
_ROOT_KEYS = {"version", "skipped_modules", "pinned_prefixes", "overrides"}
_OVERRIDE_KEYS = {"key", "value", "delete", "note"}


@dataclass(frozen=True)
class ForkProfile:
    """Prefix policy plus the ordered override table."""

    policy: PrefixPolicy
    overrides: tuple[StorageOverride, ...]


def default_fork_profile() -> ForkProfile:
    """Return the built-in curated profile."""
    return ForkProfile(
        policy=PrefixPolicy(
            skipped_modules=DEFAULT_SKIPPED_MODULES,
            pinned_prefixes=DEFAULT_PINNED_PREFIXES,
        ),
        overrides=tuple(
            StorageOverride(key=key, value=value, note=note)
            for key, value, note in DEFAULT_STORAGE_OVERRIDES
        ),
    )


def load_fork_profile(profile_path: Path | None) -> ForkProfile:
    """Load a fork profile, falling back to defaults per missing section.

    Args:
        profile_path: Optional YAML file path; None returns the defaults.

    Returns:
        Validated fork profile.

    Raises:
        ForkOffProfileError: If the file is unreadable or fails validation.
    """
    defaults = default_fork_profile()
    if profile_path is None:
        return defaults
    root_mapping = _expect_mapping(_load_yaml_payload(profile_path), "fork profile root")
    unknown_keys = sorted(set(root_mapping) - _ROOT_KEYS)
    if unknown_keys:
        raise ForkOffProfileError(
            f"Unsupported fork profile keys: {', '.join(unknown_keys)}. "
            f"Allowed keys: {', '.join(sorted(_ROOT_KEYS))}."
        )
    _parse_version(root_mapping)
    skipped_modules = defaults.policy.skipped_modules
    if "skipped_modules" in root_mapping:
        skipped_modules = _parse_string_list(root_mapping["skipped_modules"], "skipped_modules")
    pinned_prefixes = defaults.policy.pinned_prefixes
    if "pinned_prefixes" in root_mapping:
        pinned_prefixes = _parse_string_list(root_mapping["pinned_prefixes"], "pinned_prefixes")
        _require_hex_values(pinned_prefixes, "pinned_prefixes")
    overrides = defaults.overrides
    if "overrides" in root_mapping:
        overrides = _parse_overrides(root_mapping["overrides"])
    return ForkProfile(
        policy=PrefixPolicy(skipped_modules=skipped_modules, pinned_prefixes=pinned_prefixes),
        overrides=overrides,
    )


def _load_yaml_payload(profile_path: Path) -> object:
    profile_file = profile_path.expanduser().resolve()
    if not profile_file.exists():
        raise ForkOffProfileError(
            f"Fork profile does not exist at {profile_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(profile_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ForkOffProfileError(
            f"Failed to read fork profile at {profile_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise ForkOffProfileError(
            f"Failed to parse fork profile at {profile_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise ForkOffProfileError(f"Fork profile at {profile_file} is empty. Define 'version'.")
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise ForkOffProfileError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise ForkOffProfileError(f"Invalid {context}: expected mapping, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    version = root_mapping.get("version")
    if version != SUPPORTED_PROFILE_VERSION:
        raise ForkOffProfileError(
            f"Unsupported fork profile version {version!r}. "
            f"Set 'version: {SUPPORTED_PROFILE_VERSION}'."
        )
    return SUPPORTED_PROFILE_VERSION


def _parse_string_list(value: object, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ForkOffProfileError(
            f"Invalid '{field_name}': expected a list of strings. "
            "Quote hex values so YAML does not read them as numbers."
        )
    return tuple(value)


def _require_hex_values(values: tuple[str, ...], field_name: str) -> None:
    for value in values:
        if not is_hex_string(value):
            raise ForkOffProfileError(
                f"Invalid '{field_name}' entry {value!r}: expected a 0x-prefixed hex string."
            )


def _parse_overrides(value: object) -> tuple[StorageOverride, ...]:
    if not isinstance(value, list):
        raise ForkOffProfileError("Invalid 'overrides': expected a list of mappings.")
    overrides: list[StorageOverride] = []
    for index, item in enumerate(value):
        entry = _expect_mapping(item, f"override #{index}")
        unknown_keys = sorted(set(entry) - _OVERRIDE_KEYS)
        if unknown_keys:
            raise ForkOffProfileError(
                f"Unsupported keys in override #{index}: {', '.join(unknown_keys)}."
            )
        overrides.append(_parse_override(index, entry))
    return tuple(overrides)


def _parse_override(index: int, entry: Mapping[str, object]) -> StorageOverride:
    key = entry.get("key")
    if not is_hex_string(key):
        raise ForkOffProfileError(
            f"Invalid key in override #{index}: expected a quoted 0x-prefixed hex string."
        )
    note = entry.get("note", "")
    if not isinstance(note, str):
        raise ForkOffProfileError(f"Invalid note in override #{index}: expected a string.")
    deletes = entry.get("delete", False)
    if not isinstance(deletes, bool):
        raise ForkOffProfileError(f"Invalid delete flag in override #{index}: expected boolean.")
    if deletes:
        if "value" in entry:
            raise ForkOffProfileError(
                f"Override #{index} sets both 'value' and 'delete'. Keep only one."
            )
        return StorageOverride(key=cast(str, key), value=None, note=note)
    value = entry.get("value")
    if not is_hex_string(value):
        raise ForkOffProfileError(
            f"Invalid value in override #{index}: expected a quoted 0x-prefixed hex string "
            "or 'delete: true'."
        )
    return StorageOverride(key=cast(str, key), value=cast(str, value), note=note)
