"""Genesis spec document IO."""

from __future__ import annotations

import json
from pathlib import Path

from core.constants import FORKED_SPEC_JSON_INDENT
from core.errors import ForkOffSpecError
from core.types import GenesisSpec


def read_genesis_spec(spec_path: Path) -> GenesisSpec:
    """Read one raw genesis spec JSON document.

    Raises:
        ForkOffSpecError: If the file is missing, unreadable, or not a JSON object.
    """
    if not spec_path.exists():
        raise ForkOffSpecError(f"Genesis spec not found at {spec_path}.")
    try:
        payload = json.loads(spec_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise ForkOffSpecError(f"Failed to read genesis spec at {spec_path}: {error}.") from error
    if not isinstance(payload, dict):
        raise ForkOffSpecError(
            f"Invalid genesis spec at {spec_path}: expected a JSON object, "
            f"got {type(payload).__name__}."
        )
    return payload


def write_genesis_spec(spec_path: Path, spec: GenesisSpec) -> None:
    """Write a genesis spec as pretty-printed JSON, replacing any prior file."""
    spec_path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(spec, indent=FORKED_SPEC_JSON_INDENT, ensure_ascii=False)
    spec_path.write_text(payload, encoding="utf-8")
