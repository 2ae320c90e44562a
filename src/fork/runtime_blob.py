"""Runtime code blob conversion."""

from __future__ import annotations

from pathlib import Path

from core.errors import ForkOffPrerequisiteError


def convert_runtime_blob(wasm_path: Path, hex_path: Path) -> str:
    """Convert the runtime wasm into lowercase hex text.

    The hex text is also written to ``hex_path`` for inspection.

    Returns:
        Hex body without a ``0x`` marker.
    """
    try:
        runtime_hex = wasm_path.read_bytes().hex()
    except OSError as error:
        raise ForkOffPrerequisiteError(
            f"Failed to read runtime blob at {wasm_path}: {error}."
        ) from error
    hex_path.write_text(runtime_hex, encoding="utf-8")
    return runtime_hex
