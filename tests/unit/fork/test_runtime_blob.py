"""Unit tests for runtime blob conversion."""

from __future__ import annotations

import pytest

from core.errors import ForkOffPrerequisiteError
from fork.runtime_blob import convert_runtime_blob


def test_convert_runtime_blob_writes_lowercase_hex(tmp_path) -> None:
    """The wasm bytes should become lowercase hex text without a marker."""
    wasm_path = tmp_path / "runtime.wasm"
    wasm_path.write_bytes(b"\x00asm\xAB\xCD")
    hex_path = tmp_path / "runtime.hex"

    runtime_hex = convert_runtime_blob(wasm_path, hex_path)

    assert runtime_hex == "0061736dabcd" and hex_path.read_text(encoding="utf-8") == runtime_hex


def test_convert_runtime_blob_raises_for_missing_wasm(tmp_path) -> None:
    """A missing blob is a prerequisite failure."""
    with pytest.raises(ForkOffPrerequisiteError):
        convert_runtime_blob(tmp_path / "runtime.wasm", tmp_path / "runtime.hex")
