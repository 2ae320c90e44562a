"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

from cli.main import main
from core.types import ModuleMetadata
from tests.fakes import FakeMetadataSource, FakeStateSource, scattered_pairs


def test_cli_prefixes_prints_retained_prefixes(monkeypatch, capsys) -> None:
    """Prefixes command should print pins first, then module hashes."""
    monkeypatch.setattr(
        "fork.pipeline.SubstrateMetadataSource",
        lambda endpoint, block_hash, type_registry_path=None: FakeMetadataSource(
            [
                ModuleMetadata(name="System", has_storage=True),
                ModuleMetadata(name="Balances", has_storage=True),
            ]
        ),
    )

    exit_code = main(["prefixes"])
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and output == [
        "0x26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9",
        "0xc2261276cc9d1f8598ea4b6a74b15c2f",
    ]


def test_cli_fetch_writes_snapshot(tmp_path, monkeypatch, capsys) -> None:
    """Fetch command should print the snapshot path and write every pair."""
    source = FakeStateSource(scattered_pairs())
    monkeypatch.setattr(
        "fork.pipeline.SubstrateRpcClient", lambda endpoint, timeout: _ClosingSource(source)
    )

    exit_code = main(["--data-root", str(tmp_path), "--chunks-level", "1", "--quick", "fetch"])
    output = capsys.readouterr().out.strip()
    snapshot = json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))

    assert exit_code == 0 and output.endswith("storage.json") and len(snapshot) == 9


def test_cli_fork_reports_missing_binary(tmp_path, capsys) -> None:
    """Missing prerequisites should exit non-zero with an operator message."""
    exit_code = main(["--data-root", str(tmp_path), "fork", "--chain", "kusama"])
    error_output = capsys.readouterr().err

    assert exit_code == 1 and "Binary missing" in error_output


def test_cli_rejects_negative_chunk_level(tmp_path, capsys) -> None:
    """Invalid config overrides should be reported as errors."""
    exit_code = main(["--data-root", str(tmp_path), "--chunks-level", "-2", "fetch"])

    assert exit_code == 1 and "FORK_CHUNKS_LEVEL" in capsys.readouterr().err


class _ClosingSource:
    def __init__(self, source: FakeStateSource) -> None:
        self._source = source

    def get_pairs(self, prefix: str, block_hash: str | None) -> list[tuple[str, str]]:
        return self._source.get_pairs(prefix, block_hash)

    def close(self) -> None:
        return None
