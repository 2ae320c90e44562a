"""Unit tests for the substrate metadata source."""

from __future__ import annotations

import json
from typing import Any

import pytest
from substrateinterface.exceptions import SubstrateRequestException

import splice.metadata_source as metadata_source_module
from core.errors import ForkOffMetadataError
from core.types import ModuleMetadata
from splice.metadata_source import SubstrateMetadataSource


class _FakePallet:
    def __init__(self, value: dict[str, Any]) -> None:
        self.value = value


class _FakeMetadata:
    def __init__(self, pallets: list[_FakePallet]) -> None:
        self.pallets = pallets


def _storage(prefix: str, entry_count: int) -> dict[str, Any]:
    return {"prefix": prefix, "entries": [{"name": f"Item{i}"} for i in range(entry_count)]}


class _FakeSubstrate:
    instances: list["_FakeSubstrate"] = []

    def __init__(self, url: str, **options: Any) -> None:
        self.url = url
        self.options = options
        self.closed = False
        self.requested_block: str | None = None
        _FakeSubstrate.instances.append(self)

    def get_metadata(self, block_hash: str | None = None) -> _FakeMetadata:
        self.requested_block = block_hash
        return _FakeMetadata(
            [
                _FakePallet({"name": "System", "storage": _storage("System", 12)}),
                _FakePallet({"name": "Utility", "storage": None}),
                _FakePallet({"name": "Balances", "storage": _storage("Balances", 5)}),
                _FakePallet(
                    {"name": "ElectionsPhragmen", "storage": _storage("PhragmenElection", 3)}
                ),
                _FakePallet({"name": "Empty", "storage": _storage("Empty", 0)}),
            ]
        )

    def close(self) -> None:
        self.closed = True


class _FailingSubstrate(_FakeSubstrate):
    def get_metadata(self, block_hash: str | None = None) -> _FakeMetadata:
        raise SubstrateRequestException("unknown block")


class _RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    def info(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))


def test_read_modules_maps_storage_presence_and_prefix() -> None:
    """Modules should carry a storage flag and the prefix their keys hash from."""
    source = SubstrateMetadataSource(
        "http://node:9933", block_hash="0xbeef", interface_factory=_FakeSubstrate
    )

    modules = source.read_modules()
    substrate = _FakeSubstrate.instances[-1]

    assert modules == [
        ModuleMetadata(name="System", has_storage=True, storage_prefix="System"),
        ModuleMetadata(name="Utility", has_storage=False),
        ModuleMetadata(name="Balances", has_storage=True, storage_prefix="Balances"),
        ModuleMetadata(
            name="ElectionsPhragmen", has_storage=True, storage_prefix="PhragmenElection"
        ),
        ModuleMetadata(name="Empty", has_storage=False, storage_prefix="Empty"),
    ] and (substrate.url, substrate.requested_block, substrate.closed) == (
        "http://node:9933",
        "0xbeef",
        True,
    )


def test_read_modules_passes_custom_type_registry(tmp_path, monkeypatch) -> None:
    """An existing schema file should be handed to the interface as its type registry."""
    schema_path = tmp_path / "schema.json"
    schema = {"types": {"Address": "MultiAddress", "LookupSource": "MultiAddress"}, "rpc": {}}
    schema_path.write_text(json.dumps(schema), encoding="utf-8")
    logger = _RecordingLogger()
    monkeypatch.setattr(metadata_source_module, "_LOGGER", logger)
    source = SubstrateMetadataSource(
        "http://node:9933", type_registry_path=schema_path, interface_factory=_FakeSubstrate
    )

    source.read_modules()

    assert _FakeSubstrate.instances[-1].options == {"type_registry": schema} and [
        event for event, _ in logger.events
    ] == ["custom_schema_loaded"]


def test_read_modules_warns_and_uses_default_registry_without_schema(
    tmp_path, monkeypatch
) -> None:
    """A missing schema file falls back to the default registry with a warning."""
    logger = _RecordingLogger()
    monkeypatch.setattr(metadata_source_module, "_LOGGER", logger)
    source = SubstrateMetadataSource(
        "http://node:9933",
        type_registry_path=tmp_path / "schema.json",
        interface_factory=_FakeSubstrate,
    )

    source.read_modules()

    assert _FakeSubstrate.instances[-1].options == {} and logger.events[0][0] == (
        "custom_schema_missing"
    )


def test_read_modules_rejects_malformed_schema(tmp_path) -> None:
    """A schema file that is not JSON should fail before connecting."""
    schema_path = tmp_path / "schema.json"
    schema_path.write_text("{types:", encoding="utf-8")
    instance_count = len(_FakeSubstrate.instances)
    source = SubstrateMetadataSource(
        "http://node:9933", type_registry_path=schema_path, interface_factory=_FakeSubstrate
    )

    with pytest.raises(ForkOffMetadataError, match="schema"):
        source.read_modules()

    assert len(_FakeSubstrate.instances) == instance_count


def test_read_modules_wraps_request_failures() -> None:
    """Metadata failures should surface as ForkOffMetadataError."""
    source = SubstrateMetadataSource("http://node:9933", interface_factory=_FailingSubstrate)

    with pytest.raises(ForkOffMetadataError):
        source.read_modules()

    assert _FakeSubstrate.instances[-1].closed
