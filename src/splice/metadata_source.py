"""Chain module metadata access.

This module reads the runtime's pallet list through substrate-interface
so the prefix registry knows which modules declare storage and under
which storage prefix their keys live.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Protocol

import requests
from scalecodec.type_registry import load_type_registry_file
from substrateinterface import SubstrateInterface
from substrateinterface.exceptions import SubstrateRequestException

from core.errors import ForkOffMetadataError
from core.logging_config import get_logger
from core.types import ModuleMetadata

_LOGGER = get_logger(__name__)


class ChainMetadataSource(Protocol):
    """Anything that can list the chain's runtime modules."""

    def read_modules(self) -> list[ModuleMetadata]:
        """Return every module with its storage flag."""


class SubstrateMetadataSource:
    """Metadata reader backed by a SubstrateInterface connection.

    When ``type_registry_path`` points at an existing JSON type schema its
    types are registered before metadata is decoded; otherwise the
    library's default registry is used.
    """

    def __init__(
        self,
        endpoint: str,
        block_hash: str | None = None,
        type_registry_path: Path | None = None,
        interface_factory: Callable[..., Any] = SubstrateInterface,
    ) -> None:
        self._endpoint = endpoint
        self._block_hash = block_hash
        self._type_registry_path = type_registry_path
        self._interface_factory = interface_factory

    def read_modules(self) -> list[ModuleMetadata]:
        """Read pallet names, storage prefixes and storage presence.

        Raises:
            ForkOffMetadataError: If the schema is unreadable, or the node
                cannot be reached or decoded.
        """
        interface_options = self._interface_options()
        try:
            substrate = self._interface_factory(url=self._endpoint, **interface_options)
            try:
                metadata = substrate.get_metadata(block_hash=self._block_hash)
                pallets = list(metadata.pallets)
            finally:
                substrate.close()
        except (SubstrateRequestException, requests.RequestException, ConnectionError) as error:
            raise ForkOffMetadataError(
                f"Failed to read runtime metadata from {self._endpoint}: {error}. "
                "Check HTTP_RPC_ENDPOINT and the optional block hash."
            ) from error
        return [_parse_pallet(pallet) for pallet in pallets]

    def _interface_options(self) -> dict[str, Any]:
        schema_path = self._type_registry_path
        if schema_path is None or not schema_path.is_file():
            _LOGGER.warning(
                "custom_schema_missing",
                schema_path=str(schema_path) if schema_path else None,
                detail="using default type registry",
            )
            return {}
        try:
            type_registry = load_type_registry_file(str(schema_path))
        except (OSError, json.JSONDecodeError) as error:
            raise ForkOffMetadataError(
                f"Failed to read custom type schema at {schema_path}: {error}. "
                "Fix the JSON or remove the file to use the default registry."
            ) from error
        _LOGGER.info("custom_schema_loaded", schema_path=str(schema_path))
        return {"type_registry": type_registry}


def _parse_pallet(pallet: Any) -> ModuleMetadata:
    value = getattr(pallet, "value", pallet)
    if not isinstance(value, dict) or not isinstance(value.get("name"), str):
        raise ForkOffMetadataError(f"Unexpected pallet metadata entry: {value!r}.")
    storage = value.get("storage")
    if not isinstance(storage, dict):
        return ModuleMetadata(name=value["name"], has_storage=False)
    entries = storage.get("entries", storage.get("items")) or []
    prefix = storage.get("prefix")
    return ModuleMetadata(
        name=value["name"],
        has_storage=len(entries) > 0,
        storage_prefix=prefix if isinstance(prefix, str) and prefix else None,
    )
