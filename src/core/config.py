"""Runtime configuration model for forkoff.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    BINARY_FILE_NAME,
    DEFAULT_CHUNK_LEVELS,
    DEFAULT_DATA_ROOT,
    DEFAULT_RPC_ENDPOINT,
    FORKED_SPEC_FILE_NAME,
    ORIGINAL_SPEC_FILE_NAME,
    RUNTIME_HEX_FILE_NAME,
    RUNTIME_WASM_FILE_NAME,
    SNAPSHOT_FILE_NAME,
    TYPE_SCHEMA_FILE_NAME,
)
from core.errors import ForkOffConfigError

_FALSE_FLAG_VALUES = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class ForkOffConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Directory holding the binary, runtime blob, and outputs.
        rpc_endpoint: HTTP JSON-RPC endpoint of the live chain.
        chunk_levels: Depth of the keyspace chunk tree.
        quick_mode: Fetch last-level chunks concurrently.
        rpc_timeout_seconds: Optional per-request timeout; None waits forever.
    """

    data_root: Path
    rpc_endpoint: str
    chunk_levels: int
    quick_mode: bool
    rpc_timeout_seconds: float | None = None

    @classmethod
    def from_env(cls) -> "ForkOffConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ForkOffConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("FORKOFF_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        rpc_endpoint = os.getenv("HTTP_RPC_ENDPOINT", DEFAULT_RPC_ENDPOINT)
        chunk_levels = parse_chunk_levels(
            os.getenv("FORK_CHUNKS_LEVEL", str(DEFAULT_CHUNK_LEVELS))
        )
        quick_mode = _parse_flag(os.getenv("QUICK_MODE", ""))
        rpc_timeout_seconds = _parse_timeout(os.getenv("FORKOFF_RPC_TIMEOUT"))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            rpc_endpoint=rpc_endpoint,
            chunk_levels=chunk_levels,
            quick_mode=quick_mode,
            rpc_timeout_seconds=rpc_timeout_seconds,
        )

    @property
    def binary_path(self) -> Path:
        return self.data_root / BINARY_FILE_NAME

    @property
    def runtime_wasm_path(self) -> Path:
        return self.data_root / RUNTIME_WASM_FILE_NAME

    @property
    def runtime_hex_path(self) -> Path:
        return self.data_root / RUNTIME_HEX_FILE_NAME

    @property
    def original_spec_path(self) -> Path:
        return self.data_root / ORIGINAL_SPEC_FILE_NAME

    @property
    def forked_spec_path(self) -> Path:
        return self.data_root / FORKED_SPEC_FILE_NAME

    @property
    def snapshot_path(self) -> Path:
        return self.data_root / SNAPSHOT_FILE_NAME

    @property
    def type_schema_path(self) -> Path:
        """Optional custom type registry used to decode chain metadata."""
        return self.data_root / TYPE_SCHEMA_FILE_NAME


def parse_chunk_levels(raw_value: str) -> int:
    """Parse a chunk depth value.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Non-negative chunk depth.

    Raises:
        ForkOffConfigError: If value is not a non-negative integer.
    """
    try:
        levels = int(raw_value)
    except ValueError as error:
        raise ForkOffConfigError(
            "Invalid FORK_CHUNKS_LEVEL value: "
            f"expected integer, got '{raw_value}'. "
            "Set FORK_CHUNKS_LEVEL to 0 or a positive number."
        ) from error
    if levels < 0:
        raise ForkOffConfigError(
            f"Invalid FORK_CHUNKS_LEVEL value: {levels} is negative. "
            "Set FORK_CHUNKS_LEVEL to 0 or a positive number."
        )
    return levels


def _parse_flag(raw_value: str) -> bool:
    return raw_value.strip().lower() not in _FALSE_FLAG_VALUES


def _parse_timeout(raw_value: str | None) -> float | None:
    """Parse the optional RPC timeout in seconds."""
    if raw_value is None or not raw_value.strip():
        return None
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise ForkOffConfigError(
            "Invalid FORKOFF_RPC_TIMEOUT value: "
            f"expected seconds, got '{raw_value}'. "
            "Unset it or provide a positive number."
        ) from error
    if timeout <= 0:
        raise ForkOffConfigError(
            f"Invalid FORKOFF_RPC_TIMEOUT value: {timeout} must be positive."
        )
    return timeout
