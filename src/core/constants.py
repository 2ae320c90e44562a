"""Core constants used across forkoff modules.

This module centralizes file names, RPC defaults, and the curated fork
profile. Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path("data")
BINARY_FILE_NAME = "binary"
RUNTIME_WASM_FILE_NAME = "runtime.wasm"
RUNTIME_HEX_FILE_NAME = "runtime.hex"
ORIGINAL_SPEC_FILE_NAME = "genesis.json"
FORKED_SPEC_FILE_NAME = "fork.json"
SNAPSHOT_FILE_NAME = "storage.json"
TYPE_SCHEMA_FILE_NAME = "schema.json"

# HTTP is used because the websocket endpoint caps response sizes.
DEFAULT_RPC_ENDPOINT = "http://localhost:9933"
DEFAULT_CHUNK_LEVELS = 1
STATE_GET_PAIRS_METHOD = "state_getPairs"

KEYSPACE_ROOT_PREFIX = "0x"
CHUNK_FANOUT = 256

FORK_NAME_SUFFIX = "-fork"
RUNTIME_CODE_KEY = "0x3a636f6465"
FORKED_SPEC_JSON_INDENT = 4

SYSTEM_ACCOUNT_PREFIX = "0x26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9"

DEFAULT_SKIPPED_MODULES = (
    "System",
    "Session",
    "Babe",
    "Grandpa",
    "GrandpaFinality",
    "FinalityTracker",
    "Authorship",
)
DEFAULT_PINNED_PREFIXES = (SYSTEM_ACCOUNT_PREFIX,)

# (key, value, note); a value of None deletes the key.
DEFAULT_STORAGE_OVERRIDES: tuple[tuple[str, str | None, str], ...] = (
    (
        "0x26aa394eea5630e07c48ae0c9558cef7f9cce9c888469bb1a0dceaa129672ef8",
        None,
        "System.LastRuntimeUpgrade removed so on_runtime_upgrade runs",
    ),
    (
        "0x5f3e4907f716ac89b6347d15ececedcaf7dad0317324aecae8744b87fc95f2f3",
        "0x02",
        "Staking.ForceEra set to ForceNone",
    ),
    (
        "0x45323df7cc47150b3930e2666b0aa313c522231880238a0c56021b8744a00743",
        "0x0000a000005000000a00000000c8000000c800000a0000000a0000000100000001000000",
        "HostConfiguration with validation upgrade frequency and delay of 1",
    ),
    (
        "0x11f3ba2e1cdd6d62f2ff9b5589e7ff81ba7fb8745735dc3be2a2c61a72c39e78",
        "0x04f24ff3a9cf04c71dbc94d0b566f7a27b94566cac",
        "Council members set to Alice",
    ),
    (
        "0x8985776095addd4789fccbce8ca77b23ba7fb8745735dc3be2a2c61a72c39e78",
        "0x04f24ff3a9cf04c71dbc94d0b566f7a27b94566cac",
        "Technical committee members set to Alice",
    ),
    (
        "0x76310ee24dbd609d21d08ad7292757d0e48df801946c7a0cc54f1a4e51592741",
        "0x64",
        "Eligibility threshold set to 0x64",
    ),
)
