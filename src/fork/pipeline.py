"""Fork orchestration.

This module coordinates prerequisite checks, the cached state fetch,
prefix derivation, raw spec generation, and the final splice.
"""

from __future__ import annotations

from pathlib import Path

from core.config import ForkOffConfig
from core.logging_config import get_logger
from core.types import FetchOptions, FetchSummary, ForkOptions, ForkResult
from fetch.progress import ProgressObserver
from fetch.rpc_client import StatePairsSource, SubstrateRpcClient
from fetch.snapshot_store import SnapshotStore
from fetch.state_fetcher import fetch_snapshot
from fork.chain_binary import ChainBinary
from fork.prerequisites import check_prerequisites
from fork.runtime_blob import convert_runtime_blob
from splice.fork_profile import load_fork_profile
from splice.metadata_source import ChainMetadataSource, SubstrateMetadataSource
from splice.prefix_registry import build_prefix_set
from splice.spec_documents import read_genesis_spec, write_genesis_spec
from splice.spec_splicer import count_retained_pairs, splice_fork_spec

_LOGGER = get_logger(__name__)


class ForkPipelineRunner:
    """Runner for one forked genesis build.

    The RPC source, metadata source, and chain binary default to the live
    implementations built from config and can be replaced for tests.
    """

    def __init__(
        self,
        options: ForkOptions,
        config: ForkOffConfig,
        state_source: StatePairsSource | None = None,
        metadata_source: ChainMetadataSource | None = None,
        chain_binary: ChainBinary | None = None,
        observer: ProgressObserver | None = None,
    ) -> None:
        self._options = options
        self._config = config
        self._owned_client: SubstrateRpcClient | None = None
        if state_source is None:
            self._owned_client = SubstrateRpcClient(
                config.rpc_endpoint, config.rpc_timeout_seconds
            )
            state_source = self._owned_client
        self._state_source = state_source
        self._metadata_source = metadata_source or SubstrateMetadataSource(
            config.rpc_endpoint,
            options.block_hash,
            type_registry_path=config.type_schema_path,
        )
        self._chain_binary = chain_binary or ChainBinary(config.binary_path)
        self._observer = observer

    def run(self) -> ForkResult:
        """Execute the fork and return the written spec location.

        A state client built by the runner is closed when the run ends.
        """
        try:
            return self._run()
        finally:
            if self._owned_client is not None:
                self._owned_client.close()

    def _run(self) -> ForkResult:
        check_prerequisites(self._config)
        self._chain_binary.ensure_executable()
        runtime_hex = convert_runtime_blob(
            self._config.runtime_wasm_path, self._config.runtime_hex_path
        )
        profile = load_fork_profile(self._options.profile_path)
        store = SnapshotStore(self._config.snapshot_path)
        fetch_snapshot(store, self._state_source, self._options.fetch_options(), self._observer)
        prefixes = build_prefix_set(self._metadata_source.read_modules(), profile.policy)
        self._chain_binary.build_raw_spec(self._options.chain, self._config.original_spec_path)
        self._chain_binary.build_raw_spec(None, self._config.forked_spec_path)
        snapshot = store.load_pairs()
        original_spec = read_genesis_spec(self._config.original_spec_path)
        forked_spec = read_genesis_spec(self._config.forked_spec_path)
        spliced_spec = splice_fork_spec(
            original_spec,
            forked_spec,
            snapshot,
            prefixes,
            runtime_hex,
            profile.overrides,
        )
        write_genesis_spec(self._config.forked_spec_path, spliced_spec)
        result = ForkResult(
            output_path=self._config.forked_spec_path,
            snapshot_pair_count=len(snapshot),
            transplanted_pair_count=count_retained_pairs(snapshot, prefixes),
            prefix_count=len(prefixes),
        )
        _LOGGER.info(
            "fork_completed",
            chain=self._options.chain,
            block_hash=self._options.block_hash,
            output_path=str(result.output_path),
            snapshot_pair_count=result.snapshot_pair_count,
            transplanted_pair_count=result.transplanted_pair_count,
            prefix_count=result.prefix_count,
        )
        return result


def run_fork(
    options: ForkOptions,
    config: ForkOffConfig,
    observer: ProgressObserver | None = None,
) -> ForkResult:
    """Build the forked genesis spec for ``options.chain``.

    Args:
        options: Fork request options.
        config: Runtime configuration.
        observer: Optional per-chunk progress callback.

    Returns:
        Fork result with output path and counts.

    Raises:
        ForkOffPrerequisiteError: If the binary or runtime blob is missing.
        ForkOffRpcError: If the state fetch fails.
        ForkOffSpecError: If a genesis document is malformed.
    """
    runner = ForkPipelineRunner(options, config, observer=observer)
    return runner.run()


def fetch_state(
    config: ForkOffConfig,
    block_hash: str | None = None,
    observer: ProgressObserver | None = None,
) -> FetchSummary:
    """Fetch or reuse the storage snapshot without building specs."""
    store = SnapshotStore(config.snapshot_path)
    client = SubstrateRpcClient(config.rpc_endpoint, config.rpc_timeout_seconds)
    options = FetchOptions(
        chunk_levels=config.chunk_levels,
        quick_mode=config.quick_mode,
        block_hash=block_hash,
    )
    try:
        return fetch_snapshot(store, client, options, observer)
    finally:
        client.close()


def resolve_prefixes(
    config: ForkOffConfig,
    block_hash: str | None = None,
    profile_path: Path | None = None,
    metadata_source: ChainMetadataSource | None = None,
) -> tuple[str, ...]:
    """Return the storage prefixes a fork of the live chain would retain."""
    profile = load_fork_profile(profile_path)
    source = metadata_source or SubstrateMetadataSource(
        config.rpc_endpoint,
        block_hash,
        type_registry_path=config.type_schema_path,
    )
    return build_prefix_set(source.read_modules(), profile.policy)
