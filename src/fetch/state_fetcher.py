"""Chunked live-state download.

This module walks the chunk tree depth-first with an explicit stack and
issues one range query per leaf chunk, streaming each result into the
snapshot writer as it arrives.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor, as_completed

from core.constants import CHUNK_FANOUT, KEYSPACE_ROOT_PREFIX
from core.logging_config import get_logger
from core.types import FetchOptions, FetchSummary
from fetch.keyspace import child_prefixes, total_chunks
from fetch.progress import FetchProgressTracker, ProgressObserver
from fetch.rpc_client import StatePairsSource
from fetch.snapshot_store import SnapshotStore, SnapshotWriter

_LOGGER = get_logger(__name__)


class ChunkedStateFetcher:
    """Walks the keyspace chunk tree and streams every leaf's pairs.

    In quick mode the 256 leaves below each last-level node are queried
    concurrently; every level above stays strictly sequential so at most
    256 requests are ever in flight.
    """

    def __init__(
        self,
        source: StatePairsSource,
        writer: SnapshotWriter,
        progress: FetchProgressTracker,
        quick_mode: bool = False,
    ) -> None:
        self._source = source
        self._writer = writer
        self._progress = progress
        self._quick_mode = quick_mode

    def fetch(self, root_prefix: str, block_hash: str | None, levels: int) -> None:
        """Fetch every pair under ``root_prefix`` split ``levels`` bytes deep.

        RPC errors are not caught; the first failure aborts the walk.
        """
        if self._quick_mode and levels >= 1:
            with ThreadPoolExecutor(max_workers=CHUNK_FANOUT) as executor:
                self._walk(root_prefix, block_hash, levels, executor)
            return
        self._walk(root_prefix, block_hash, levels, None)

    def _walk(
        self,
        root_prefix: str,
        block_hash: str | None,
        levels: int,
        executor: Executor | None,
    ) -> None:
        stack: list[tuple[str, int]] = [(root_prefix, levels)]
        while stack:
            prefix, levels_remaining = stack.pop()
            if levels_remaining <= 0:
                self._fetch_leaf(prefix, block_hash)
                continue
            children = child_prefixes(prefix)
            if executor is not None and levels_remaining == 1:
                self._fetch_leaves_concurrently(children, block_hash, executor)
                continue
            stack.extend((child, levels_remaining - 1) for child in reversed(children))

    def _fetch_leaves_concurrently(
        self,
        prefixes: tuple[str, ...],
        block_hash: str | None,
        executor: Executor,
    ) -> None:
        futures = [executor.submit(self._fetch_leaf, prefix, block_hash) for prefix in prefixes]
        for future in as_completed(futures):
            future.result()

    def _fetch_leaf(self, prefix: str, block_hash: str | None) -> None:
        pairs = self._source.get_pairs(prefix, block_hash)
        self._writer.write_pairs(pairs)
        self._progress.advance()


def fetch_snapshot(
    store: SnapshotStore,
    source: StatePairsSource,
    options: FetchOptions,
    observer: ProgressObserver | None = None,
) -> FetchSummary:
    """Download the full live state into the snapshot cache.

    An existing snapshot is reused as-is and no RPC calls are made.

    Args:
        store: Snapshot cache location.
        source: Chain RPC provider.
        options: Chunk depth, quick mode, and optional block.
        observer: Optional per-chunk progress callback.

    Returns:
        Fetch summary describing the snapshot used.

    Raises:
        ForkOffRpcError: If any chunk query fails; the partial file is kept.
    """
    chunk_count = total_chunks(options.chunk_levels)
    if store.exists():
        _LOGGER.warning(
            "snapshot_cache_reused",
            path=str(store.path),
            hint="Delete the snapshot file and rerun to fetch the latest storage.",
        )
        return FetchSummary(snapshot_path=store.path, total_chunks=chunk_count, reused_cache=True)
    progress = FetchProgressTracker(chunk_count, observer)
    progress.log_fetch_started(options.block_hash, options.quick_mode)
    with store.writer() as writer:
        fetcher = ChunkedStateFetcher(source, writer, progress, options.quick_mode)
        fetcher.fetch(KEYSPACE_ROOT_PREFIX, options.block_hash, options.chunk_levels)
    progress.log_fetch_completed()
    _LOGGER.info("snapshot_written", path=str(store.path), pair_count=writer.pair_count)
    return FetchSummary(snapshot_path=store.path, total_chunks=chunk_count, reused_cache=False)
