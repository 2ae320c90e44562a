"""Terminal progress bar wiring for fetch commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from core.config import ForkOffConfig
from fetch.keyspace import total_chunks
from fetch.progress import ProgressObserver, TqdmProgressBar


@contextmanager
def fetch_progress_bar(config: ForkOffConfig) -> Iterator[ProgressObserver | None]:
    """Yield a tqdm observer, or None when the cached snapshot will be reused."""
    if config.snapshot_path.exists():
        yield None
        return
    progress_bar = TqdmProgressBar(total_chunks(config.chunk_levels))
    try:
        yield progress_bar
    finally:
        progress_bar.close()
