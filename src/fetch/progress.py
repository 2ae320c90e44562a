"""Structured state fetch progress reporting.

This module counts completed leaf chunks against the known total and
reports each step to an observer, plus start and completion events.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from tqdm import tqdm

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

ProgressObserver = Callable[[int, int], None]


class FetchProgressTracker:
    """Thread-safe completed-chunk counter for one fetch session."""

    def __init__(self, total_chunks: int, observer: ProgressObserver | None = None) -> None:
        self._total_chunks = total_chunks
        self._observer = observer
        self._completed = 0
        self._lock = threading.Lock()
        self._started_at = time.monotonic()

    @property
    def total_chunks(self) -> int:
        return self._total_chunks

    @property
    def completed(self) -> int:
        return self._completed

    def log_fetch_started(self, block_hash: str | None, quick_mode: bool) -> None:
        """Log one event when a fetch session starts."""
        self._started_at = time.monotonic()
        _LOGGER.info(
            "state_fetch_started",
            total_chunks=self._total_chunks,
            block_hash=block_hash,
            quick_mode=quick_mode,
        )

    def advance(self) -> int:
        """Count one finished leaf chunk and notify the observer.

        Returns:
            Completed chunk count after this step.
        """
        with self._lock:
            self._completed += 1
            current = self._completed
            if self._observer is not None:
                self._observer(current, self._total_chunks)
        return current

    def log_fetch_completed(self) -> None:
        """Log completion with elapsed time."""
        elapsed_seconds = max(0.0, time.monotonic() - self._started_at)
        _LOGGER.info(
            "state_fetch_completed",
            chunks=self._completed,
            total_chunks=self._total_chunks,
            elapsed_seconds=round(elapsed_seconds, 3),
        )


class TqdmProgressBar:
    """Terminal progress bar observer."""

    def __init__(self, total_chunks: int) -> None:
        self._bar = tqdm(total=total_chunks, unit="chunk", desc="Fetching state")

    def __call__(self, current: int, total: int) -> None:
        self._bar.update(current - self._bar.n)

    def close(self) -> None:
        self._bar.close()
