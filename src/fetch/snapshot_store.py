"""Storage snapshot persistence.

The snapshot is one JSON array of ``[key, value]`` pairs written
incrementally, one leaf-chunk fragment at a time. Once written it is
treated as a complete cache and reused by later runs.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from types import TracebackType
from typing import Sequence, TextIO

from core.errors import ForkOffSnapshotError
from core.hex_strings import is_hex_string
from core.logging_config import get_logger
from core.types import KeyValuePair

_LOGGER = get_logger(__name__)


class SnapshotWriter:
    """Append-only JSON array writer shared by concurrent leaf fetches.

    The opening bracket is written on enter; the closing bracket only when
    the block exits without an error, so an aborted fetch leaves a partial
    file behind.
    """

    def __init__(self, snapshot_path: Path) -> None:
        self._snapshot_path = snapshot_path
        self._stream: TextIO | None = None
        self._separator = False
        self._pair_count = 0
        self._lock = threading.Lock()

    def __enter__(self) -> "SnapshotWriter":
        self._snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        self._stream = self._snapshot_path.open("w", encoding="utf-8")
        self._stream.write("[")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        stream = self._require_stream()
        try:
            if exc_type is None:
                stream.write("]")
        finally:
            stream.close()
            self._stream = None

    @property
    def pair_count(self) -> int:
        return self._pair_count

    def write_pairs(self, pairs: Sequence[KeyValuePair]) -> None:
        """Append one chunk's pairs as a comma-joined array fragment."""
        if not pairs:
            return
        fragment = json.dumps([list(pair) for pair in pairs], separators=(",", ":"))[1:-1]
        with self._lock:
            stream = self._require_stream()
            if self._separator:
                stream.write(",")
            else:
                self._separator = True
            stream.write(fragment)
            self._pair_count += len(pairs)

    def _require_stream(self) -> TextIO:
        if self._stream is None:
            raise ForkOffSnapshotError(
                f"Snapshot writer for {self._snapshot_path} is not open. "
                "Use it as a context manager."
            )
        return self._stream


class SnapshotStore:
    """Filesystem-backed storage snapshot cache."""

    def __init__(self, snapshot_path: Path) -> None:
        self._snapshot_path = snapshot_path

    @property
    def path(self) -> Path:
        return self._snapshot_path

    def exists(self) -> bool:
        """Return whether a cached snapshot is present."""
        return self._snapshot_path.exists()

    def writer(self) -> SnapshotWriter:
        """Create an incremental writer for a fresh snapshot."""
        return SnapshotWriter(self._snapshot_path)

    def load_pairs(self) -> list[KeyValuePair]:
        """Load every key-value pair from the snapshot.

        Returns:
            Pairs in the order they were written.

        Raises:
            ForkOffSnapshotError: If the snapshot is missing or malformed.
        """
        if not self._snapshot_path.exists():
            raise ForkOffSnapshotError(
                f"Storage snapshot not found at {self._snapshot_path}. "
                "Run the fetch step first."
            )
        try:
            payload = json.loads(self._snapshot_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise ForkOffSnapshotError(
                f"Failed to read storage snapshot at {self._snapshot_path}: {error}. "
                "Delete the file and rerun to fetch the latest storage."
            ) from error
        pairs = _parse_pairs(self._snapshot_path, payload)
        _LOGGER.info("snapshot_loaded", path=str(self._snapshot_path), pair_count=len(pairs))
        return pairs


def _parse_pairs(snapshot_path: Path, payload: object) -> list[KeyValuePair]:
    if not isinstance(payload, list):
        raise ForkOffSnapshotError(
            f"Invalid storage snapshot at {snapshot_path}: expected a JSON array. "
            "Delete the file and rerun to fetch the latest storage."
        )
    pairs: list[KeyValuePair] = []
    for index, item in enumerate(payload):
        if (
            not isinstance(item, list)
            or len(item) != 2
            or not is_hex_string(item[0])
            or not is_hex_string(item[1])
        ):
            raise ForkOffSnapshotError(
                f"Invalid storage snapshot entry #{index} at {snapshot_path}: "
                "expected a [key, value] pair of hex strings."
            )
        pairs.append((item[0], item[1]))
    return pairs
