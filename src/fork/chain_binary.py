"""Chain binary invocation for raw spec generation."""

from __future__ import annotations

import stat
import subprocess
from pathlib import Path

from core.errors import ForkOffChainBinaryError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class ChainBinary:
    """Wrapper around the node binary's ``build-spec`` subcommand."""

    def __init__(self, binary_path: Path) -> None:
        self._binary_path = binary_path

    def ensure_executable(self) -> None:
        """Add execute permission bits to the binary."""
        mode = self._binary_path.stat().st_mode
        self._binary_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def build_raw_spec(self, chain: str | None, output_path: Path) -> Path:
        """Write a raw spec for ``chain``, or the dev spec when chain is None.

        Raises:
            ForkOffChainBinaryError: If the binary cannot run or exits non-zero.
        """
        chain_args = ["--chain", chain] if chain is not None else ["--dev"]
        command = [str(self._binary_path), "build-spec", *chain_args, "--raw"]
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with output_path.open("w", encoding="utf-8") as output_file:
                subprocess.run(
                    command,
                    stdout=output_file,
                    stderr=subprocess.PIPE,
                    check=True,
                    text=True,
                )
        except subprocess.CalledProcessError as error:
            raise ForkOffChainBinaryError(
                f"Command '{' '.join(command)}' exited with status {error.returncode}: "
                f"{(error.stderr or '').strip()}"
            ) from error
        except OSError as error:
            raise ForkOffChainBinaryError(
                f"Failed to run chain binary {self._binary_path}: {error}."
            ) from error
        _LOGGER.info("raw_spec_built", chain=chain or "dev", path=str(output_path))
        return output_path
