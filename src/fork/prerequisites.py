"""Pre-run artifact checks."""

from __future__ import annotations

from core.config import ForkOffConfig
from core.errors import ForkOffPrerequisiteError


def check_prerequisites(config: ForkOffConfig) -> None:
    """Fail fast when the chain binary or runtime blob is missing.

    Raises:
        ForkOffPrerequisiteError: Before anything is fetched or written.
    """
    if not config.binary_path.is_file():
        raise ForkOffPrerequisiteError(
            f"Binary missing at {config.binary_path}. Copy the binary of your substrate node "
            f"to {config.data_root} and rename it to '{config.binary_path.name}'."
        )
    if not config.runtime_wasm_path.is_file():
        raise ForkOffPrerequisiteError(
            f"WASM missing at {config.runtime_wasm_path}. Copy the WASM blob of your substrate "
            f"node to {config.data_root} and rename it to '{config.runtime_wasm_path.name}'."
        )
