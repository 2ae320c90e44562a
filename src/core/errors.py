"""forkoff exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class ForkOffError(Exception):
    """Base exception for all forkoff failures."""


class ForkOffConfigError(ForkOffError):
    """Raised for invalid runtime configuration."""


class ForkOffPrerequisiteError(ForkOffError):
    """Raised when a required input artifact is missing before a run."""


class ForkOffRpcError(ForkOffError):
    """Raised for chain RPC transport or protocol failures."""


class ForkOffMetadataError(ForkOffError):
    """Raised when chain module metadata cannot be read."""


class ForkOffSnapshotError(ForkOffError):
    """Raised for unreadable or malformed storage snapshots."""


class ForkOffSpecError(ForkOffError):
    """Raised for unreadable or malformed genesis spec documents."""


class ForkOffProfileError(ForkOffError):
    """Raised for invalid fork profile files."""


class ForkOffChainBinaryError(ForkOffError):
    """Raised when the chain binary fails to produce a spec."""
