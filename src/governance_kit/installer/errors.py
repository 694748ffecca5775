"""Error taxonomy for the installer.

- `ConfigError` is fatal and raised before anything is written.
- `ArtifactWriteError` is scoped to a single artifact; the run keeps going.

Recoverable read problems (malformed settings or policy files) are not
exceptions at all: they are logged as warnings and treated as absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ConfigError(ValueError):
    """Raised when the invocation cannot be turned into a usable configuration."""


@dataclass(frozen=True, slots=True)
class ArtifactWriteError(Exception):
    """Raised when writing a managed artifact fails at the OS level."""

    path: Path
    cause: OSError

    def __str__(self) -> str:
        reason = self.cause.strerror or str(self.cause)
        return f"Failed to write {self.path}: {reason}"
