"""Locate the host project the governance artifacts are installed into.

The installer either runs from a guidance checkout nested inside the host
project (often as a git submodule) or from the host project itself. For a
guidance checkout, detection starts at the tool directory's parent so the
checkout's own `.git` never wins; when the tool directory is just the working
directory, it is inspected first. Either way the walk upward covers a small,
fixed number of directories. It never fails: when nothing qualifies, the tool
directory's parent is used. An explicit override always wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from governance_kit.installer.errors import ConfigError

logger = logging.getLogger(__name__)

# Entries whose presence marks a directory as a project root.
DEPENDENCY_MANIFESTS: tuple[str, ...] = ("packagedef", "package.json", "pyproject.toml")
VCS_METADATA = ".git"
SUBMODULE_REGISTRATION = ".gitmodules"

ROOT_MARKERS: tuple[str, ...] = (*DEPENDENCY_MANIFESTS, VCS_METADATA, SUBMODULE_REGISTRATION)


@dataclass(frozen=True, slots=True)
class ProjectRootCandidate:
    """A directory plus the root markers found in it."""

    path: Path
    markers: frozenset[str]

    @property
    def qualifies(self) -> bool:
        return bool(self.markers)


def inspect_candidate(path: Path) -> ProjectRootCandidate:
    """Collect the root markers present in `path`."""

    found = frozenset(name for name in ROOT_MARKERS if (path / name).exists())
    return ProjectRootCandidate(path=path, markers=found)


def iter_candidates(
    tool_dir: Path, max_levels: int, *, include_tool_dir: bool = False
) -> list[ProjectRootCandidate]:
    """Return inspected directories above `tool_dir`, nearest first, bounded by `max_levels`."""

    start = tool_dir.resolve()
    search = [start, *start.parents] if include_tool_dir else list(start.parents)
    candidates: list[ProjectRootCandidate] = []
    for ancestor in search:
        if len(candidates) >= max_levels:
            break
        candidates.append(inspect_candidate(ancestor))
    return candidates


def resolve_project_root(
    tool_dir: Path,
    *,
    override: Path | None = None,
    max_levels: int = 3,
    include_tool_dir: bool = False,
) -> Path:
    """Resolve the project root.

    Args:
        tool_dir: Directory containing the installer (or its guidance checkout).
        override: Explicit root; takes precedence over auto-detection.
        max_levels: Number of directories inspected during auto-detection.
        include_tool_dir: Inspect `tool_dir` itself before its ancestors.

    Returns:
        Absolute path of the project root.

    Raises:
        ConfigError: if `override` is given but is not an existing directory.
    """

    if override is not None:
        try:
            resolved = override.expanduser().resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise ConfigError(f"Project root does not exist: {override}") from e
        if not resolved.is_dir():
            raise ConfigError(f"Project root is not a directory: {override}")
        logger.debug("Using explicit project root", extra={"path": str(resolved)})
        return resolved

    tool_dir = tool_dir.resolve()
    for candidate in iter_candidates(tool_dir, max_levels, include_tool_dir=include_tool_dir):
        if candidate.qualifies:
            logger.debug(
                "Detected project root",
                extra={"path": str(candidate.path), "markers": sorted(candidate.markers)},
            )
            return candidate.path

    fallback = tool_dir.parent
    logger.warning(
        "No project root markers found; falling back to the tool directory's parent",
        extra={"path": str(fallback), "max_levels": max_levels},
    )
    return fallback
