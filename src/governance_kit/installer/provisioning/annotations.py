"""Prepend a one-line governance marker to matching source files.

This touches files outside the installer's own artifact set, so it only runs
when explicitly requested. Files are handled as bytes: apart from the single
prepended line nothing is re-encoded, reordered or normalised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from governance_kit.installer.provisioning.files import write_atomic

logger = logging.getLogger(__name__)

MARKER_TAG = "governance-kit:"

# Only the head of a file is inspected for an existing marker.
DETECTION_WINDOW_BYTES = 4096

UTF8_BOM = b"\xef\xbb\xbf"

EXCLUDED_DIRS: frozenset[str] = frozenset(
    {".git", ".hg", ".svn", "node_modules", ".venv", "venv", "__pycache__"}
)


class AnnotationAction(str, Enum):
    ALREADY_ANNOTATED = "already-annotated"
    WOULD_ANNOTATE = "would-annotate"
    ANNOTATED = "annotated"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AnnotationMarker:
    """The marker line and the pattern that recognises it."""

    line: str
    pattern: re.Pattern[str]

    @classmethod
    def for_guidance(cls, guidance_path: str) -> AnnotationMarker:
        return cls(
            line=f"// {MARKER_TAG} see {guidance_path}",
            pattern=re.compile(rf"^[ \t]*//[ \t]*{re.escape(MARKER_TAG)}", re.MULTILINE),
        )

    def is_present(self, head: bytes) -> bool:
        text = head.decode("utf-8-sig", errors="replace")
        return self.pattern.search(text) is not None


@dataclass(frozen=True, slots=True)
class AnnotationResult:
    file: Path
    action: AnnotationAction
    error: str | None = None


def iter_annotation_targets(root: Path, glob_pattern: str, size_limit_bytes: int) -> list[Path]:
    """Return files under `root` matching `glob_pattern`, in a stable order.

    Files inside VCS/dependency directories, symlinks, anything that resolves
    outside `root`, and files larger than `size_limit_bytes` are left out.
    """

    real_root = root.resolve()
    targets: list[Path] = []
    for path in sorted(root.glob(glob_pattern)):
        relative_parts = path.relative_to(root).parts[:-1]
        if any(part in EXCLUDED_DIRS for part in relative_parts):
            continue
        if path.is_symlink() or not path.is_file():
            continue
        if not path.resolve().is_relative_to(real_root):
            logger.warning("Skipping file outside the project root", extra={"path": str(path)})
            continue
        size = path.stat().st_size
        if size > size_limit_bytes:
            logger.debug(
                "Skipping oversized file",
                extra={"path": str(path), "size": size, "limit": size_limit_bytes},
            )
            continue
        targets.append(path)
    return targets


def _annotated_bytes(original: bytes, marker_line: str) -> bytes:
    bom = b""
    body = original
    if body.startswith(UTF8_BOM):
        bom, body = UTF8_BOM, body[len(UTF8_BOM) :]

    first_break = body.find(b"\n")
    newline = b"\r\n" if first_break > 0 and body[first_break - 1 : first_break] == b"\r" else b"\n"
    return bom + marker_line.encode("utf-8") + newline + body


def annotate_file(path: Path, marker: AnnotationMarker, *, dry_run: bool) -> AnnotationResult:
    """Annotate a single file, at most once."""

    try:
        original = path.read_bytes()
    except OSError as e:
        logger.warning("Could not read file for annotation", extra={"path": str(path)})
        return AnnotationResult(file=path, action=AnnotationAction.FAILED, error=str(e))

    if marker.is_present(original[:DETECTION_WINDOW_BYTES]):
        return AnnotationResult(file=path, action=AnnotationAction.ALREADY_ANNOTATED)

    if dry_run:
        return AnnotationResult(file=path, action=AnnotationAction.WOULD_ANNOTATE)

    try:
        write_atomic(path, _annotated_bytes(original, marker.line))
    except OSError as e:
        logger.error("Failed to annotate file", extra={"path": str(path), "error": str(e)})
        return AnnotationResult(file=path, action=AnnotationAction.FAILED, error=str(e))

    return AnnotationResult(file=path, action=AnnotationAction.ANNOTATED)


def annotate_files(
    root: Path,
    glob_pattern: str,
    marker: AnnotationMarker,
    size_limit_bytes: int,
    *,
    dry_run: bool,
) -> list[AnnotationResult]:
    """Annotate every eligible file under `root`.

    A failure on one file is reported in its result and does not stop the
    remaining files.
    """

    results = [
        annotate_file(path, marker, dry_run=dry_run)
        for path in iter_annotation_targets(root, glob_pattern, size_limit_bytes)
    ]
    logger.info(
        "Annotation pass finished",
        extra={
            "glob": glob_pattern,
            "files": len(results),
            "annotated": sum(r.action is AnnotationAction.ANNOTATED for r in results),
        },
    )
    return results
