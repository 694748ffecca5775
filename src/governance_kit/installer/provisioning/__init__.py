"""Filesystem primitives used to provision governance artifacts.

Each primitive computes an action for one target, honours dry-run by never
touching the filesystem, and reports what it did (or would do) with an
explicit verb.
"""

from governance_kit.installer.provisioning.annotations import (
    AnnotationAction,
    AnnotationMarker,
    AnnotationResult,
    annotate_files,
)
from governance_kit.installer.provisioning.files import FileAction, ensure_file, write_atomic
from governance_kit.installer.provisioning.settings_merge import (
    MergeAction,
    MergeResult,
    merge_settings,
)

__all__ = [
    "AnnotationAction",
    "AnnotationMarker",
    "AnnotationResult",
    "FileAction",
    "MergeAction",
    "MergeResult",
    "annotate_files",
    "ensure_file",
    "merge_settings",
    "write_atomic",
]
