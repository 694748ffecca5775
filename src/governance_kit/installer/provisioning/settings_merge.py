"""Shallow, additive merge of a settings fragment into a JSON settings file.

The settings file may be hand-customised by the host project, so the merge is
overlay-only: keys the fragment does not mention are never removed, and the
file is only rewritten when at least one managed key actually changes.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from governance_kit.installer.provisioning.files import write_atomic

logger = logging.getLogger(__name__)


class MergeAction(str, Enum):
    UNCHANGED = "unchanged"
    WOULD_MERGE = "would-merge"
    MERGED = "merged"


@dataclass(frozen=True, slots=True)
class MergeResult:
    changed: bool
    action: MergeAction
    updated_keys: tuple[str, ...] = ()


def load_settings(path: Path) -> dict[str, Any]:
    """Load a JSON object from `path`, treating anything unusable as empty."""

    if not path.exists():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.warning(
            "Settings file is unreadable or not valid JSON (comments are not supported); "
            "treating as empty, its content will be replaced by the managed keys",
            extra={"path": str(path)},
        )
        return {}

    if not isinstance(raw, dict):
        logger.warning(
            "Settings file is not a JSON object; treating as empty, "
            "its content will be replaced by the managed keys",
            extra={"path": str(path)},
        )
        return {}

    return raw


def _same_json(left: Any, right: Any) -> bool:
    # `True == 1` in Python but not in JSON.
    return json.dumps(left, sort_keys=True) == json.dumps(right, sort_keys=True)


def merge_settings(path: Path, fragment: Mapping[str, Any], *, dry_run: bool) -> MergeResult:
    """Overlay `fragment` onto the settings stored at `path`.

    Existing key order is preserved and new keys are appended.

    Raises:
        OSError: if the merged settings cannot be written.
    """

    existing = load_settings(path)
    merged = dict(existing)
    updated: list[str] = []
    for key, value in fragment.items():
        if key not in existing or not _same_json(existing[key], value):
            merged[key] = value
            updated.append(key)

    if not updated:
        return MergeResult(changed=False, action=MergeAction.UNCHANGED)

    if dry_run:
        return MergeResult(changed=True, action=MergeAction.WOULD_MERGE, updated_keys=tuple(updated))

    payload = json.dumps(merged, indent=2, ensure_ascii=False) + "\n"
    write_atomic(path, payload.encode("utf-8"))
    logger.debug("Merged settings", extra={"path": str(path), "keys": updated})
    return MergeResult(changed=True, action=MergeAction.MERGED, updated_keys=tuple(updated))
