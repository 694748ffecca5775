"""Create or overwrite a single managed file under the skip/overwrite/dry-run policy."""

from __future__ import annotations

import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class FileAction(str, Enum):
    WOULD_CREATE = "would-create"
    CREATED = "created"
    WOULD_OVERWRITE = "would-overwrite"
    OVERWRITTEN = "overwritten"
    SKIPPED_EXISTS = "skipped-exists"


def write_atomic(path: Path, data: bytes) -> None:
    """Write `data` to `path` so readers see either the old file or the full new one.

    The bytes land in a temporary sibling first and are moved into place with
    `os.replace`, which is atomic on the same filesystem.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def ensure_file(path: Path, content: str, *, dry_run: bool, force: bool) -> FileAction:
    """Make sure `path` holds `content`.

    Rules:
    - absent: create it (or report `WOULD_CREATE` under dry-run)
    - present and not `force`: leave it alone (`SKIPPED_EXISTS`), dry-run or not
    - present and `force`: overwrite it (or report `WOULD_OVERWRITE` under dry-run)

    Raises:
        OSError: if the write fails.
    """

    if not path.exists():
        if dry_run:
            return FileAction.WOULD_CREATE
        write_atomic(path, content.encode("utf-8"))
        logger.debug("Created file", extra={"path": str(path)})
        return FileAction.CREATED

    if not force:
        return FileAction.SKIPPED_EXISTS

    if dry_run:
        return FileAction.WOULD_OVERWRITE
    write_atomic(path, content.encode("utf-8"))
    logger.debug("Overwrote file", extra={"path": str(path)})
    return FileAction.OVERWRITTEN
