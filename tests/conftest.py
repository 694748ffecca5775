"""Test configuration and fixtures."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path

import pytest

from governance_kit.installer.config import InvocationConfig

SETTINGS_ENV_VARS = (
    "GOVERNANCE_KIT_LOG_LEVEL",
    "GOVERNANCE_KIT_GUIDANCE_PATH",
    "GOVERNANCE_KIT_TOOL_DIR",
    "GOVERNANCE_KIT_MAX_SEARCH_LEVELS",
    "GOVERNANCE_KIT_ANNOTATE_GLOB",
    "GOVERNANCE_KIT_ANNOTATE_MAX_BYTES",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings loading."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide an empty host project directory."""
    root = tmp_path / "host"
    root.mkdir()
    return root


@pytest.fixture
def make_config(project_dir: Path) -> Callable[..., InvocationConfig]:
    """Build an InvocationConfig targeting `project_dir`."""

    def _make(**overrides: object) -> InvocationConfig:
        values: dict[str, object] = {"project_root": project_dir, "tool_dir": project_dir}
        values.update(overrides)
        return InvocationConfig(**values)

    return _make


def tree_checksum(root: Path) -> str:
    """Hash every path and file body under `root`."""
    digest = hashlib.sha256()
    for path in sorted(root.rglob("*")):
        digest.update(path.relative_to(root).as_posix().encode("utf-8"))
        if path.is_file():
            digest.update(path.read_bytes())
    return digest.hexdigest()


@pytest.fixture
def checksum() -> Callable[[Path], str]:
    """Provide a whole-tree checksum helper."""
    return tree_checksum
