"""Unit tests for managed file provisioning."""

from __future__ import annotations

from pathlib import Path

from governance_kit.installer.provisioning.files import FileAction, ensure_file


def test_creates_missing_file_with_parents(tmp_path: Path) -> None:
    target = tmp_path / ".github" / "pull_request_template.md"

    action = ensure_file(target, "hello\n", dry_run=False, force=False)

    assert action is FileAction.CREATED
    assert target.read_text(encoding="utf-8") == "hello\n"


def test_dry_run_reports_would_create_without_writing(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "AGENTS.md"

    action = ensure_file(target, "hello\n", dry_run=True, force=False)

    assert action is FileAction.WOULD_CREATE
    assert not target.exists()
    assert not target.parent.exists()


def test_existing_file_is_skipped_without_force(tmp_path: Path) -> None:
    target = tmp_path / "AGENTS.md"
    target.write_text("hand edited\n", encoding="utf-8")

    for dry_run in (False, True):
        action = ensure_file(target, "managed\n", dry_run=dry_run, force=False)
        assert action is FileAction.SKIPPED_EXISTS

    assert target.read_text(encoding="utf-8") == "hand edited\n"


def test_force_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "AGENTS.md"
    target.write_text("old\n", encoding="utf-8")

    action = ensure_file(target, "new\n", dry_run=False, force=True)

    assert action is FileAction.OVERWRITTEN
    assert target.read_text(encoding="utf-8") == "new\n"
    assert [p.name for p in tmp_path.iterdir()] == ["AGENTS.md"]


def test_force_with_dry_run_reports_would_overwrite(tmp_path: Path) -> None:
    target = tmp_path / "AGENTS.md"
    target.write_text("old\n", encoding="utf-8")

    action = ensure_file(target, "new\n", dry_run=True, force=True)

    assert action is FileAction.WOULD_OVERWRITE
    assert target.read_text(encoding="utf-8") == "old\n"


def test_repeated_calls_without_force_are_noops(tmp_path: Path) -> None:
    target = tmp_path / "AGENTS.md"

    first = ensure_file(target, "content\n", dry_run=False, force=False)
    second = ensure_file(target, "content\n", dry_run=False, force=False)
    third = ensure_file(target, "content\n", dry_run=False, force=False)

    assert first is FileAction.CREATED
    assert second is third is FileAction.SKIPPED_EXISTS
