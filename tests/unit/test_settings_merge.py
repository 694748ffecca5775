"""Unit tests for the additive editor-settings merge."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from governance_kit.installer.provisioning.settings_merge import (
    MergeAction,
    load_settings,
    merge_settings,
)


def _write(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def _read(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def test_merge_adds_new_keys_and_keeps_existing(tmp_path: Path) -> None:
    path = tmp_path / ".vscode" / "settings.json"
    _write(path, {"a": 1})

    result = merge_settings(path, {"b": 2}, dry_run=False)

    assert result.changed is True
    assert result.action is MergeAction.MERGED
    assert result.updated_keys == ("b",)
    assert _read(path) == {"a": 1, "b": 2}


def test_merge_without_changes_does_not_write(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"a":1}', encoding="utf-8")
    before = path.stat().st_mtime_ns

    result = merge_settings(path, {"a": 1}, dry_run=False)

    assert result.changed is False
    assert result.action is MergeAction.UNCHANGED
    assert path.read_text(encoding="utf-8") == '{"a":1}'
    assert path.stat().st_mtime_ns == before


def test_merge_overwrites_differing_values_only(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    _write(path, {"keep": "me", "editor.tabSize": 2, "files.insertFinalNewline": False})

    result = merge_settings(
        path, {"editor.tabSize": 2, "files.insertFinalNewline": True}, dry_run=False
    )

    assert result.updated_keys == ("files.insertFinalNewline",)
    assert _read(path) == {"keep": "me", "editor.tabSize": 2, "files.insertFinalNewline": True}


def test_bool_and_int_are_different_values(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    _write(path, {"flag": 1})

    result = merge_settings(path, {"flag": True}, dry_run=False)

    assert result.changed is True
    assert _read(path) == {"flag": True}


def test_dry_run_reports_without_writing(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    _write(path, {"a": 1})

    result = merge_settings(path, {"b": 2}, dry_run=True)

    assert result.action is MergeAction.WOULD_MERGE
    assert _read(path) == {"a": 1}


def test_missing_file_is_created(tmp_path: Path) -> None:
    path = tmp_path / ".vscode" / "settings.json"

    result = merge_settings(path, {"b": 2}, dry_run=False)

    assert result.action is MergeAction.MERGED
    assert path.read_text(encoding="utf-8") == '{\n  "b": 2\n}\n'


def test_missing_file_under_dry_run_stays_missing(tmp_path: Path) -> None:
    path = tmp_path / ".vscode" / "settings.json"

    result = merge_settings(path, {"b": 2}, dry_run=True)

    assert result.action is MergeAction.WOULD_MERGE
    assert not path.parent.exists()


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", "null"])
def test_malformed_file_is_treated_as_empty(
    tmp_path: Path, content: str, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")

    assert load_settings(path) == {}
    result = merge_settings(path, {"b": 2}, dry_run=False)

    assert result.action is MergeAction.MERGED
    assert _read(path) == {"b": 2}
    assert any("will be replaced" in r.getMessage() for r in caplog.records)


def test_existing_key_order_is_preserved(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"z": 1, "a": 2}', encoding="utf-8")

    merge_settings(path, {"m": 3, "a": 5}, dry_run=False)

    assert list(json.loads(path.read_text(encoding="utf-8"))) == ["z", "a", "m"]
