"""Backup / restore of the original entry files."""

from __future__ import annotations

import shutil

import pytest

from Patcher import backup
from Patcher.backup import backup_file, backup_path, restore_all, restore_file
from Patcher.errors import FilesystemError
from Patcher.subsystems import LEGACY_SIDEBAR, MANAGER, MODERN_SIDEBAR

from conftest import ORIGINAL_CASCADE, ORIGINAL_MANAGER, ORIGINAL_WORKBENCH


def test_backup_created_once(tmp_path):
    original = tmp_path / "page.html"
    original.write_text("original", encoding="utf-8")
    assert backup_file(original) is True

    original.write_text("patched", encoding="utf-8")
    assert backup_file(original) is False
    assert backup_path(original).read_text(encoding="utf-8") == "original"


def test_backup_of_missing_file_is_noop(tmp_path):
    assert backup_file(tmp_path / "missing.html") is False
    assert not (tmp_path / "missing.html.bak").exists()


def test_restore_copies_back_and_deletes_backup(tmp_path):
    original = tmp_path / "page.html"
    original.write_text("original", encoding="utf-8")
    backup_file(original)
    original.write_text("patched", encoding="utf-8")

    assert restore_file(original) is True
    assert original.read_text(encoding="utf-8") == "original"
    assert not backup_path(original).exists()
    assert restore_file(original) is False


def test_restore_failure_is_filesystem_error(tmp_path, monkeypatch):
    original = tmp_path / "page.html"
    original.write_text("original", encoding="utf-8")
    backup_file(original)

    def _deny(*_args, **_kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(shutil, "copy2", _deny)
    with pytest.raises(FilesystemError) as excinfo:
        restore_file(original)
    assert excinfo.value.key == "patchBackend.errors.restoreFailed"
    assert excinfo.value.is_permission_related
    assert backup_path(original).exists()


def test_restore_subsystem_removes_panel(resources_root):
    backup.backup_subsystem(MANAGER, resources_root)
    panel = MANAGER.panel_path(resources_root)
    panel.mkdir()
    (panel / "config.json").write_text("{}", encoding="utf-8")
    MANAGER.entry_path(resources_root).write_text("patched", encoding="utf-8")

    lines = []
    backup.restore_subsystem(MANAGER, resources_root, log_fn=lines.append)
    assert not panel.exists()
    assert MANAGER.entry_path(resources_root).read_text(encoding="utf-8") == ORIGINAL_MANAGER
    assert any("Restored" in line for line in lines)


def test_restore_all_visits_every_subsystem(resources_root):
    for subsystem in (LEGACY_SIDEBAR, MODERN_SIDEBAR, MANAGER):
        backup.backup_subsystem(subsystem, resources_root)
        subsystem.entry_path(resources_root).write_text("patched", encoding="utf-8")
        subsystem.panel_path(resources_root).mkdir()

    restore_all(resources_root)

    assert LEGACY_SIDEBAR.entry_path(resources_root).read_text(encoding="utf-8") == ORIGINAL_CASCADE
    assert MODERN_SIDEBAR.entry_path(resources_root).read_text(encoding="utf-8") == ORIGINAL_WORKBENCH
    assert MANAGER.entry_path(resources_root).read_text(encoding="utf-8") == ORIGINAL_MANAGER
    for subsystem in (LEGACY_SIDEBAR, MODERN_SIDEBAR, MANAGER):
        assert not subsystem.panel_path(resources_root).exists()
        assert not backup_path(subsystem.entry_path(resources_root)).exists()
