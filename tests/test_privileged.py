"""Elevated helper staging and invocation."""

from __future__ import annotations

import os

import pytest

from Patcher import privileged
from Patcher.errors import (
    AssetBundleUnavailable,
    ElevationNonZeroExit,
    FilesystemError,
    MissingFeatureConfig,
    PrivilegedScriptFailed,
    ScriptMissing,
)
from Patcher.features import FeatureConfig, ManagerFeatureConfig
from Patcher.privileged import (
    PatchMode,
    StagingDir,
    annotate_failure,
    build_script_args,
    run_privileged_patch,
    select_privileged_script,
)
from Utils.i18n import text

from conftest import FakePlatform


def _staged_leftovers(base):
    return [p for p in base.iterdir() if p.name.startswith("anti-power-privileged")]


@pytest.fixture
def staging_base(tmp_path):
    base = tmp_path / "staging"
    base.mkdir()
    return base


class TestStagingDir:
    def test_removed_on_exit(self, staging_base):
        with StagingDir(staging_base) as staging:
            (staging / "file.txt").write_text("x", encoding="utf-8")
            assert staging.name.startswith(f"anti-power-privileged-{os.getpid()}-")
        assert not staging.exists()

    def test_removed_on_error(self, staging_base):
        with pytest.raises(RuntimeError):
            with StagingDir(staging_base):
                raise RuntimeError("boom")
        assert _staged_leftovers(staging_base) == []

    def test_unusable_base(self, tmp_path):
        with pytest.raises(FilesystemError) as excinfo:
            with StagingDir(tmp_path / "missing" / "deeper"):
                pass
        assert excinfo.value.key == "patchBackend.errors.createTempDirFailed"


@pytest.mark.parametrize("locale, script", [
    ("zh-CN", "anti-power.sh"),
    ("zh-TW", "anti-power.sh"),
    (None, "anti-power.sh"),
    ("en-US", "anti-power.en.sh"),
    ("fr", "anti-power.en.sh"),
])
def test_script_selection(locale, script):
    assert select_privileged_script(locale) == script


def test_script_args(tmp_path):
    assert build_script_args(PatchMode.UPDATE_CONFIG, tmp_path, True, False) == [
        "--mode", "update-config",
        "--app-path", str(tmp_path),
        "--cascade-enabled", "true",
        "--manager-enabled", "false",
    ]


class TestRunPrivilegedPatch:
    def test_install_stages_bundle_and_configs(self, resources_root, staging_base):
        platform = FakePlatform()
        run_privileged_patch(
            PatchMode.INSTALL, resources_root,
            FeatureConfig(font_size=20.0), ManagerFeatureConfig(enabled=False),
            platform=platform, locale="en-US", staging_base=staging_base,
        )
        (call,) = platform.calls
        assert call["script"] == "anti-power.en.sh"
        assert call["args"] == [
            "--mode", "install", "--app-path", str(resources_root),
            "--cascade-enabled", "true", "--manager-enabled", "false",
        ]
        assert "anti-power.sh" in call["staged_files"]
        assert "manager-panel/manager-panel.js" in call["staged_files"]
        assert call["configs"]["cascade-panel"]["fontSize"] == 20.0
        assert call["configs"]["sidebar-panel"] == call["configs"]["cascade-panel"]
        assert "enabled" not in call["configs"]["manager-panel"]
        assert _staged_leftovers(staging_base) == []

    def test_script_is_executable(self, resources_root, staging_base):
        modes = []

        class _Checking(FakePlatform):
            def run_privileged_script(self, script_path, args, status_path):
                modes.append(os.access(script_path, os.X_OK))

        run_privileged_patch(PatchMode.UNINSTALL, resources_root, None, None,
                             platform=_Checking(), staging_base=staging_base)
        assert modes == [True]

    def test_uninstall_needs_no_configs(self, resources_root, staging_base):
        platform = FakePlatform()
        run_privileged_patch(PatchMode.UNINSTALL, resources_root, None, None,
                             platform=platform, locale="zh-CN", staging_base=staging_base)
        (call,) = platform.calls
        assert call["script"] == "anti-power.sh"
        assert call["configs"] == {}
        assert call["args"][-4:] == ["--cascade-enabled", "true", "--manager-enabled", "true"]

    @pytest.mark.parametrize("features, manager, key", [
        (None, ManagerFeatureConfig(), "patchBackend.errors.missingSidebarConfig"),
        (FeatureConfig(), None, "patchBackend.errors.missingManagerConfig"),
    ])
    def test_missing_config(self, resources_root, staging_base, features, manager, key):
        platform = FakePlatform()
        with pytest.raises(MissingFeatureConfig) as excinfo:
            run_privileged_patch(PatchMode.UPDATE_CONFIG, resources_root, features, manager,
                                 platform=platform, staging_base=staging_base)
        assert excinfo.value.key == key
        assert platform.calls == []
        assert _staged_leftovers(staging_base) == []

    def test_missing_script(self, resources_root, staging_base, monkeypatch):
        monkeypatch.setattr(privileged.embedded, "get_all_files",
                            lambda: [("workbench.html", "<html/>")])
        with pytest.raises(ScriptMissing) as excinfo:
            run_privileged_patch(PatchMode.UNINSTALL, resources_root, None, None,
                                 platform=FakePlatform(), locale="en-US",
                                 staging_base=staging_base)
        assert excinfo.value.name == "anti-power.en.sh"
        assert _staged_leftovers(staging_base) == []

    def test_bundle_unavailable(self, resources_root, staging_base, monkeypatch):
        def _missing():
            raise AssetBundleUnavailable("patchBackend.errors.patchesDirNotFound")

        monkeypatch.setattr(privileged.embedded, "get_all_files", _missing)
        with pytest.raises(AssetBundleUnavailable):
            run_privileged_patch(PatchMode.UNINSTALL, resources_root, None, None,
                                 platform=FakePlatform(), staging_base=staging_base)
        assert _staged_leftovers(staging_base) == []

    def test_failure_is_wrapped_and_staging_removed(self, resources_root, staging_base):
        platform = FakePlatform(error=ElevationNonZeroExit(code=126))
        with pytest.raises(PrivilegedScriptFailed) as excinfo:
            run_privileged_patch(PatchMode.UNINSTALL, resources_root, None, None,
                                 platform=platform, locale="en-US", staging_base=staging_base)
        assert isinstance(excinfo.value.cause, ElevationNonZeroExit)
        assert excinfo.value.hint_key is None
        assert _staged_leftovers(staging_base) == []


class TestAnnotateFailure:
    HINT = "patchBackend.errors.macosPermissionHint"

    def test_hint_for_permission_origin(self, tmp_path):
        platform = FakePlatform(permission_hint_key=self.HINT)
        err = ElevationNonZeroExit(code=1, output="cp: x: Operation not permitted")
        wrapped = annotate_failure(err, tmp_path, platform)
        assert wrapped.hint_key == self.HINT
        message = wrapped.to_message(text, "en-US")
        assert "Operation not permitted" in message
        assert str(tmp_path) in message

    def test_hint_for_chinese_output(self, tmp_path):
        platform = FakePlatform(permission_hint_key=self.HINT)
        err = ElevationNonZeroExit(code=1, output="错误：权限不足")
        assert annotate_failure(err, tmp_path, platform).hint_key == self.HINT

    def test_no_hint_for_other_failures(self, tmp_path):
        platform = FakePlatform(permission_hint_key=self.HINT)
        err = ElevationNonZeroExit(code=1, output="No space left on device")
        assert annotate_failure(err, tmp_path, platform).hint_key is None

    def test_no_hint_without_platform_key(self, tmp_path):
        err = ElevationNonZeroExit(code=1, output="Operation not permitted")
        assert annotate_failure(err, tmp_path, FakePlatform()).hint_key is None
