"""
Run from project root:
  python -m Patcher detect                              # find the Antigravity install
  python -m Patcher status  --path DIR                  # is the patch installed?
  python -m Patcher version --path DIR                  # ideVersion + sidebar layout
  python -m Patcher install --path DIR [--no-sidebar] [--no-manager]
  python -m Patcher update-config --path DIR --features features.json
  python -m Patcher uninstall --path DIR

Without --path the saved path (or auto-detection) is used.  --save stores
the path and feature options for the next run and for the GUI.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Allow running as python -m Patcher from src/
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from Patcher import (
    FeatureConfig,
    ManagerFeatureConfig,
    PatchError,
    check_patch_status,
    current_platform,
    detect_version,
    install_patch,
    uninstall_patch,
    update_config,
)
from Utils.app_config import AppConfig, load_app_config, save_app_config
from Utils.app_log import app_log, clear_app_log, set_console_log
from Utils.i18n import text


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_features(args, cfg: AppConfig) -> tuple[FeatureConfig, ManagerFeatureConfig]:
    features, manager = cfg.features, cfg.manager_features
    if args.features is not None:
        try:
            data = json.loads(args.features.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _fail(f"Cannot read {args.features}: {exc}")
        if not isinstance(data, dict):
            _fail(f"{args.features} must hold a JSON object")
        features = FeatureConfig.from_dict(data.get("features"))
        manager = ManagerFeatureConfig.from_dict(data.get("managerFeatures"))
    if args.no_sidebar:
        features.enabled = False
    if args.no_manager:
        manager.enabled = False
    return features, manager


def _resolve_path(args, cfg: AppConfig) -> str:
    if args.path:
        return args.path
    if cfg.antigravity_path:
        return cfg.antigravity_path
    detected = current_platform().detect_root()
    if detected is None:
        _fail("Antigravity was not found; pass --path")
    return str(detected)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="anti-power",
        description="Install or remove the Anti-Power UI patches for Antigravity.",
    )
    ap.add_argument("--locale", help="Message language, e.g. en-US or zh-CN")
    ap.add_argument("--quiet", "-q", action="store_true", help="Only print errors")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("detect", help="Print the detected Antigravity install root")

    for name, help_text in (
        ("status", "Report whether the patch is installed"),
        ("version", "Print ideVersion and the sidebar layout in use"),
        ("uninstall", "Restore all original files"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--path", help="Antigravity install directory")

    for name, help_text in (
        ("install", "Install the patches (or restore disabled ones)"),
        ("update-config", "Rewrite config.json of the installed patches only"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--path", help="Antigravity install directory")
        p.add_argument("--features", type=Path, metavar="FILE",
                       help="JSON file with 'features' and 'managerFeatures' objects")
        p.add_argument("--no-sidebar", action="store_true", help="Disable the sidebar patch")
        p.add_argument("--no-manager", action="store_true", help="Disable the Manager patch")
        p.add_argument("--save", action="store_true",
                       help="Remember the path and feature options")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    cfg = load_app_config()
    locale = args.locale or cfg.locale
    if not args.quiet:
        set_console_log(print)
    try:
        _run_command(args, cfg, locale)
    finally:
        clear_app_log()


def _run_command(args, cfg: AppConfig, locale: str) -> None:
    if args.command == "detect":
        root = current_platform().detect_root()
        if root is None:
            _fail("Antigravity was not found")
        print(root)
        return

    path = _resolve_path(args, cfg)
    try:
        if args.command == "status":
            installed = check_patch_status(path)
            print("installed" if installed else "not installed")
        elif args.command == "version":
            info = detect_version(path)
            if info is None:
                _fail(text(locale, "patchBackend.errors.invalidInstallDir"))
            print(f"ideVersion: {info.ide_version or 'unknown'}")
            print(f"sidebar:    {info.sidebar_variant.value}")
        elif args.command == "uninstall":
            uninstall_patch(path, locale=locale, log_fn=app_log)
        else:
            features, manager = _load_features(args, cfg)
            if args.command == "install":
                install_patch(path, features, manager, locale=locale, log_fn=app_log)
            else:
                update_config(path, features, manager, locale=locale, log_fn=app_log)
            if args.save:
                cfg.antigravity_path = path
                cfg.locale = locale
                cfg.features, cfg.manager_features = features, manager
                try:
                    save_app_config(cfg)
                except RuntimeError as exc:
                    _fail(str(exc))
    except PatchError as exc:
        _fail(exc.to_message(text, locale))


if __name__ == "__main__":
    main()
