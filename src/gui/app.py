"""
Anti-Power desktop front end.

One window: install path (browse / auto-detect), the sidebar and manager
option panels, the three actions and the log.  Every engine call runs on a
worker thread; its progress lines reach the status bar through
Utils.app_log, and completion is handed back with call_threadsafe().
"""

from __future__ import annotations

import queue
import threading
import tkinter.messagebox

import customtkinter as ctk

from Patcher import (
    PatchError,
    check_patch_status,
    current_platform,
    detect_version,
    install_patch,
    read_manager_patch_config,
    read_patch_config,
    uninstall_patch,
    update_config,
)
from Utils.app_config import AppConfig, load_app_config, save_app_config
from Utils.app_log import app_log, clear_app_log, set_app_log
from Utils.i18n import SUPPORTED_LOCALES, text
from gui.feature_panel import FeaturePanel
from gui.path_utils import pick_folder
from gui.status_bar import StatusBar
from gui.theme import (
    ACCENT,
    ACCENT_HOV,
    BG_DEEP,
    BG_HEADER,
    BG_HOVER,
    FONT_NORMAL,
    FONT_SMALL,
    RED_BTN,
    RED_HOV,
    TEXT_DIM,
    TEXT_ERR,
    TEXT_MAIN,
    TEXT_OK,
    status_dot,
)
from version import __version__

ctk.set_appearance_mode("dark")
ctk.set_default_color_theme("dark-blue")


def run_engine_call(operation, path: str, locale: str) -> str | None:
    """Run *operation(path, locale)*; return None on success, else the message to show.

    Called on worker threads, so it never raises: the UI must always be
    told that the operation ended.
    """
    try:
        operation(path, locale)
    except PatchError as exc:
        return exc.to_message(text, locale)
    except Exception as exc:
        app_log(f"Unexpected error: {type(exc).__name__}: {exc}")
        return f"{type(exc).__name__}: {exc}"
    return None


class App(ctk.CTk):
    def __init__(self):
        super().__init__(fg_color=BG_DEEP)
        self.title(f"Anti-Power Patcher {__version__}")
        self.geometry("900x720")
        self.minsize(760, 600)

        # Background threads never touch widgets; they queue callbacks here.
        self._ts_queue: queue.Queue = queue.Queue()
        self._poll_threadsafe_queue()

        self._config: AppConfig = load_app_config()
        self._platform = current_platform()
        self._busy = False

        self._build_layout()
        set_app_log(self._status.log, self.after)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        if not self._config.antigravity_path:
            self._detect_path()
        self._refresh_status()

    # -- Thread-safe callback scheduling ------------------------------------

    def call_threadsafe(self, fn):
        """Schedule *fn* to run on the UI thread (polled every 50 ms)."""
        self._ts_queue.put(fn)

    def _poll_threadsafe_queue(self):
        while True:
            try:
                fn = self._ts_queue.get_nowait()
            except queue.Empty:
                break
            fn()
        self.after(50, self._poll_threadsafe_queue)

    # -- Layout -------------------------------------------------------------

    def _build_layout(self):
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        # Path row
        top = ctk.CTkFrame(self, fg_color=BG_HEADER, corner_radius=0)
        top.grid(row=0, column=0, sticky="ew")
        ctk.CTkLabel(top, text="Antigravity:", font=FONT_NORMAL,
                     text_color=TEXT_MAIN).pack(side="left", padx=(12, 6), pady=10)
        self._path_var = ctk.StringVar(value=self._config.antigravity_path or "")
        entry = ctk.CTkEntry(top, textvariable=self._path_var, font=FONT_SMALL)
        entry.pack(side="left", fill="x", expand=True, pady=10)
        entry.bind("<FocusOut>", lambda _e: self._refresh_status())
        entry.bind("<Return>", lambda _e: self._refresh_status())
        ctk.CTkButton(top, text="Browse…", width=80, font=FONT_SMALL,
                      fg_color=BG_DEEP, hover_color=BG_HOVER,
                      command=self._browse).pack(side="left", padx=(6, 0))
        ctk.CTkButton(top, text="Detect", width=70, font=FONT_SMALL,
                      fg_color=BG_DEEP, hover_color=BG_HOVER,
                      command=self._on_detect).pack(side="left", padx=6)
        self._locale_var = ctk.StringVar(value=self._config.locale)
        ctk.CTkOptionMenu(top, variable=self._locale_var, values=list(SUPPORTED_LOCALES),
                          width=90, font=FONT_SMALL).pack(side="left", padx=(0, 12))

        # Status row
        info = ctk.CTkFrame(self, fg_color="transparent")
        info.grid(row=1, column=0, sticky="ew", padx=12, pady=(8, 0))
        self._status_label = ctk.CTkLabel(info, text="", font=FONT_SMALL, text_color=TEXT_DIM,
                                          compound="left", padx=6)
        self._status_label.pack(side="left")
        self._version_label = ctk.CTkLabel(info, text="", font=FONT_SMALL, text_color=TEXT_DIM)
        self._version_label.pack(side="right")

        # Option panels
        panels = ctk.CTkFrame(self, fg_color="transparent")
        panels.grid(row=2, column=0, sticky="nsew", padx=12, pady=8)
        panels.grid_columnconfigure((0, 1), weight=1, uniform="panels")
        panels.grid_rowconfigure(0, weight=1)
        self._sidebar_panel = FeaturePanel(panels, "Sidebar", self._config.features)
        self._sidebar_panel.grid(row=0, column=0, sticky="nsew", padx=(0, 6))
        self._manager_panel = FeaturePanel(panels, "Manager window",
                                           self._config.manager_features)
        self._manager_panel.grid(row=0, column=1, sticky="nsew", padx=(6, 0))

        # Actions
        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=3, column=0, sticky="ew", padx=12, pady=(0, 8))
        self._buttons = [
            ctk.CTkButton(actions, text="Install", width=120, font=FONT_NORMAL,
                          fg_color=ACCENT, hover_color=ACCENT_HOV, command=self._on_install),
            ctk.CTkButton(actions, text="Update config", width=120, font=FONT_NORMAL,
                          fg_color=ACCENT, hover_color=ACCENT_HOV, command=self._on_update),
            ctk.CTkButton(actions, text="Uninstall", width=120, font=FONT_NORMAL,
                          fg_color=RED_BTN, hover_color=RED_HOV, command=self._on_uninstall),
        ]
        for btn in self._buttons:
            btn.pack(side="left", padx=(0, 8))

        self._status = StatusBar(self)
        self._status.grid(row=4, column=0, sticky="ew")

    # -- Path handling ------------------------------------------------------

    def _browse(self):
        chosen = pick_folder("Select the Antigravity install folder", parent=self)
        if chosen:
            self._path_var.set(chosen)
            self._refresh_status()

    def _detect_path(self) -> bool:
        root = self._platform.detect_root()
        if root is None:
            app_log("Antigravity was not found automatically; choose its folder.")
            return False
        self._path_var.set(str(root))
        app_log(f"Detected Antigravity at {root}")
        return True

    def _on_detect(self):
        if self._detect_path():
            self._refresh_status()

    def _refresh_status(self):
        """Update the installed / version labels and load installed configs."""
        path = self._path_var.get().strip()
        info = detect_version(path) if path else None
        if info is None:
            self._status_label.configure(text="No valid install selected",
                                         image=status_dot(TEXT_DIM), text_color=TEXT_DIM)
            self._version_label.configure(text="")
            return
        version = info.ide_version or "unknown"
        self._version_label.configure(
            text=f"ideVersion {version} · {info.sidebar_variant.value} sidebar")
        try:
            installed = check_patch_status(path)
            sidebar = read_patch_config(path) if installed else None
            manager = read_manager_patch_config(path) if installed else None
        except PatchError as exc:
            app_log(exc.to_message(text, self._locale_var.get()))
            return
        if installed:
            self._status_label.configure(text="Patch installed",
                                         image=status_dot(TEXT_OK), text_color=TEXT_OK)
        else:
            self._status_label.configure(text="Patch not installed",
                                         image=status_dot(TEXT_ERR), text_color=TEXT_ERR)
        # An installed config.json is the truth for that subsystem
        if sidebar is not None:
            self._sidebar_panel.set_config(sidebar)
        if manager is not None:
            self._manager_panel.set_config(manager)

    # -- Actions ------------------------------------------------------------

    def _set_busy(self, busy: bool):
        self._busy = busy
        for btn in self._buttons:
            btn.configure(state="disabled" if busy else "normal")
        self._status.set_busy(busy)

    def _run(self, label: str, operation):
        """Run *operation(path, locale)* on a worker thread."""
        if self._busy:
            return
        path = self._path_var.get().strip()
        if not path:
            app_log("Choose the Antigravity install folder first.")
            return
        locale = self._locale_var.get()
        self._save_settings(path, locale)
        self._set_busy(True)
        self._status.show_log()

        def _worker():
            error = run_engine_call(operation, path, locale)
            self.call_threadsafe(lambda: self._done(label, error))

        threading.Thread(target=_worker, daemon=True).start()

    def _done(self, label: str, error: str | None):
        self._set_busy(False)
        if error is None:
            app_log(f"{label} finished.")
        else:
            app_log(f"{label} failed: {error}")
            tkinter.messagebox.showerror(f"{label} failed", error, parent=self)
        self._refresh_status()

    def _on_install(self):
        features = self._sidebar_panel.get_config()
        manager = self._manager_panel.get_config()
        self._run("Install", lambda path, locale: install_patch(
            path, features, manager, locale=locale, platform=self._platform, log_fn=app_log))

    def _on_update(self):
        features = self._sidebar_panel.get_config()
        manager = self._manager_panel.get_config()
        self._run("Update config", lambda path, locale: update_config(
            path, features, manager, locale=locale, platform=self._platform, log_fn=app_log))

    def _on_uninstall(self):
        if not tkinter.messagebox.askyesno(
                "Uninstall", "Restore the original Antigravity files?", parent=self):
            return
        self._run("Uninstall", lambda path, locale: uninstall_patch(
            path, locale=locale, platform=self._platform, log_fn=app_log))

    # -- Settings -----------------------------------------------------------

    def _save_settings(self, path: str, locale: str):
        self._config.antigravity_path = path
        self._config.locale = locale
        self._config.features = self._sidebar_panel.get_config()
        self._config.manager_features = self._manager_panel.get_config()
        try:
            save_app_config(self._config)
        except RuntimeError as exc:
            app_log(str(exc))

    def _on_close(self):
        clear_app_log()
        self.destroy()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main():
    app = App()
    app.mainloop()


if __name__ == "__main__":
    main()
