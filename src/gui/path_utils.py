"""
Folder picker for choosing the Antigravity install directory.
Used by App. No dependency on other gui modules.
"""

import subprocess
import sys
from tkinter import filedialog


def _pick_folder_zenity(title: str) -> str | None:
    """Open a native GTK folder picker via zenity.

    Returns the chosen path, '' if cancelled, or None if zenity is not installed.
    """
    try:
        result = subprocess.run(
            ["zenity", "--file-selection", "--directory", f"--title={title}"],
            capture_output=True, text=True
        )
    except FileNotFoundError:
        return None
    if result.returncode == 0:
        return result.stdout.strip()
    return ""


def pick_folder(title: str, parent=None) -> str:
    """Ask for a directory. Returns the chosen path or '' if cancelled."""
    if sys.platform.startswith("linux"):
        chosen = _pick_folder_zenity(title)
        if chosen is not None:
            return chosen
    return filedialog.askdirectory(title=title, parent=parent) or ""
