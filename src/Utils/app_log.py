"""
app_log.py
Session log for patch operations.

Every line an engine operation reports through app_log() is appended to
~/.config/AntiPower/anti-power.log, whichever front end started it, so a
failed elevated install can be diagnosed after the window is gone.  Lines
are also forwarded to a live sink when one is registered:

  set_app_log(status_bar.log, app.after)  GUI; lines logged off the UI thread
                                          are queued and drained by an
                                          after() callback
  set_console_log(print)                  CLI; lines go straight through

Engine operations run on a worker thread in the GUI, which is why the two
sinks differ.
"""

from __future__ import annotations

import queue
import threading
from datetime import datetime
from typing import Callable

from Utils.config_paths import get_log_path

_DRAIN_MS = 50

_sink: Callable[[str], None] | None = None
_after: Callable | None = None
_ui_thread: int | None = None
_pending: queue.Queue[str] = queue.Queue()

_file_lock = threading.Lock()


def _append_to_file(message: str) -> None:
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with _file_lock:
        try:
            with open(get_log_path(), "a", encoding="utf-8") as f:
                f.write(f"[{stamp}]  {message}\n")
        except OSError:
            # An unwritable log never fails the operation being logged
            pass


def _drain() -> None:
    """UI thread: hand queued lines to the sink, then reschedule."""
    if _sink is None or _after is None:
        return
    while True:
        try:
            line = _pending.get_nowait()
        except queue.Empty:
            break
        try:
            _sink(line)
        except Exception:
            pass
    _after(_DRAIN_MS, _drain)


def set_app_log(sink: Callable[[str], None], after: Callable) -> None:
    """Register a UI sink and tkinter's after(ms, fn) to run it on the UI thread."""
    global _sink, _after, _ui_thread
    _sink = sink
    _after = after
    _ui_thread = threading.get_ident()
    after(0, _drain)


def set_console_log(sink: Callable[[str], None]) -> None:
    """Register a sink that may be called from any thread."""
    global _sink, _after, _ui_thread
    _sink = sink
    _after = None
    _ui_thread = None


def clear_app_log() -> None:
    """Drop the live sink; lines are still written to the log file."""
    global _sink, _after, _ui_thread
    _sink = None
    _after = None
    _ui_thread = None


def app_log(message: str) -> None:
    """Record *message* in the log file and pass it to the live sink, from any thread."""
    _append_to_file(message)
    if _sink is None:
        return
    if _after is None or threading.get_ident() == _ui_thread:
        _sink(message)
    else:
        _pending.put_nowait(message)
