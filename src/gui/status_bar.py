"""
Status bar: log area and collapse/expand. Used by App.
"""

from datetime import datetime
import customtkinter as ctk

from gui.theme import (
    BG_DEEP,
    BG_HEADER,
    BG_HOVER,
    BG_PANEL,
    BORDER,
    FONT_MONO,
    FONT_SMALL,
    TEXT_DIM,
    TEXT_MAIN,
)


# ---------------------------------------------------------------------------
# StatusBar
# ---------------------------------------------------------------------------
class StatusBar(ctk.CTkFrame):
    _COLLAPSED_H = 22   # height when log is hidden (just the label bar)
    _EXPANDED_H  = 160  # height when log is visible

    def __init__(self, parent):
        super().__init__(parent, fg_color=BG_DEEP, corner_radius=0,
                         height=self._EXPANDED_H)
        self.grid_propagate(False)
        self.pack_propagate(False)

        self._visible = True

        ctk.CTkFrame(self, fg_color=BORDER, height=1, corner_radius=0).pack(
            side="top", fill="x"
        )

        label_bar = ctk.CTkFrame(self, fg_color=BG_PANEL, corner_radius=0, height=20)
        label_bar.pack(side="top", fill="x")
        ctk.CTkLabel(
            label_bar, text="Log", font=FONT_SMALL, text_color=TEXT_DIM
        ).pack(side="left", padx=8)

        self._toggle_btn = ctk.CTkButton(
            label_bar, text="▼ Hide", width=70, height=16,
            fg_color=BG_HEADER, hover_color=BG_HOVER,
            text_color=TEXT_DIM, font=FONT_SMALL,
            command=self._toggle_log,
        )
        self._toggle_btn.pack(side="right", padx=6, pady=2)

        # Indeterminate progress bar, shown while an operation runs
        self._progress_bar = ctk.CTkProgressBar(
            label_bar, width=180, height=10, mode="indeterminate",
            fg_color=BG_HEADER, progress_color="#7aa2f7", corner_radius=4
        )
        self._busy = False

        self._textbox = ctk.CTkTextbox(
            self, font=FONT_MONO, fg_color=BG_DEEP,
            text_color=TEXT_MAIN, state="disabled",
            wrap="word", corner_radius=0
        )
        self._textbox.pack(fill="both", expand=True)

    def _toggle_log(self):
        self._visible = not self._visible
        if self._visible:
            self._textbox.pack(fill="both", expand=True)
            self.configure(height=self._EXPANDED_H)
            self._toggle_btn.configure(text="▼ Hide")
        else:
            self._textbox.pack_forget()
            self.configure(height=self._COLLAPSED_H)
            self._toggle_btn.configure(text="▲ Show")

    def show_log(self):
        """Ensure the log panel is expanded (no-op if already visible)."""
        if not self._visible:
            self._toggle_log()

    def set_busy(self, busy: bool) -> None:
        """Start or stop the progress animation.  Call from main thread only."""
        if busy == self._busy:
            return
        self._busy = busy
        if busy:
            self._progress_bar.pack(side="right", padx=(0, 8))
            self._progress_bar.start()
        else:
            self._progress_bar.stop()
            self._progress_bar.pack_forget()

    def log(self, message: str):
        timestamp = datetime.now().strftime("%H:%M:%S")
        self._textbox.configure(state="normal")
        self._textbox.insert("end", f"[{timestamp}]  {message}\n")
        self._textbox.see("end")
        self._textbox.configure(state="disabled")
