"""
Feature options panel: one per patch subsystem (sidebar, manager window).

Shows an "enabled" switch plus every display option of a FeatureConfig /
ManagerFeatureConfig, and builds a fresh config object from the widgets on
demand via get_config().
"""

from __future__ import annotations

import customtkinter as ctk

from Patcher.features import FeatureConfig, ManagerFeatureConfig
from gui.theme import (
    ACCENT,
    ACCENT_HOV,
    BG_PANEL,
    BG_ROW,
    FONT_BOLD,
    FONT_SMALL,
    TEXT_DIM,
    TEXT_MAIN,
)

BOTTOM_POSITIONS = ("float", "inline")
COPY_STYLES = ("icon", "text")

# (attribute, label) for every boolean option; only those the config has are shown
_BOOL_OPTIONS = (
    ("mermaid", "Render Mermaid diagrams"),
    ("math", "Render math (KaTeX)"),
    ("copy_button", "Copy button"),
    ("copy_button_smart_hover", "Show copy button on hover only"),
    ("table_color", "Striped tables"),
    ("font_size_enabled", "Custom font size"),
    ("max_width_enabled", "Limit conversation width"),
)

# (attribute, label, lower bound, upper bound)
_NUMBER_OPTIONS = (
    ("font_size", "Font size (px)", 8.0, 40.0),
    ("max_width_ratio", "Max width (%)", 30.0, 100.0),
)


class FeaturePanel(ctk.CTkFrame):
    """Edits one FeatureConfig or ManagerFeatureConfig."""

    def __init__(self, parent, title: str,
                 config: FeatureConfig | ManagerFeatureConfig):
        super().__init__(parent, fg_color=BG_PANEL, corner_radius=6)
        self._config_cls = type(config)
        self._bool_vars: dict[str, ctk.BooleanVar] = {}
        self._number_vars: dict[str, tuple[ctk.StringVar, float, float]] = {}

        self._enabled_var = ctk.BooleanVar(value=config.enabled)
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=10, pady=(8, 4))
        ctk.CTkLabel(header, text=title, font=FONT_BOLD, text_color=TEXT_MAIN).pack(side="left")
        ctk.CTkSwitch(
            header, text="Enabled", variable=self._enabled_var, font=FONT_SMALL,
            progress_color=ACCENT, command=self._sync_state,
        ).pack(side="right")

        self._body = ctk.CTkFrame(self, fg_color=BG_ROW, corner_radius=4)
        self._body.pack(fill="both", expand=True, padx=10, pady=(0, 10))
        self._widgets: list[ctk.CTkBaseClass] = []

        for attr, label in _BOOL_OPTIONS:
            if not hasattr(config, attr):
                continue
            var = ctk.BooleanVar(value=getattr(config, attr))
            self._bool_vars[attr] = var
            cb = ctk.CTkCheckBox(self._body, text=label, variable=var, font=FONT_SMALL,
                                 fg_color=ACCENT, hover_color=ACCENT_HOV)
            cb.pack(anchor="w", padx=10, pady=3)
            self._widgets.append(cb)

        for attr, label, low, high in _NUMBER_OPTIONS:
            if not hasattr(config, attr):
                continue
            var = ctk.StringVar(value=f"{getattr(config, attr):g}")
            self._number_vars[attr] = (var, low, high)
            self._add_row(label, lambda row, v=var: ctk.CTkEntry(
                row, textvariable=v, width=70, font=FONT_SMALL))

        self._bottom_var = ctk.StringVar(value=config.copy_button_bottom_position)
        self._add_row("Copy button position", lambda row: ctk.CTkOptionMenu(
            row, variable=self._bottom_var, values=list(BOTTOM_POSITIONS),
            width=110, font=FONT_SMALL))

        self._style_var = ctk.StringVar(value=config.copy_button_style)
        self._add_row("Copy button style", lambda row: ctk.CTkOptionMenu(
            row, variable=self._style_var, values=list(COPY_STYLES),
            width=110, font=FONT_SMALL))

        self._text_var = ctk.StringVar(value=config.copy_button_custom_text)
        self._add_row("Copy button text", lambda row: ctk.CTkEntry(
            row, textvariable=self._text_var, width=140, font=FONT_SMALL,
            placeholder_text="Copy"))

        self._sync_state()

    def _add_row(self, label: str, make_widget) -> None:
        row = ctk.CTkFrame(self._body, fg_color="transparent")
        row.pack(fill="x", padx=10, pady=3)
        ctk.CTkLabel(row, text=label, font=FONT_SMALL, text_color=TEXT_DIM).pack(side="left")
        widget = make_widget(row)
        widget.pack(side="right")
        self._widgets.append(widget)

    def _sync_state(self) -> None:
        state = "normal" if self._enabled_var.get() else "disabled"
        for widget in self._widgets:
            widget.configure(state=state)

    def _number(self, attr: str) -> float:
        var, low, high = self._number_vars[attr]
        try:
            value = float(var.get())
        except ValueError:
            value = getattr(self._config_cls(), attr)
        value = min(max(value, low), high)
        var.set(f"{value:g}")
        return value

    def get_config(self) -> FeatureConfig | ManagerFeatureConfig:
        """Build a config from the current widget values (out-of-range numbers are clamped)."""
        kwargs = {attr: var.get() for attr, var in self._bool_vars.items()}
        kwargs.update({attr: self._number(attr) for attr in self._number_vars})
        return self._config_cls(
            enabled=self._enabled_var.get(),
            copy_button_bottom_position=self._bottom_var.get(),
            copy_button_style=self._style_var.get(),
            copy_button_custom_text=self._text_var.get(),
            **kwargs,
        )

    def set_config(self, config: FeatureConfig | ManagerFeatureConfig) -> None:
        """Load *config* into the widgets (e.g. after reading an installed config.json)."""
        self._enabled_var.set(config.enabled)
        for attr, var in self._bool_vars.items():
            var.set(getattr(config, attr))
        for attr, (var, _low, _high) in self._number_vars.items():
            var.set(f"{getattr(config, attr):g}")
        self._bottom_var.set(config.copy_button_bottom_position)
        self._style_var.set(config.copy_button_style)
        self._text_var.set(config.copy_button_custom_text)
        self._sync_state()
