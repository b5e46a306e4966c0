"""
Shared theme constants and status icon helpers for the GUI.
Used by gui.app and all gui submodules.
"""

from functools import lru_cache

import customtkinter as ctk
from PIL import Image as PilImage, ImageDraw

# ---------------------------------------------------------------------------
# Color palette
# ---------------------------------------------------------------------------
BG_DEEP    = "#1a1a1a"
BG_PANEL   = "#252526"
BG_HEADER  = "#2a2a2b"
BG_ROW     = "#2d2d2d"
BG_HOVER   = "#094771"
ACCENT     = "#0078d4"
ACCENT_HOV = "#1084d8"
TEXT_MAIN  = "#d4d4d4"
TEXT_DIM   = "#858585"
TEXT_OK    = "#98c379"
TEXT_ERR   = "#e06c75"
TEXT_WARN  = "#e5c07b"
BORDER     = "#444444"
RED_BTN    = "#a83232"
RED_HOV    = "#c43c3c"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
FONT_NORMAL = ("Segoe UI", 14)
FONT_BOLD   = ("Segoe UI", 14, "bold")
FONT_SMALL  = ("Segoe UI", 12)
FONT_MONO   = ("Courier New", 13)
FONT_HEADER = ("Segoe UI", 12, "bold")

# ---------------------------------------------------------------------------
# Status dots (drawn, no image files needed)
# ---------------------------------------------------------------------------

@lru_cache(maxsize=None)
def status_dot(color: str, size: int = 12) -> ctk.CTkImage:
    """Return a filled circle CTkImage in *color*, cached per colour/size."""
    scale = 4  # draw large then downsample for smooth edges
    img = PilImage.new("RGBA", (size * scale, size * scale), (0, 0, 0, 0))
    ImageDraw.Draw(img).ellipse(
        (scale, scale, size * scale - scale, size * scale - scale), fill=color
    )
    img = img.resize((size, size), PilImage.LANCZOS)
    return ctk.CTkImage(light_image=img, dark_image=img, size=(size, size))
