"""
Project color palette
Projects store a color *name*; the hex values are only used for presentation
(cards, badges) by whoever renders the workspace hierarchy.
"""

from typing import Optional

DEFAULT_PROJECT_COLOR = "blue"

# Colors offered when creating or editing a project
PROJECT_COLORS = {
    "red": "Red",
    "orange": "Orange",
    "yellow": "Yellow",
    "green": "Green",
    "blue": "Blue",
    "indigo": "Indigo",
    "purple": "Purple",
    "pink": "Pink",
}

# Hex values for every color name that may be found on a project row,
# including older names that are no longer offered
COLOR_HEX = {
    "red": "#ef4444",
    "pink": "#ec4899",
    "orange": "#f97316",
    "yellow": "#eab308",
    "lime": "#84cc16",
    "green": "#22c55e",
    "emerald": "#10b981",
    "teal": "#14b8a6",
    "cyan": "#06b6d4",
    "blue": "#3b82f6",
    "indigo": "#6366f1",
    "purple": "#a855f7",
    "violet": "#7c3aed",
    "fuchsia": "#d946ef",
}


def normalize_color(color: Optional[str]) -> str:
    """Return a palette color name, falling back to blue for anything unknown"""
    if color and color.lower() in PROJECT_COLORS:
        return color.lower()
    return DEFAULT_PROJECT_COLOR


def get_color_value(color: Optional[str], opacity: Optional[float] = None) -> str:
    """
    Convert a color name to its hex value.
    With opacity (0..1) an alpha byte is appended, e.g. ("blue", 0.1) -> "#3b82f61a".
    """
    hex_value = COLOR_HEX.get((color or DEFAULT_PROJECT_COLOR).lower(), COLOR_HEX[DEFAULT_PROJECT_COLOR])
    if opacity is not None:
        alpha = max(0, min(255, round(opacity * 255)))
        return f"{hex_value}{alpha:02x}"
    return hex_value


def get_palette() -> list:
    """Palette as served to clients: name, label, hex and a 10% tint for badge backgrounds"""
    return [
        {"name": name, "label": label, "hex": get_color_value(name), "background": get_color_value(name, 0.1)}
        for name, label in PROJECT_COLORS.items()
    ]
