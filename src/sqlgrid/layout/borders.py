"""Border glyph sets for the result grid."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BorderChars:
    horizontal: str
    vertical: str
    top_left: str
    top_mid: str
    top_right: str
    mid_left: str
    mid_mid: str
    mid_right: str
    bottom_left: str
    bottom_mid: str
    bottom_right: str
    draw_edges: bool = True

    def rule(self, widths: list[int], position: str) -> str:
        """Horizontal rule across cells of the given content widths.

        position is one of "top", "mid" or "bottom".
        """
        left, mid, right = {
            "top": (self.top_left, self.top_mid, self.top_right),
            "mid": (self.mid_left, self.mid_mid, self.mid_right),
            "bottom": (self.bottom_left, self.bottom_mid, self.bottom_right),
        }[position]
        return left + mid.join(self.horizontal * (w + 2) for w in widths) + right


BORDER_STYLES: dict[str, BorderChars] = {
    "box": BorderChars("─", "│", "┌", "┬", "┐", "├", "┼", "┤", "└", "┴", "┘"),
    "rounded": BorderChars("─", "│", "╭", "┬", "╮", "├", "┼", "┤", "╰", "┴", "╯"),
    "double": BorderChars("═", "║", "╔", "╦", "╗", "╠", "╬", "╣", "╚", "╩", "╝"),
    "ascii": BorderChars("-", "|", "+", "+", "+", "+", "+", "+", "+", "+", "+"),
    # Verticals stay as blank columns so cell geometry is identical.
    "none": BorderChars("-", " ", " ", " ", " ", " ", " ", " ", " ", " ", " ", draw_edges=False),
}


def get_border_chars(name: str) -> BorderChars:
    """Return the glyph set for a border style.

    Raises KeyError if the style name is not known.
    """
    if name not in BORDER_STYLES:
        available = ", ".join(sorted(BORDER_STYLES))
        msg = f"Unknown border style {name!r}. Available: {available}"
        raise KeyError(msg)
    return BORDER_STYLES[name]
