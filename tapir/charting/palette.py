"""Deterministic dataset colors.

Colors come from a fixed 8-entry palette. Fill colors are translucent
(alpha 0.2) and border colors opaque; both are derived from the same RGB
triples, and indexes wrap modulo the palette size.
"""

from __future__ import annotations

BASE_COLORS: tuple[tuple[int, int, int], ...] = (
    (54, 162, 235),  # blue
    (255, 99, 132),  # red
    (255, 205, 86),  # yellow
    (75, 192, 192),  # teal
    (153, 102, 255),  # purple
    (255, 159, 64),  # orange
    (199, 199, 199),  # grey
    (83, 102, 255),  # indigo
)

FILL_ALPHA = 0.2
BORDER_ALPHA = 1


def rgba(rgb: tuple[int, int, int], alpha: float) -> str:
    """Format an RGB triple and alpha as a CSS `rgba()` string."""

    red, green, blue = rgb
    return f"rgba({red}, {green}, {blue}, {alpha:g})"


def generate_colors(count: int, alpha: float = FILL_ALPHA, *, offset: int = 0) -> list[str]:
    """Return `count` palette colors starting at `offset`, cycling as needed.

    Args:
        count: Number of colors to return.
        alpha: Alpha channel applied to every color.
        offset: Palette index of the first color.

    Returns:
        A list of `rgba()` strings.
    """

    size = len(BASE_COLORS)
    return [rgba(BASE_COLORS[(offset + index) % size], alpha) for index in range(max(count, 0))]


def fill_colors(count: int, *, offset: int = 0) -> list[str]:
    """Return translucent fill colors (`backgroundColor`)."""

    return generate_colors(count, FILL_ALPHA, offset=offset)


def border_colors(count: int, *, offset: int = 0) -> list[str]:
    """Return opaque border colors (`borderColor`)."""

    return generate_colors(count, BORDER_ALPHA, offset=offset)
