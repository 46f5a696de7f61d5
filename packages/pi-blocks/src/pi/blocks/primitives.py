"""Building blocks derived from the core combinators: fills, lines, frames."""

from __future__ import annotations

from dataclasses import dataclass

from pi.blocks.block import Axis, Block, Leaf, hjoin, leaf, pad, vjoin
from pi.blocks.cell import TRANSPARENT, Cell
from pi.blocks.errors import InvalidArgument
from pi.blocks.style import EMPTY_STYLE, Style
from pi.blocks.width import WidthOracle, get_width_oracle, graphemes


def _check_count(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an int, got {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")


def empty(width: int, height: int) -> Block:
    """A fully transparent block of the given size."""
    _check_count("width", width)
    _check_count("height", height)
    return pad(leaf(""), 0, width, height, 0, fill=None)


def filled(
    width: int,
    height: int,
    pattern: str = " ",
    style: Style = EMPTY_STYLE,
    *,
    oracle: WidthOracle | None = None,
) -> Block:
    """Tile *pattern* over a *width* x *height* area.

    Pattern lines repeat downwards and each line repeats to the right, cut
    at exactly *width* columns. A wide grapheme that would straddle the
    right edge is left out and the column stays transparent.
    """
    _check_count("width", width)
    _check_count("height", height)
    source = leaf(pattern, style, oracle=oracle)
    if width == 0 or height == 0 or source.width == 0:
        return empty(width, height)

    rows: list[tuple[Cell, ...]] = []
    for y in range(height):
        line = source.lines[y % len(source.lines)]
        cells: list[Cell] = []
        while line and len(cells) < width:
            cells.extend(line)
        del cells[width:]
        if cells and cells[-1].width == 2:
            cells[-1] = TRANSPARENT
        cells.extend([TRANSPARENT] * (width - len(cells)))
        rows.append(tuple(cells))
    return Leaf(tuple(rows))


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinePalette:
    """Graphemes for a line: a lone cell, the two ends, and the run between."""

    only: str
    middle: str
    start: str
    end: str

    @classmethod
    def uniform(cls, g: str) -> LinePalette:
        return cls(only=g, middle=g, start=g, end=g)


def line(
    length: int,
    palette: LinePalette,
    axis: Axis = "horizontal",
    style: Style = EMPTY_STYLE,
) -> Block:
    """A one-cell-thick line of *length* cells along *axis*."""
    _check_count("length", length)
    if axis not in ("horizontal", "vertical"):
        raise InvalidArgument(f"unknown axis {axis!r}")
    oracle = get_width_oracle()
    for name in ("only", "middle", "start", "end"):
        g = getattr(palette, name)
        if not isinstance(g, str) or len(graphemes(g)) != 1 or oracle.width_of(g) != 1:
            raise InvalidArgument(f"palette {name} must be a single one-cell grapheme, got {g!r}")
    if length == 0:
        return empty(0, 1) if axis == "horizontal" else empty(1, 0)

    if length == 1:
        glyphs = [palette.only]
    else:
        glyphs = [palette.start] + [palette.middle] * (length - 2) + [palette.end]
    sep = "" if axis == "horizontal" else "\n"
    return leaf(sep.join(glyphs), style)


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoxPalette:
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str


LIGHT = BoxPalette("┌", "┐", "└", "┘", "─", "│")
HEAVY = BoxPalette("┏", "┓", "┗", "┛", "━", "┃")
DOUBLE = BoxPalette("╔", "╗", "╚", "╝", "═", "║")
ROUNDED = BoxPalette("╭", "╮", "╰", "╯", "─", "│")
ASCII = BoxPalette("+", "+", "+", "+", "-", "|")


def frame(block: Block, palette: BoxPalette = LIGHT, style: Style = EMPTY_STYLE) -> Block:
    """Surround *block* with a one-cell border drawn in *style*.

    Palette glyphs must measure one cell. Box-drawing characters are East
    Asian Ambiguous, so under the "wide" policy only :data:`ASCII` works.
    """
    width, height = block.size
    top = line(
        width + 2,
        LinePalette(palette.horizontal, palette.horizontal, palette.top_left, palette.top_right),
        style=style,
    )
    bottom = line(
        width + 2,
        LinePalette(palette.horizontal, palette.horizontal, palette.bottom_left, palette.bottom_right),
        style=style,
    )
    side = line(height, LinePalette.uniform(palette.vertical), "vertical", style)
    return vjoin(top, hjoin(side, block, side), bottom)
