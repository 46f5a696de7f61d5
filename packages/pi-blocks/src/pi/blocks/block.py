"""Block data model and the combinators that build it.

Blocks are immutable composition-tree nodes. A block may be the child of
any number of parents, so a tree built from shared parts is a DAG; since
combinators only accept already-built blocks, cycles cannot occur.

Variants:

* :class:`Leaf` -- literal styled text, possibly multi-line.
* :class:`Padded` -- a child surrounded by margins.
* :class:`Joined` -- children concatenated along an axis.
* :class:`Overlaid` -- layers stacked front-to-back.
* :class:`Styled` -- a child with a style patch applied.

All validation happens here, at construction. Layout and rendering of a
constructed block cannot fail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Iterable, Literal, Union, get_args

from pi.blocks.cell import Cell, Compose, composite
from pi.blocks.errors import EmptyComposite, InvalidArgument, InvalidPadding
from pi.blocks.settings import ANCHORS, Anchor, get_settings
from pi.blocks.style import EMPTY_STYLE, Style, parse_ansi
from pi.blocks.width import WidthOracle, get_width_oracle, graphemes

if TYPE_CHECKING:
    from pi.blocks.cell import Size

logger = logging.getLogger(__name__)

Axis = Literal["horizontal", "vertical"]
Alignment = Literal["start", "center", "end", "stretch"]

AXES: tuple[str, ...] = get_args(Axis)
ALIGNMENTS: tuple[str, ...] = get_args(Alignment)

Line = tuple[Cell, ...]


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


class _Node:
    """Shared behaviour of every block variant."""

    @cached_property
    def size(self) -> Size:
        """Natural size, computed once per node."""
        from pi.blocks.layout import fill_sizes

        return fill_sizes(self)  # type: ignore[arg-type]

    @property
    def width(self) -> int:
        return self.size.width

    @property
    def height(self) -> int:
        return self.size.height


@dataclass(frozen=True, repr=False)
class Leaf(_Node):
    """Literal text. Each line holds one cell per grid column."""

    lines: tuple[Line, ...] = ()

    def __repr__(self) -> str:
        text = "\n".join("".join(c.grapheme or " " for c in line) for line in self.lines)
        return f"Leaf({text!r})"


@dataclass(frozen=True)
class Padded(_Node):
    child: Block
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0
    # None leaves the margins transparent
    fill: str | None = " "
    fill_style: Style = EMPTY_STYLE


@dataclass(frozen=True)
class Joined(_Node):
    children: tuple[Block, ...]
    axis: Axis = "horizontal"
    alignment: Alignment = "start"
    # Style of the transparent cells around children
    background: Style = EMPTY_STYLE


@dataclass(frozen=True)
class Overlaid(_Node):
    """Layers ordered front-to-back; ``layers[0]`` is the front layer."""

    layers: tuple[Block, ...]
    anchor: Anchor = "top-left"
    # Picks the cell shown at each position from the layers' cells
    compose: Compose = composite


@dataclass(frozen=True)
class Styled(_Node):
    child: Block
    patch: Style = field(default=EMPTY_STYLE)


Block = Union[Leaf, Padded, Joined, Overlaid, Styled]

BLOCK_TYPES = (Leaf, Padded, Joined, Overlaid, Styled)


# ---------------------------------------------------------------------------
# Leaf construction
# ---------------------------------------------------------------------------


def _build_lines(
    parts: Iterable[tuple[str, Style]],
    oracle: WidthOracle,
    tab_width: int,
) -> tuple[Line, ...]:
    parts = [(text.replace("\r\n", "\n"), style) for text, style in parts]
    full = "".join(text for text, _ in parts)
    if not full:
        return ()

    tab = " " * tab_width
    lines: list[list[Cell]] = [[]]
    for text, style in parts:
        for n, segment in enumerate(text.split("\n")):
            if n > 0:
                lines.append([])
            line = lines[-1]
            for g in graphemes(segment.replace("\t", tab)):
                w = oracle.width_of(g)
                if w == 2:
                    line.append(Cell(g, style, 2))
                    line.append(Cell.continuation(style))
                elif w == 1:
                    line.append(Cell(g, style, 1))
                elif line:
                    # Zero-width cluster: extend the previous grapheme
                    idx = -2 if line[-1].is_continuation else -1
                    prev = line[idx]
                    line[idx] = Cell(prev.grapheme + g, prev.style, prev.width)  # type: ignore[operator]
                else:
                    logger.debug("Dropping zero-width cluster %r at start of line", g)

    # A trailing newline terminates the last line rather than opening a new one
    if full.endswith("\n"):
        lines.pop()
    return tuple(tuple(line) for line in lines)


def leaf(
    text: str,
    style: Style = EMPTY_STYLE,
    *,
    oracle: WidthOracle | None = None,
) -> Leaf:
    """Build a leaf from plain *text* rendered in *style*.

    ``""`` gives the zero-size leaf. Tabs expand to the configured tab width.
    """
    return spans([(text, style)], oracle=oracle)


def spans(
    parts: Iterable[tuple[str, Style]],
    *,
    oracle: WidthOracle | None = None,
) -> Leaf:
    """Build a leaf from ``(text, style)`` fragments, each keeping its style."""
    return Leaf(_build_lines(parts, oracle or get_width_oracle(), get_settings().tab_width))


def ansi_leaf(
    text: str,
    style: Style = EMPTY_STYLE,
    *,
    oracle: WidthOracle | None = None,
) -> Leaf:
    """Build a leaf from text carrying SGR escape codes.

    SGR attributes become cell styles merged over *style*; other escape
    sequences are dropped.
    """
    return spans(
        [(fragment, style.merge(sgr)) for fragment, sgr in parse_ansi(text)],
        oracle=oracle,
    )


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def _check_block(value: object) -> Block:
    if not isinstance(value, BLOCK_TYPES):
        raise InvalidArgument(f"expected a block, got {type(value).__name__}")
    return value  # type: ignore[return-value]


def _check_choice(value: str, choices: tuple[str, ...], what: str) -> None:
    if value not in choices:
        raise InvalidArgument(f"unknown {what} {value!r}, expected one of {', '.join(choices)}")


def pad(
    block: Block,
    top: int = 0,
    right: int = 0,
    bottom: int = 0,
    left: int = 0,
    *,
    fill: str | None = " ",
    fill_style: Style = EMPTY_STYLE,
    oracle: WidthOracle | None = None,
) -> Padded:
    """Surround *block* with margins drawn with *fill* (``None``: transparent)."""
    _check_block(block)
    for name, margin in (("top", top), ("right", right), ("bottom", bottom), ("left", left)):
        if isinstance(margin, bool) or not isinstance(margin, int):
            raise InvalidPadding(f"{name} margin must be an int, got {margin!r}")
        if margin < 0:
            raise InvalidPadding(f"{name} margin must be non-negative, got {margin}")
    if fill is not None:
        clusters = graphemes(fill) if isinstance(fill, str) else []
        if len(clusters) != 1 or (oracle or get_width_oracle()).width_of(fill) != 1:
            raise InvalidPadding(f"fill must be a single one-cell grapheme, got {fill!r}")
    return Padded(block, top, right, bottom, left, fill, fill_style)


def join(
    children: Iterable[Block],
    axis: Axis = "horizontal",
    alignment: Alignment = "start",
    *,
    background: Style = EMPTY_STYLE,
) -> Joined:
    """Lay *children* out along *axis*, aligned on the cross axis."""
    items = tuple(_check_block(child) for child in children)
    if not items:
        raise EmptyComposite("join requires at least one child")
    _check_choice(axis, AXES, "axis")
    _check_choice(alignment, ALIGNMENTS, "alignment")
    return Joined(items, axis, alignment, background)


def hjoin(*children: Block, alignment: Alignment = "start", background: Style = EMPTY_STYLE) -> Joined:
    return join(children, "horizontal", alignment, background=background)


def vjoin(*children: Block, alignment: Alignment = "start", background: Style = EMPTY_STYLE) -> Joined:
    return join(children, "vertical", alignment, background=background)


def overlay(
    layers: Iterable[Block],
    *,
    anchor: Anchor | None = None,
    compose: Compose = composite,
) -> Overlaid:
    """Stack *layers* front-to-back; the result has the front layer's size.

    *anchor* places the other layers relative to the front layer; it
    defaults to the configured ``overlay_anchor``. *compose* receives the
    layers' cells at one position, front-to-back with ``None`` where a layer
    does not reach, and returns the cell to show there.
    """
    items = tuple(_check_block(layer) for layer in layers)
    if not items:
        raise EmptyComposite("overlay requires at least one layer")
    resolved = get_settings().overlay_anchor if anchor is None else anchor
    _check_choice(resolved, ANCHORS, "anchor")
    if not callable(compose):
        raise InvalidArgument(f"compose must be callable, got {type(compose).__name__}")
    return Overlaid(items, resolved, compose)


def style(block: Block, patch: Style) -> Styled:
    """Apply *patch* to every cell *block* renders."""
    return Styled(_check_block(block), patch)


def _split(extra: int, alignment: str) -> tuple[int, int]:
    """Distribute *extra* cells before/after a block per *alignment*."""
    if alignment == "end":
        return (extra, 0)
    if alignment == "center":
        before = extra // 2
        return (before, extra - before)
    return (0, extra)


def pad_to(
    block: Block,
    width: int | None = None,
    height: int | None = None,
    *,
    horizontal: Alignment = "start",
    vertical: Alignment = "start",
    fill: str | None = None,
    fill_style: Style = EMPTY_STYLE,
) -> Block:
    """Grow *block* to at least *width* x *height*, placed per alignment.

    Sizes smaller than the block leave that axis unchanged.
    """
    _check_block(block)
    for name, value in (("width", width), ("height", height)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidArgument(f"{name} must be an int or None, got {value!r}")
    _check_choice(horizontal, ALIGNMENTS, "alignment")
    _check_choice(vertical, ALIGNMENTS, "alignment")
    extra_x = max(0, width - block.width) if width is not None else 0
    extra_y = max(0, height - block.height) if height is not None else 0
    if extra_x == 0 and extra_y == 0:
        return block
    left, right = _split(extra_x, horizontal)
    top, bottom = _split(extra_y, vertical)
    return pad(block, top, right, bottom, left, fill=fill, fill_style=fill_style)
