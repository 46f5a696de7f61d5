"""Renderer: flattens a block into a :class:`CellGrid`.

Every node can be rendered into a *target* size at least as large as its
natural size. Stretch alignment uses this to reflow children to a larger
cross extent; leaves never wrap, the remainder is transparent.

A render pass walks the tree from an explicit stack: a node is first
expanded into the (child, width, height) requests it needs, then
assembled once all of them are in the pass memo.
"""

from __future__ import annotations

from typing import Iterator

from pi.blocks.block import Block, Joined, Leaf, Overlaid, Padded, Styled
from pi.blocks.cell import TRANSPARENT, Cell, CellGrid
from pi.blocks.errors import InvariantViolation
from pi.blocks.settings import Anchor
from pi.blocks.style import Style

Rows = list[list[Cell]]
# Rows of one overlay layer placed in the front layer's bounds; None = not covered
Region = list[list[Cell | None]]
Request = tuple[Block, int, int]


def render(block: Block) -> CellGrid:
    """Render *block* at its natural size."""
    width, height = block.size
    rows = _Renderer().render(block, width, height)
    return CellGrid(width, height, tuple(tuple(row) for row in rows))


# ---------------------------------------------------------------------------
# Placement helpers
# ---------------------------------------------------------------------------


def _align_offset(extra: int, alignment: str) -> int:
    if alignment == "end":
        return extra
    if alignment == "center":
        return extra // 2
    return 0


def _anchor_row(anchor: Anchor, height: int, layer_height: int) -> int:
    if anchor in ("top-left", "top-right", "top-center"):
        return 0
    if anchor in ("bottom-left", "bottom-right", "bottom-center"):
        return height - layer_height
    # center, left-center, right-center
    return (height - layer_height) // 2


def _anchor_col(anchor: Anchor, width: int, layer_width: int) -> int:
    if anchor in ("top-left", "bottom-left", "left-center"):
        return 0
    if anchor in ("top-right", "bottom-right", "right-center"):
        return width - layer_width
    # center, top-center, bottom-center
    return (width - layer_width) // 2


def _repair_row(row: list) -> None:
    """Replace halves of wide graphemes that lost their partner with spaces."""
    for i, cell in enumerate(row):
        if cell is None:
            continue
        if cell.width == 2:
            nxt = row[i + 1] if i + 1 < len(row) else None
            if nxt is None or not nxt.is_continuation:
                row[i] = Cell(" ", cell.style, 1)
        elif cell.is_continuation:
            prev = row[i - 1] if i > 0 else None
            if prev is None or prev.width != 2:
                row[i] = Cell(" ", cell.style, 1)


def _join_slots(block: Joined, width: int, height: int) -> Iterator[tuple[Block, int, int, int, int]]:
    """Yield ``(child, x, y, width, height)`` for each child of a join."""
    horizontal = block.axis == "horizontal"
    cross_extent = height if horizontal else width

    offset = 0
    for child in block.children:
        child_width, child_height = child.size
        along, across = (child_width, child_height) if horizontal else (child_height, child_width)

        if block.alignment == "stretch":
            across = cross_extent
            cross_offset = 0
        else:
            cross_offset = _align_offset(cross_extent - across, block.alignment)

        if horizontal:
            yield child, offset, cross_offset, along, across
        else:
            yield child, cross_offset, offset, across, along
        offset += along


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class _Renderer:
    """One render pass. Shared sub-blocks are rendered once per target size."""

    def __init__(self) -> None:
        # id(block) is only stable while the block is alive, so keep it referenced
        self._memo: dict[tuple[int, int, int], tuple[Block, Rows]] = {}

    def render(self, block: Block, width: int, height: int) -> Rows:
        stack: list[tuple[Block, int, int, bool]] = [(block, width, height, False)]
        while stack:
            node, w, h, expanded = stack.pop()
            key = (id(node), w, h)
            if key in self._memo:
                continue
            if expanded:
                self._memo[key] = (node, self._assemble(node, w, h))
                continue

            natural = node.size
            if w < natural.width or h < natural.height:
                raise InvariantViolation(
                    f"cannot render {type(node).__name__} of size {natural} into {w}x{h}"
                )
            stack.append((node, w, h, True))
            for child, cw, ch in self._requests(node, w, h):
                if (id(child), cw, ch) not in self._memo:
                    stack.append((child, cw, ch, False))

        return self._memo[(id(block), width, height)][1]

    def _rows(self, block: Block, width: int, height: int) -> Rows:
        return self._memo[(id(block), width, height)][1]

    def _requests(self, block: Block, width: int, height: int) -> list[Request]:
        """Child renders *block* needs at this target size."""
        match block:
            case Leaf():
                return []
            case Padded():
                return [
                    (
                        block.child,
                        width - block.left - block.right,
                        height - block.top - block.bottom,
                    )
                ]
            case Joined():
                return [(child, w, h) for child, _, _, w, h in _join_slots(block, width, height)]
            case Overlaid():
                front, *back = block.layers
                return [(front, width, height)] + [(layer, *layer.size) for layer in back]
            case Styled():
                return [(block.child, width, height)]
            case _:
                raise TypeError(f"not a block: {block!r}")

    def _assemble(self, block: Block, width: int, height: int) -> Rows:
        match block:
            case Leaf():
                return self._leaf(block, width, height)
            case Padded():
                return self._padded(block, width, height)
            case Joined():
                return self._joined(block, width, height)
            case Overlaid():
                return self._overlaid(block, width, height)
            case Styled():
                return self._styled(block, width, height)
        raise TypeError(f"not a block: {block!r}")

    def _leaf(self, block: Leaf, width: int, height: int) -> Rows:
        rows = [list(line) + [TRANSPARENT] * (width - len(line)) for line in block.lines]
        rows.extend([TRANSPARENT] * width for _ in range(height - len(rows)))
        return rows

    def _padded(self, block: Padded, width: int, height: int) -> Rows:
        inner = self._rows(
            block.child,
            width - block.left - block.right,
            height - block.top - block.bottom,
        )
        if block.fill is None:
            fill = Cell.transparent(block.fill_style)
        else:
            fill = Cell(block.fill, block.fill_style, 1)

        left = [fill] * block.left
        right = [fill] * block.right
        rows: Rows = [[fill] * width for _ in range(block.top)]
        rows.extend(left + row + right for row in inner)
        rows.extend([fill] * width for _ in range(block.bottom))
        return rows

    def _joined(self, block: Joined, width: int, height: int) -> Rows:
        gap = Cell.transparent(block.background)
        canvas: Rows = [[gap] * width for _ in range(height)]
        for child, x, y, w, h in _join_slots(block, width, height):
            for dy, row in enumerate(self._rows(child, w, h)):
                canvas[y + dy][x : x + len(row)] = row
        return canvas

    def _overlaid(self, block: Overlaid, width: int, height: int) -> Rows:
        front = self._rows(block.layers[0], width, height)
        if len(block.layers) == 1:
            return front

        regions: list[Region] = [front]  # type: ignore[list-item]
        for layer in block.layers[1:]:
            regions.append(self._place(layer, block.anchor, width, height))

        compose = block.compose
        rows: Rows = []
        for y in range(height):
            row = [compose([region[y][x] for region in regions]) for x in range(width)]
            _repair_row(row)
            rows.append(row)
        return rows

    def _place(self, layer: Block, anchor: Anchor, width: int, height: int) -> Region:
        """Clip *layer*, rendered at its natural size, into the bounds."""
        layer_width, layer_height = layer.size
        sub = self._rows(layer, layer_width, layer_height)
        x0 = _anchor_col(anchor, width, layer_width)
        y0 = _anchor_row(anchor, height, layer_height)

        region: Region = [[None] * width for _ in range(height)]
        for dy, src in enumerate(sub):
            y = y0 + dy
            if not 0 <= y < height:
                continue
            start = max(0, -x0)
            stop = min(layer_width, width - x0)
            if start >= stop:
                continue
            region[y][x0 + start : x0 + stop] = src[start:stop]
            _repair_row(region[y])
        return region

    def _styled(self, block: Styled, width: int, height: int) -> Rows:
        inner = self._rows(block.child, width, height)
        patch = block.patch
        if patch.is_empty:
            return inner

        merged: dict[Style, Style] = {}
        rows: Rows = []
        for row in inner:
            out: list[Cell] = []
            for cell in row:
                style = merged.get(cell.style)
                if style is None:
                    style = merged[cell.style] = cell.style.merge(patch)
                out.append(cell.with_style(style))
            rows.append(out)
        return rows
