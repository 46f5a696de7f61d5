"""Cells and cell grids: the rendered output of a block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple, Sequence

from pi.blocks.errors import InvariantViolation
from pi.blocks.style import EMPTY_STYLE, Style


class Size(NamedTuple):
    """Block extent in terminal cells."""

    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Cell:
    """One grid column: a grapheme cluster (or transparency) and its style.

    ``grapheme is None`` marks a transparent cell. A wide grapheme is stored
    as a lead cell of width 2 followed by a continuation cell whose
    grapheme is ``""`` and width is 0.
    """

    grapheme: str | None
    style: Style = EMPTY_STYLE
    width: int = 1

    @classmethod
    def transparent(cls, style: Style = EMPTY_STYLE) -> Cell:
        return cls(None, style, 1)

    @classmethod
    def continuation(cls, style: Style = EMPTY_STYLE) -> Cell:
        return cls("", style, 0)

    @property
    def is_transparent(self) -> bool:
        return self.grapheme is None

    @property
    def is_continuation(self) -> bool:
        return self.grapheme == ""

    def with_style(self, style: Style) -> Cell:
        if style is self.style:
            return self
        return Cell(self.grapheme, style, self.width)


TRANSPARENT = Cell.transparent()


@dataclass(frozen=True)
class CellGrid:
    """A rectangular array of cells, ``height`` rows of exactly ``width`` cells."""

    width: int
    height: int
    rows: tuple[tuple[Cell, ...], ...]

    def __post_init__(self) -> None:
        if len(self.rows) != self.height:
            raise InvariantViolation(
                f"grid declares height {self.height} but has {len(self.rows)} rows"
            )
        for y, row in enumerate(self.rows):
            if len(row) != self.width:
                raise InvariantViolation(
                    f"grid row {y} has {len(row)} cells, expected {self.width}"
                )

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def __iter__(self) -> Iterator[tuple[Cell, ...]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return self.height

    def cell(self, x: int, y: int) -> Cell:
        return self.rows[y][x]

    def lines(self, transparent: str = " ") -> list[str]:
        """Project the grid to plain text, one string per row.

        Transparent cells become *transparent*; continuation cells add
        nothing since their lead grapheme already covers two columns.
        """
        return [
            "".join(transparent if c.grapheme is None else c.grapheme for c in row)
            for row in self.rows
        ]

    def text(self, transparent: str = " ") -> str:
        return "\n".join(self.lines(transparent))


# ---------------------------------------------------------------------------
# Overlay compositing
# ---------------------------------------------------------------------------

# Resolves one overlay position from the layers' cells, front-to-back.
# None marks a layer that does not cover the position.
Compose = Callable[[Sequence[Cell | None]], Cell]


def composite(cells: Sequence[Cell | None]) -> Cell:
    """Default overlay rule for one position.

    The frontmost non-transparent cell supplies the grapheme. Its style is
    merged with the styles of the transparent cells in front of it, back to
    front; layers behind it contribute nothing. With no opaque cell the
    result is transparent in the merge of every style.
    """
    passed: list[Style] = []
    winner: Cell | None = None
    for cell in cells:
        if cell is None:
            continue
        if cell.grapheme is None:
            passed.append(cell.style)
            continue
        winner = cell
        break

    style = winner.style if winner is not None else EMPTY_STYLE
    for s in reversed(passed):
        style = style.merge(s)

    if winner is None:
        return Cell.transparent(style)
    return winner.with_style(style)
