"""Tests for pi.blocks.primitives -- fills, lines and frames."""

from __future__ import annotations

import pytest

from pi.blocks.block import leaf
from pi.blocks.cell import Size
from pi.blocks.errors import InvalidArgument
from pi.blocks.primitives import ASCII, ROUNDED, LinePalette, empty, filled, frame, line
from pi.blocks.render import render
from pi.blocks.settings import Settings, set_settings
from pi.blocks.style import EMPTY_STYLE, Style

ARROW = LinePalette(only="o", middle="-", start="<", end=">")


class TestEmpty:
    """Transparent spacers."""

    def test_size(self) -> None:
        assert empty(3, 2).size == Size(3, 2)

    def test_all_cells_transparent(self) -> None:
        grid = render(empty(2, 2))
        assert all(c.is_transparent for row in grid for c in row)

    def test_zero(self) -> None:
        assert empty(0, 0).size == Size(0, 0)


class TestFilled:
    """Tiling a pattern."""

    def test_repeats_to_the_right(self) -> None:
        assert render(filled(5, 2, "ab")).lines() == ["ababa", "ababa"]

    def test_repeats_lines_downwards(self) -> None:
        assert render(filled(3, 3, "x\ny")).lines() == ["xxx", "yyy", "xxx"]

    def test_wide_grapheme_cut_at_edge(self) -> None:
        grid = render(filled(3, 1, "世"))
        assert grid.lines() == ["世 "]
        assert grid.cell(2, 0).is_transparent

    def test_style(self) -> None:
        grid = render(filled(2, 1, "#", Style(fg="red")))
        assert {c.style for c in grid.rows[0]} == {Style(fg="red")}

    def test_zero_size(self) -> None:
        assert filled(0, 2, "x").size == Size(0, 2)
        assert filled(2, 0, "x").size == Size(2, 0)

    def test_empty_pattern_is_transparent(self) -> None:
        grid = render(filled(2, 1, ""))
        assert grid.size == Size(2, 1)
        assert all(c.is_transparent for c in grid.rows[0])

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            filled(-1, 1)

    @pytest.mark.parametrize("size", [(1.5, 1), (1, True), ("2", 1), (None, 1)])
    def test_non_int_size_rejected(self, size: tuple[object, object]) -> None:
        with pytest.raises(InvalidArgument):
            filled(*size)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgument):
            empty(*size)  # type: ignore[arg-type]


class TestLine:
    """Lines drawn from a palette."""

    def test_horizontal(self) -> None:
        assert render(line(5, ARROW)).lines() == ["<--->"]

    def test_vertical(self) -> None:
        assert render(line(3, LinePalette.uniform("|"), "vertical")).lines() == ["|", "|", "|"]

    def test_length_one_uses_only(self) -> None:
        assert render(line(1, ARROW)).lines() == ["o"]

    def test_length_two_has_no_middle(self) -> None:
        assert render(line(2, ARROW)).lines() == ["<>"]

    def test_length_zero_keeps_thickness(self) -> None:
        assert line(0, ARROW).size == Size(0, 1)
        assert line(0, ARROW, "vertical").size == Size(1, 0)

    def test_negative_length_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            line(-1, ARROW)

    def test_unknown_axis_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            line(2, ARROW, "diagonal")  # type: ignore[arg-type]

    @pytest.mark.parametrize("length", [2.0, True])
    def test_non_int_length_rejected(self, length: object) -> None:
        with pytest.raises(InvalidArgument):
            line(length, ARROW)  # type: ignore[arg-type]

    @pytest.mark.parametrize("glyph", ["ab", "世", "", "\u0301"])
    def test_palette_glyph_must_be_one_cell(self, glyph: str) -> None:
        with pytest.raises(InvalidArgument):
            line(3, LinePalette.uniform(glyph))

    def test_every_palette_entry_is_checked(self) -> None:
        with pytest.raises(InvalidArgument):
            line(1, LinePalette(only="o", middle="-", start="<", end="=>"))


class TestFrame:
    """Borders around a block."""

    def test_light(self) -> None:
        assert render(frame(leaf("hi"))).lines() == ["┌──┐", "│hi│", "└──┘"]

    def test_ascii_multiline(self) -> None:
        assert render(frame(leaf("a\nbc"), ASCII)).lines() == ["+--+", "|a |", "|bc|", "+--+"]

    def test_rounded(self) -> None:
        assert render(frame(leaf("x"), ROUNDED)).lines() == ["╭─╮", "│x│", "╰─╯"]

    def test_size(self) -> None:
        assert frame(leaf("abc\nd")).size == Size(5, 4)

    def test_style_applies_to_border_only(self) -> None:
        red = Style(fg="red")
        grid = render(frame(leaf("hi"), style=red))
        assert grid.cell(0, 0).style == red
        assert grid.cell(0, 1).style == red
        assert grid.cell(1, 1).style == EMPTY_STYLE

    def test_empty_content(self) -> None:
        assert render(frame(leaf(""), ASCII)).lines() == ["++", "++"]

    def test_box_drawing_needs_narrow_ambiguous_width(self) -> None:
        set_settings(Settings(ambiguous_width="wide"))
        with pytest.raises(InvalidArgument):
            frame(leaf("x"))
        assert render(frame(leaf("x"), ASCII)).lines() == ["+-+", "|x|", "+-+"]
