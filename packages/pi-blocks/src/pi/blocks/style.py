"""Style algebra: cell attributes, patch merging and SGR parsing.

A :class:`Style` maps each attribute to an optional value. ``None`` means
"unset": the attribute is inherited from whatever the surrounding context
supplies. Explicit resets (``"default"`` colours, ``"normal"`` weight,
``False`` flags) are ordinary values and do override.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Literal, Union

# Named colour ("red", "bright-red", "default"), 256-colour index, or RGB
Color = Union[str, int, tuple[int, int, int]]

Weight = Literal["normal", "bold", "dim"]

_COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


@dataclass(frozen=True)
class Style:
    """Attributes of a cell. Every field defaults to unset."""

    fg: Color | None = None
    bg: Color | None = None
    weight: Weight | None = None
    italic: bool | None = None
    underline: bool | None = None
    blink: bool | None = None
    inverse: bool | None = None
    hidden: bool | None = None
    strikethrough: bool | None = None

    def merge(self, patch: Style) -> Style:
        """Return this style with every attribute *patch* sets applied."""
        if patch is self:
            return self
        changes = {
            f.name: value
            for f in fields(patch)
            if (value := getattr(patch, f.name)) is not None
        }
        if not changes:
            return self
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        """``True`` if no attribute is set."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def set_fields(self) -> dict[str, object]:
        """Return the attributes this style sets."""
        return {
            f.name: value
            for f in fields(self)
            if (value := getattr(self, f.name)) is not None
        }


EMPTY_STYLE = Style()


def merge(base: Style, patch: Style) -> Style:
    """Merge *patch* over *base*: patch values win, unset never overwrites."""
    return base.merge(patch)


# ---------------------------------------------------------------------------
# Escape sequence scanning
# ---------------------------------------------------------------------------


def extract_escape(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` or ``None`` if there is no complete sequence
    at *pos*. Recognizes CSI (``ESC[`` params final-byte), OSC (``ESC]``
    ... BEL/ST) and APC (``ESC_`` ... BEL/ST).
    """
    if pos + 1 >= len(text) or text[pos] != "\x1b":
        return None

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if "\x40" <= ch <= "\x7e":
                code = text[pos : i + 1]
                return (code, len(code))
            if "\x20" <= ch <= "\x3f":
                i += 1
                continue
            break
        return None

    if next_ch in "]_":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":  # BEL
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    return None


# ---------------------------------------------------------------------------
# SgrState
# ---------------------------------------------------------------------------


class SgrState:
    """Track SGR (Select Graphic Rendition) state as a :class:`Style`.

    Resets (``0``, ``22``, ``39``, ...) return attributes to unset so that
    text after a reset inherits from its block context. Bold and dim share
    the single ``weight`` attribute, so whichever of ``1`` and ``2`` comes
    last wins.
    """

    def __init__(self) -> None:
        self.style = EMPTY_STYLE

    def clear(self) -> None:
        self.style = EMPTY_STYLE

    def _set(self, **changes: object) -> None:
        self.style = replace(self.style, **changes)  # type: ignore[arg-type]

    def process(self, code: str) -> None:
        """Update state from an SGR sequence like ``\\x1b[1;31m``."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params_str = code[2:-1]
        if not params_str:
            self.clear()
            return

        try:
            params = [int(p) if p else 0 for p in params_str.split(";")]
        except ValueError:
            # Private or colon-separated forms are not SGR we understand
            return

        i = 0
        while i < len(params):
            val = params[i]

            if val == 0:
                self.clear()
            elif val == 1:
                self._set(weight="bold")
            elif val == 2:
                self._set(weight="dim")
            elif val == 3:
                self._set(italic=True)
            elif val == 4:
                self._set(underline=True)
            elif val == 5:
                self._set(blink=True)
            elif val == 7:
                self._set(inverse=True)
            elif val == 8:
                self._set(hidden=True)
            elif val == 9:
                self._set(strikethrough=True)
            elif val == 22:
                self._set(weight=None)
            elif val == 23:
                self._set(italic=None)
            elif val == 24:
                self._set(underline=None)
            elif val == 25:
                self._set(blink=None)
            elif val == 27:
                self._set(inverse=None)
            elif val == 28:
                self._set(hidden=None)
            elif val == 29:
                self._set(strikethrough=None)
            elif 30 <= val <= 37:
                self._set(fg=_COLOR_NAMES[val - 30])
            elif val in (38, 48):
                color, consumed = _extended_color(params, i)
                if color is not None:
                    if val == 38:
                        self._set(fg=color)
                    else:
                        self._set(bg=color)
                i += consumed
            elif val == 39:
                self._set(fg=None)
            elif 40 <= val <= 47:
                self._set(bg=_COLOR_NAMES[val - 40])
            elif val == 49:
                self._set(bg=None)
            elif 90 <= val <= 97:
                self._set(fg=f"bright-{_COLOR_NAMES[val - 90]}")
            elif 100 <= val <= 107:
                self._set(bg=f"bright-{_COLOR_NAMES[val - 100]}")

            i += 1


def _extended_color(params: list[int], i: int) -> tuple[Color | None, int]:
    """Decode ``38;5;N`` / ``38;2;R;G;B`` at *i*; return (colour, params consumed)."""
    if i + 1 >= len(params):
        return (None, 0)
    mode = params[i + 1]
    if mode == 5 and i + 2 < len(params):
        return (params[i + 2], 2)
    if mode == 2 and i + 4 < len(params):
        return ((params[i + 2], params[i + 3], params[i + 4]), 4)
    return (None, 1)


def parse_ansi(text: str) -> list[tuple[str, Style]]:
    """Split SGR-styled *text* into ``(fragment, style)`` pairs.

    Escape sequences other than SGR are dropped. Adjacent characters with
    the same style share a fragment.
    """
    state = SgrState()
    result: list[tuple[str, Style]] = []
    current: list[str] = []
    current_style = state.style

    i = 0
    while i < len(text):
        extracted = extract_escape(text, i)
        if extracted is not None:
            code, length = extracted
            state.process(code)
            i += length
            continue

        if state.style != current_style:
            if current:
                result.append(("".join(current), current_style))
                current = []
            current_style = state.style

        current.append(text[i])
        i += 1

    if current:
        result.append(("".join(current), current_style))
    return result
