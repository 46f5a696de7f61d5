"""Width oracle: display width of grapheme clusters in terminal cells.

Segmentation is delegated to ``grapheme`` and per-code-point widths to
``wcwidth``; emoji sequences and East Asian Ambiguous characters get
special handling on top of that.
"""

from __future__ import annotations

import logging
import unicodedata

import grapheme
import wcwidth as _wcwidth

from pi.blocks.settings import AMBIGUOUS_WIDTHS, AmbiguousWidth, get_settings

logger = logging.getLogger(__name__)

_WIDTH_CACHE_MAX = 512


def graphemes(text: str) -> list[str]:
    """Split *text* into grapheme clusters."""
    return list(grapheme.graphemes(text))


def _is_control(cp: int) -> bool:
    return cp < 0x20 or 0x7F <= cp <= 0x9F


def _is_emoji_sequence(g: str) -> bool:
    """Return ``True`` for multi-code-point clusters that render as emoji."""
    for ch in g:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return True
        if cp == 0x200D:  # ZWJ
            return True
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return True
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return True

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return True
    # Miscellaneous symbols, dingbats
    return 0x2600 <= first_cp <= 0x27BF


class WidthOracle:
    """Answers ``width_of(grapheme) -> 0 | 1 | 2``.

    *ambiguous* decides how East Asian Ambiguous clusters are measured:
    ``"narrow"`` (one cell, the default) or ``"wide"`` (two cells).
    Unknown and control clusters measure one cell; combining marks and
    format characters measure zero.
    """

    def __init__(self, ambiguous: AmbiguousWidth = "narrow") -> None:
        if ambiguous not in AMBIGUOUS_WIDTHS:
            raise ValueError(f"ambiguous must be one of {AMBIGUOUS_WIDTHS}, got {ambiguous!r}")
        self.ambiguous: AmbiguousWidth = ambiguous
        self._cache: dict[str, int] = {}

    def __repr__(self) -> str:
        return f"WidthOracle(ambiguous={self.ambiguous!r})"

    def width_of(self, g: str) -> int:
        if not g:
            return 0

        # Printable ASCII fast path
        if len(g) == 1 and 0x20 <= ord(g) <= 0x7E:
            return 1

        cached = self._cache.get(g)
        if cached is not None:
            return cached

        width = self._measure(g)
        if len(self._cache) >= _WIDTH_CACHE_MAX:
            self._cache.clear()
        self._cache[g] = width
        return width

    def _measure(self, g: str) -> int:
        first = g[0]
        cat = unicodedata.category(first)
        if cat.startswith("M") or cat == "Cf":
            return 0

        if len(g) > 1 and _is_emoji_sequence(g):
            return 2

        if _is_control(ord(first)):
            logger.debug("No width for control cluster %r, using 1", g)
            return 1

        if unicodedata.east_asian_width(first) == "A":
            return 2 if self.ambiguous == "wide" else 1

        w = _wcwidth.wcwidth(first)
        if w < 0:
            logger.debug("No width for cluster %r, using 1", g)
            return 1
        return min(w, 2)

    def text_width(self, text: str) -> int:
        """Sum of the cluster widths of *text* (no escape handling)."""
        return sum(self.width_of(g) for g in grapheme.graphemes(text))


_global_width_oracle: WidthOracle | None = None


def get_width_oracle() -> WidthOracle:
    """Return the process-wide oracle, built from the active settings."""
    global _global_width_oracle
    if _global_width_oracle is None:
        _global_width_oracle = WidthOracle(get_settings().ambiguous_width)
    return _global_width_oracle


def set_width_oracle(oracle: WidthOracle) -> None:
    global _global_width_oracle
    _global_width_oracle = oracle


def reset_width_oracle() -> None:
    global _global_width_oracle
    _global_width_oracle = None


def width_of(g: str, oracle: WidthOracle | None = None) -> int:
    """Width of a single grapheme cluster using *oracle* or the default one."""
    return (oracle or get_width_oracle()).width_of(g)


def text_width(text: str, oracle: WidthOracle | None = None) -> int:
    """Total cell width of *text*."""
    return (oracle or get_width_oracle()).text_width(text)
