"""Tests for pi.blocks.width -- grapheme segmentation and cell widths."""

from __future__ import annotations

import logging

import pytest

from pi.blocks.settings import Settings, set_settings
from pi.blocks.width import (
    WidthOracle,
    get_width_oracle,
    graphemes,
    set_width_oracle,
    text_width,
    width_of,
)


# ---------------------------------------------------------------------------
# width_of
# ---------------------------------------------------------------------------


class TestWidthOf:
    """Width of a single grapheme cluster."""

    def test_ascii_is_one(self) -> None:
        assert WidthOracle().width_of("a") == 1

    def test_empty_is_zero(self) -> None:
        assert WidthOracle().width_of("") == 0

    def test_cjk_is_two(self) -> None:
        # U+4E16 is a wide ideograph
        assert WidthOracle().width_of("世") == 2

    def test_base_with_combining_mark_is_one(self) -> None:
        assert WidthOracle().width_of("e\u0301") == 1

    def test_lone_combining_mark_is_zero(self) -> None:
        assert WidthOracle().width_of("\u0301") == 0

    def test_zero_width_space_is_zero(self) -> None:
        assert WidthOracle().width_of("\u200b") == 0

    def test_single_emoji_is_two(self) -> None:
        assert WidthOracle().width_of("\U0001f44d") == 2

    def test_zwj_sequence_is_two(self) -> None:
        family = "\U0001f468\u200d\U0001f469\u200d\U0001f467"
        assert WidthOracle().width_of(family) == 2

    def test_flag_is_two(self) -> None:
        assert WidthOracle().width_of("\U0001f1fa\U0001f1f8") == 2

    def test_control_character_falls_back_to_one(self) -> None:
        assert WidthOracle().width_of("\x07") == 1

    def test_fallback_is_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="pi.blocks.width"):
            WidthOracle().width_of("\x01")
        assert any("using 1" in record.getMessage() for record in caplog.records)

    def test_repeated_lookup_is_stable(self) -> None:
        oracle = WidthOracle()
        assert [oracle.width_of("世") for _ in range(3)] == [2, 2, 2]


class TestAmbiguousWidth:
    """East Asian Ambiguous clusters follow the oracle's policy."""

    def test_narrow_by_default(self) -> None:
        assert WidthOracle().width_of("±") == 1

    def test_wide_policy(self) -> None:
        assert WidthOracle("wide").width_of("±") == 2

    def test_wide_policy_leaves_ascii_alone(self) -> None:
        assert WidthOracle("wide").width_of("a") == 1

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValueError):
            WidthOracle("medium")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


class TestGraphemes:
    """Segmentation into user-perceived characters."""

    def test_combining_sequence_is_one_cluster(self) -> None:
        assert graphemes("e\u0301a") == ["e\u0301", "a"]

    def test_empty_text(self) -> None:
        assert graphemes("") == []


class TestTextWidth:
    """Summed widths over a string."""

    def test_mixed_ascii_and_wide(self) -> None:
        # "A" (1) + U+4E16 (2) + "B" (1) = 4
        assert text_width("A世B") == 4

    def test_explicit_oracle(self) -> None:
        assert text_width("±±", WidthOracle("wide")) == 4


# ---------------------------------------------------------------------------
# Default oracle
# ---------------------------------------------------------------------------


class TestDefaultOracle:
    """The process-wide oracle is built from settings and can be injected."""

    def test_built_from_settings(self) -> None:
        set_settings(Settings(ambiguous_width="wide"))
        assert get_width_oracle().ambiguous == "wide"
        assert width_of("±") == 2

    def test_same_instance_until_reset(self) -> None:
        assert get_width_oracle() is get_width_oracle()

    def test_injected_oracle_is_used(self) -> None:
        oracle = WidthOracle("wide")
        set_width_oracle(oracle)
        assert get_width_oracle() is oracle
        assert width_of("±") == 2
