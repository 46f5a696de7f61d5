"""Tests for pi.blocks.settings -- environment configuration."""

from __future__ import annotations

import logging

import pytest

from pi.blocks.block import leaf, overlay
from pi.blocks.settings import Settings, get_settings, load_settings, reset_settings, set_settings
from pi.blocks.width import get_width_oracle


class TestLoadSettings:
    """Parsing PI_BLOCKS_* variables."""

    def test_defaults(self) -> None:
        assert load_settings({}) == Settings()
        assert Settings() == Settings(ambiguous_width="narrow", tab_width=3, overlay_anchor="top-left")

    def test_values(self) -> None:
        settings = load_settings(
            {
                "PI_BLOCKS_AMBIGUOUS_WIDTH": "WIDE",
                "PI_BLOCKS_TAB_WIDTH": "4",
                "PI_BLOCKS_OVERLAY_ANCHOR": " center ",
            }
        )
        assert settings == Settings(ambiguous_width="wide", tab_width=4, overlay_anchor="center")

    def test_empty_value_means_default(self) -> None:
        assert load_settings({"PI_BLOCKS_TAB_WIDTH": ""}).tab_width == 3

    @pytest.mark.parametrize(
        "name, value",
        [
            ("PI_BLOCKS_AMBIGUOUS_WIDTH", "medium"),
            ("PI_BLOCKS_TAB_WIDTH", "four"),
            ("PI_BLOCKS_TAB_WIDTH", "-2"),
            ("PI_BLOCKS_OVERLAY_ANCHOR", "middle"),
        ],
    )
    def test_invalid_value_warns_and_keeps_default(
        self, name: str, value: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pi.blocks.settings"):
            settings = load_settings({name: value})
        assert settings == Settings()
        assert any(name in record.getMessage() for record in caplog.records)

    def test_zero_tab_width_is_allowed(self) -> None:
        assert load_settings({"PI_BLOCKS_TAB_WIDTH": "0"}).tab_width == 0


class TestGlobalSettings:
    """The process-wide settings and their effect on construction."""

    def test_read_from_environment_after_reset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_BLOCKS_TAB_WIDTH", "5")
        reset_settings()
        assert get_settings().tab_width == 5
        assert leaf("\t").width == 5

    def test_set_settings_replaces_width_oracle(self) -> None:
        before = get_width_oracle()
        set_settings(Settings(ambiguous_width="wide"))
        after = get_width_oracle()
        assert after is not before
        assert after.ambiguous == "wide"
        assert leaf("±").width == 2

    def test_zero_tab_width_drops_tabs(self) -> None:
        set_settings(Settings(tab_width=0))
        assert leaf("a\tb").width == 2

    def test_overlay_anchor_read_at_construction(self) -> None:
        block = overlay([leaf("a")])
        set_settings(Settings(overlay_anchor="bottom-right"))
        assert block.anchor == "top-left"
        assert overlay([leaf("a")]).anchor == "bottom-right"
