"""Process-wide configuration for block measurement and compositing.

Values come from ``PI_BLOCKS_*`` environment variables and can be replaced
by the host application with :func:`set_settings`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Literal, Mapping, get_args

logger = logging.getLogger(__name__)

AmbiguousWidth = Literal["narrow", "wide"]

Anchor = Literal[
    "center",
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
    "top-center",
    "bottom-center",
    "left-center",
    "right-center",
]

AMBIGUOUS_WIDTHS: tuple[str, ...] = get_args(AmbiguousWidth)
ANCHORS: tuple[str, ...] = get_args(Anchor)


@dataclass(frozen=True)
class Settings:
    """Block engine configuration."""

    # Width of East Asian Ambiguous clusters ("narrow" -> 1, "wide" -> 2)
    ambiguous_width: AmbiguousWidth = "narrow"
    # Number of spaces a tab expands to inside a leaf
    tab_width: int = 3
    # Placement of overlay layers smaller or larger than the front layer
    overlay_anchor: Anchor = "top-left"


def _choice(environ: Mapping[str, str], name: str, choices: tuple[str, ...], default: str) -> str:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value not in choices:
        logger.warning("Ignoring %s=%r, expected one of %s", name, raw, ", ".join(choices))
        return default
    return value


def _non_negative_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected an integer", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r, expected a non-negative integer", name, raw)
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        ambiguous_width=_choice(  # type: ignore[arg-type]
            env, "PI_BLOCKS_AMBIGUOUS_WIDTH", AMBIGUOUS_WIDTHS, defaults.ambiguous_width
        ),
        tab_width=_non_negative_int(env, "PI_BLOCKS_TAB_WIDTH", defaults.tab_width),
        overlay_anchor=_choice(  # type: ignore[arg-type]
            env, "PI_BLOCKS_OVERLAY_ANCHOR", ANCHORS, defaults.overlay_anchor
        ),
    )


_global_settings: Settings | None = None


def get_settings() -> Settings:
    global _global_settings
    if _global_settings is None:
        _global_settings = load_settings()
    return _global_settings


def set_settings(settings: Settings) -> None:
    """Replace the active settings and drop the default width oracle."""
    global _global_settings
    _global_settings = settings

    from pi.blocks.width import reset_width_oracle

    reset_width_oracle()


def reset_settings() -> None:
    """Forget cached settings so the next read goes back to the environment."""
    global _global_settings
    _global_settings = None

    from pi.blocks.width import reset_width_oracle

    reset_width_oracle()
