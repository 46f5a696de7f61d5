"""pi-blocks: composable blocks of styled monospaced text."""

# Block data model and combinators
from pi.blocks.block import (
    ALIGNMENTS,
    AXES,
    Alignment,
    Axis,
    Block,
    Joined,
    Leaf,
    Overlaid,
    Padded,
    Styled,
    ansi_leaf,
    hjoin,
    join,
    leaf,
    overlay,
    pad,
    pad_to,
    spans,
    style,
    vjoin,
)

# Rendered output
from pi.blocks.cell import TRANSPARENT, Cell, CellGrid, Compose, Size, composite

# Errors
from pi.blocks.errors import (
    BlockError,
    EmptyComposite,
    InvalidArgument,
    InvalidPadding,
    InvariantViolation,
)

# Layout and rendering
from pi.blocks.layout import layout, measure

# Derived building blocks
from pi.blocks.primitives import (
    ASCII,
    DOUBLE,
    HEAVY,
    LIGHT,
    ROUNDED,
    BoxPalette,
    LinePalette,
    empty,
    filled,
    frame,
    line,
)
from pi.blocks.render import render

# Configuration
from pi.blocks.settings import (
    Anchor,
    AmbiguousWidth,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
    set_settings,
)

# Style algebra
from pi.blocks.style import EMPTY_STYLE, Color, SgrState, Style, Weight, merge, parse_ansi

# Width oracle
from pi.blocks.width import (
    WidthOracle,
    get_width_oracle,
    graphemes,
    set_width_oracle,
    text_width,
    width_of,
)

__all__ = [
    # Blocks
    "ALIGNMENTS",
    "AXES",
    "Alignment",
    "Axis",
    "Block",
    "Joined",
    "Leaf",
    "Overlaid",
    "Padded",
    "Styled",
    "ansi_leaf",
    "hjoin",
    "join",
    "leaf",
    "overlay",
    "pad",
    "pad_to",
    "spans",
    "style",
    "vjoin",
    # Cells
    "TRANSPARENT",
    "Cell",
    "CellGrid",
    "Compose",
    "Size",
    "composite",
    # Errors
    "BlockError",
    "EmptyComposite",
    "InvalidArgument",
    "InvalidPadding",
    "InvariantViolation",
    # Layout / render
    "layout",
    "measure",
    "render",
    # Primitives
    "ASCII",
    "DOUBLE",
    "HEAVY",
    "LIGHT",
    "ROUNDED",
    "BoxPalette",
    "LinePalette",
    "empty",
    "filled",
    "frame",
    "line",
    # Settings
    "Anchor",
    "AmbiguousWidth",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "set_settings",
    # Style
    "EMPTY_STYLE",
    "Color",
    "SgrState",
    "Style",
    "Weight",
    "merge",
    "parse_ansi",
    # Width
    "WidthOracle",
    "get_width_oracle",
    "graphemes",
    "set_width_oracle",
    "text_width",
    "width_of",
]
