"""Errors raised while building blocks."""

from __future__ import annotations


class BlockError(Exception):
    """Base class for every error raised by ``pi.blocks``."""


class InvalidPadding(BlockError, ValueError):
    """A negative margin or an unusable fill grapheme was given to ``pad``."""


class EmptyComposite(BlockError, ValueError):
    """``join`` or ``overlay`` received no children."""


class InvalidArgument(BlockError, ValueError):
    """An unknown axis, alignment or anchor, or a child that is not a block."""


class InvariantViolation(BlockError, RuntimeError):
    """Internal inconsistency detected after construction.

    Layout and rendering are total over well-formed blocks, so this always
    indicates a bug in the engine and is never handled by the library.
    """
