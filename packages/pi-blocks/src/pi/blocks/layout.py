"""Layout engine: block sizes without rendering.

:func:`measure` applies the size rule of one variant, reading the already
memoized sizes of the children. :func:`layout` is the public entry point;
each node keeps its size in a compute-once slot (``Block.size``), so
shared sub-blocks are measured a single time and no global cache exists.
Two threads racing on the first read both compute the same value.

Sizes are filled bottom-up from an explicit stack, so the depth of a tree
is not limited by the interpreter's recursion limit.
"""

from __future__ import annotations

from pi.blocks.block import Block, Joined, Leaf, Overlaid, Padded, Styled
from pi.blocks.cell import Size


def measure(block: Block) -> Size:
    """Compute the natural size of *block* from its structure."""
    match block:
        case Leaf(lines=lines):
            return Size(max((len(line) for line in lines), default=0), len(lines))

        case Padded(child=child, top=top, right=right, bottom=bottom, left=left):
            inner = child.size
            return Size(inner.width + left + right, inner.height + top + bottom)

        case Joined(children=children, axis="horizontal"):
            sizes = [c.size for c in children]
            return Size(sum(s.width for s in sizes), max(s.height for s in sizes))

        case Joined(children=children, axis="vertical"):
            sizes = [c.size for c in children]
            return Size(max(s.width for s in sizes), sum(s.height for s in sizes))

        case Overlaid(layers=layers):
            return layers[0].size

        case Styled(child=child):
            return child.size

        case _:
            raise TypeError(f"not a block: {block!r}")


def _sized_children(block: Block) -> tuple[Block, ...]:
    """Children whose size :func:`measure` reads."""
    match block:
        case Padded(child=child) | Styled(child=child):
            return (child,)
        case Joined(children=children):
            return children
        case Overlaid(layers=layers):
            return layers[:1]
        case _:
            return ()


def fill_sizes(block: Block) -> Size:
    """Measure *block* and every unmeasured descendant, deepest first."""
    stack: list[tuple[Block, bool]] = [(block, False)]
    while stack:
        node, ready = stack.pop()
        slots = node.__dict__
        if "size" in slots:
            continue
        if ready:
            slots["size"] = measure(node)
            continue
        stack.append((node, True))
        stack.extend((child, False) for child in _sized_children(node) if "size" not in child.__dict__)
    return block.__dict__["size"]


def layout(block: Block) -> Size:
    """Return the (memoized) size of *block*."""
    return block.size
