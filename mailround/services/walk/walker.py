"""Iteration over the parts of a message tree."""

from typing import Iterator, Tuple

from ..message.base import Part


def iter_parts(root: Part) -> Iterator[Tuple[int, int, Part]]:
    """
    Yield (depth, index, part) for root and every part below it.

    Parts come in depth-first pre-order. The root has depth 0 and index 0;
    other parts have the index they hold in their parent's part list.

    Examples:
        >>> [(d, i) for d, i, _ in iter_parts(msg)]
        [(0, 0), (1, 0), (2, 0), (2, 1), (1, 1), (1, 2)]
    """
    stack = [(0, 0, root)]
    while stack:
        depth, index, part = stack.pop()
        yield depth, index, part
        if part.is_multipart():
            sub_parts = part.get_parts()
            for i in range(len(sub_parts) - 1, -1, -1):
                stack.append((depth + 1, i, sub_parts[i]))
