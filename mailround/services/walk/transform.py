"""Depth-first transformation of a message tree with threaded state."""

from typing import Any, Callable, List

from ..message.base import Part

# Called with a part, its ancestors and the states returned for those
# ancestors (state_stack[i] belongs to parents[i]). Returns the state of the
# part, which its children then see at the top of the stack.
Transformer = Callable[[Part, List[Part], List[Any]], Any]


def and_transform(transformer: Transformer, root: Part) -> Any:
    """
    Run transformer over root and every part below it, parents first.

    The usual use is building a new tree: the transformer returns a
    Buffer for each part and adds it to the Buffer found at the top of the
    state stack.

    Any exception raised by transformer stops the walk and propagates.

    Args:
        transformer: Callback receiving (part, parents, state_stack)
        root: Message or part to start from

    Returns:
        The state the transformer returned for root

    Examples:
        >>> def count(part, parents, state_stack):
        ...     return len(state_stack)
        >>> and_transform(count, msg)
        0
    """
    return _transform(transformer, root, [], [])


def _transform(
    transformer: Transformer, part: Part, parents: List[Part], state_stack: List[Any]
) -> Any:
    state = transformer(part, parents, state_stack)
    if part.is_multipart():
        ancestry = parents + [part]
        states = state_stack + [state]
        for sub_part in part.get_parts():
            _transform(transformer, sub_part, ancestry, states)
    return state
