"""Depth-first visiting of every part in a message tree."""

from typing import Callable, List

from ..message.base import Part

# Called with a part and its ancestors, nearest last. An empty parents list
# means the part is the one the walk started from.
Processor = Callable[[Part, List[Part]], None]


def and_process(processor: Processor, root: Part) -> None:
    """
    Call processor for root and every part below it, parents before children.

    Any exception raised by processor stops the walk and propagates.

    Args:
        processor: Callback receiving (part, parents)
        root: Message or part to start from
    """
    _process(processor, root, [])


def _process(processor: Processor, part: Part, parents: List[Part]) -> None:
    processor(part, parents)
    if part.is_multipart():
        ancestry = parents + [part]
        for sub_part in part.get_parts():
            _process(processor, sub_part, ancestry)


def and_process_opaque(processor: Processor, root: Part) -> None:
    """Like and_process(), but only leaf parts are passed to processor."""

    def opaque_only(part: Part, parents: List[Part]) -> None:
        if not part.is_multipart():
            processor(part, parents)

    and_process(opaque_only, root)


def and_process_multipart(processor: Processor, root: Part) -> None:
    """Like and_process(), but only multipart parts are passed to processor."""

    def multipart_only(part: Part, parents: List[Part]) -> None:
        if part.is_multipart():
            processor(part, parents)

    and_process(multipart_only, root)
