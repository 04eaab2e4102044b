"""Traversal of message part trees"""

from .process import Processor, and_process, and_process_multipart, and_process_opaque
from .transform import Transformer, and_transform
from .walker import iter_parts

__all__ = [
    "Processor",
    "and_process",
    "and_process_multipart",
    "and_process_opaque",
    "Transformer",
    "and_transform",
    "iter_parts",
]
