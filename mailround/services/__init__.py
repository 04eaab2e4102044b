"""Parsing, access, encoding and traversal services"""

from .header import Field, Header, HeaderBase, parse_header
from .message import (
    Buffer,
    BufferMode,
    Multipart,
    Opaque,
    Part,
    attachment_file,
    new_blank_buffer,
    new_buffer,
    parse,
    parse_multipart,
    parse_opaque,
)
from .transfer import TransferRegistry, apply_transfer_decoding, apply_transfer_encoding
from .walk import and_process, and_process_multipart, and_process_opaque, and_transform, iter_parts

__all__ = [
    "Field",
    "Header",
    "HeaderBase",
    "parse_header",
    "Buffer",
    "BufferMode",
    "Multipart",
    "Opaque",
    "Part",
    "attachment_file",
    "new_blank_buffer",
    "new_buffer",
    "parse",
    "parse_multipart",
    "parse_opaque",
    "TransferRegistry",
    "apply_transfer_decoding",
    "apply_transfer_encoding",
    "and_process",
    "and_process_multipart",
    "and_process_opaque",
    "and_transform",
    "iter_parts",
]
