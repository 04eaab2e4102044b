"""Message parts, parsing and building"""

from .base import (
    BufferModeError,
    EmptyPartError,
    HeaderTooLargeError,
    MessageError,
    ModeUnsetError,
    MultipartError,
    NoBoundaryError,
    NotMultipartError,
    OpaqueBufferError,
    ParseError,
    Part,
    PartsBufferError,
    ParsesAsNotMultipartError,
    PartTooLargeError,
)
from .boundary import MultipartSplit, generate_boundary, generate_safe_boundary, split_multipart
from .buffer import Buffer, BufferMode, new_blank_buffer, new_buffer
from .multipart import Multipart
from .opaque import Opaque, attachment_file
from .parser import parse, parse_multipart, parse_opaque

__all__ = [
    "BufferModeError",
    "EmptyPartError",
    "HeaderTooLargeError",
    "MessageError",
    "ModeUnsetError",
    "MultipartError",
    "NoBoundaryError",
    "NotMultipartError",
    "OpaqueBufferError",
    "ParseError",
    "Part",
    "PartsBufferError",
    "ParsesAsNotMultipartError",
    "PartTooLargeError",
    "MultipartSplit",
    "generate_boundary",
    "generate_safe_boundary",
    "split_multipart",
    "Buffer",
    "BufferMode",
    "new_blank_buffer",
    "new_buffer",
    "Multipart",
    "Opaque",
    "attachment_file",
    "parse",
    "parse_multipart",
    "parse_opaque",
]
