"""Round-trip safe parsing and building of RFC 5322 / MIME email messages"""

from .config import AppConfig, ConfigLoader, FoldEncoding, ParserConfig
from .models import Break, ParamValue
from .services.header import Field, Header
from .services.message import (
    Buffer,
    BufferMode,
    Multipart,
    NoBoundaryError,
    Opaque,
    ParseError,
    Part,
    attachment_file,
    new_blank_buffer,
    new_buffer,
    parse,
)
from .services.walk import and_process, and_transform, iter_parts

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "FoldEncoding",
    "ParserConfig",
    "Break",
    "ParamValue",
    "Field",
    "Header",
    "Buffer",
    "BufferMode",
    "Multipart",
    "NoBoundaryError",
    "Opaque",
    "ParseError",
    "Part",
    "attachment_file",
    "new_blank_buffer",
    "new_buffer",
    "parse",
    "and_process",
    "and_transform",
    "iter_parts",
]
