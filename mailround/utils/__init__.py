"""Utility functions"""

from .io_utils import CountingWriter, Remainder, as_reader, copy_stream, read_all

__all__ = ["CountingWriter", "Remainder", "as_reader", "copy_stream", "read_all"]
