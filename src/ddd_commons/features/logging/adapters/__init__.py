"""Logging adapters: file streams and process terminators."""

from .file_stream import AppendFileStream, DEFAULT_HIGH_WATER_MARK
from .terminator import ProcessTerminator

__all__ = [
    "AppendFileStream",
    "DEFAULT_HIGH_WATER_MARK",
    "ProcessTerminator",
]
