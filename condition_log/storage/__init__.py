"""
Record sinks: append-only CSV log and rewritten JSON array document.
"""

from .csv_codec import CsvSink, encode_row, escape, parse_row
from .exceptions import (
    CsvFormatError,
    FormatError,
    JsonFormatError,
    PersistenceError,
    StorageError,
)
from .json_store import JsonAppendResult, JsonDocumentSink, encode_object

__all__ = [
    "CsvSink",
    "JsonDocumentSink",
    "JsonAppendResult",
    "escape",
    "encode_row",
    "parse_row",
    "encode_object",
    "StorageError",
    "PersistenceError",
    "FormatError",
    "CsvFormatError",
    "JsonFormatError",
]
