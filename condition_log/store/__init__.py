"""
Record store facade.
"""

from .record_store import RecordStore, build_sinks

__all__ = [
    "RecordStore",
    "build_sinks",
]
