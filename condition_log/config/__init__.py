"""
Configuration for the record store.
"""

from .settings import SINK_NAMES, Settings

__all__ = [
    "Settings",
    "SINK_NAMES",
]
