"""
Device-condition record validation and dual-format persistence.
"""

__version__ = "1.0.0"
