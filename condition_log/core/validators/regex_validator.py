"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a non-empty value fully matches a regular expression pattern.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (e.g., re.IGNORECASE)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        # Get pattern from parameters
        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        flags = self.parameters.get("flags", 0)

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern, flags)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

    def validate(self, value: str, field_label: str) -> None:
        """
        Validate that the value matches the regex pattern.

        Args:
            value: The raw string value
            field_label: Label used in the failure message

        Raises:
            ValidationError: If value doesn't match the pattern
        """
        if not value:
            return

        # fullmatch: "^...$" patterns would otherwise accept a trailing newline
        if not self.pattern.fullmatch(value):
            raise self.fail(field_label, "contains invalid characters")

    @property
    def rule_type(self) -> str:
        return "regex"
