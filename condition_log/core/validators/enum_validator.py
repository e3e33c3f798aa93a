"""
EnumValueValidator - validates that a value is one of an allowed set.
"""

from typing import Any

from .base_validator import BaseValidator


class EnumValueValidator(BaseValidator):
    """
    Validates that a non-empty value is exactly one of ``allowed`` (case-sensitive).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        allowed = self.parameters.get("allowed")
        if not allowed:
            raise ValueError("EnumValueValidator requires a non-empty 'allowed' parameter")
        if isinstance(allowed, str):
            raise ValueError("'allowed' must be a list of values, not a string")

        self.allowed = tuple(str(item) for item in allowed)

    def validate(self, value: str, field_label: str) -> None:
        if not value:
            return

        if value not in self.allowed:
            raise self.fail(field_label, "has an invalid value")

    @property
    def rule_type(self) -> str:
        return "enum_value"
