"""
LengthRangeValidator - validates the character length of a supplied value.
"""

from typing import Any

from .base_validator import BaseValidator


class LengthRangeValidator(BaseValidator):
    """
    Validates that a non-empty value has between ``min`` and ``max`` characters.

    Length counts Unicode code points. Empty values are exempt; combine with
    RequiredFieldValidator to reject them.

    Parameters:
    - min: Minimum length (inclusive, default 0)
    - max: Maximum length (inclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        if "max" not in self.parameters:
            raise ValueError("LengthRangeValidator requires 'max' parameter")

        self.min_length = int(self.parameters.get("min", 0))
        self.max_length = int(self.parameters["max"])

        if self.min_length < 0 or self.min_length > self.max_length:
            raise ValueError(
                f"Invalid length bounds: min={self.min_length}, max={self.max_length}"
            )

    def validate(self, value: str, field_label: str) -> None:
        if not value:
            return

        if not self.min_length <= len(value) <= self.max_length:
            raise self.fail(
                field_label,
                f"must be between {self.min_length} and {self.max_length} characters",
            )

    @property
    def rule_type(self) -> str:
        return "length_range"
