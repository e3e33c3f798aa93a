"""
Numeric range validators for raw string input.

FloatRangeValidator parses a real number, IntRangeValidator a decimal integer.
Both report an unparsable value separately from an out-of-range one.
"""

import math
import re
from abc import abstractmethod
from typing import Any

from .base_validator import BaseValidator, format_bound

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class _NumericRangeValidator(BaseValidator):
    """
    Shared bounds handling for the numeric validators.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    """

    not_a_number_message = "must be a valid number"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        if "min" not in self.parameters or "max" not in self.parameters:
            raise ValueError(f"{self.__class__.__name__} requires 'min' and 'max' parameters")

        self.min_value = self._parse_bound(self.parameters["min"])
        self.max_value = self._parse_bound(self.parameters["max"])

        if self.min_value > self.max_value:
            raise ValueError(f"Invalid range: min={self.min_value} exceeds max={self.max_value}")

    def _parse_bound(self, bound: Any) -> float:
        return float(bound)

    @abstractmethod
    def _parse(self, value: str) -> float:
        """Parse the raw value, raising ValueError if it is not a number of this kind."""

    def validate(self, value: str, field_label: str) -> None:
        """
        Validate that the value parses and lies within [min, max].

        Raises:
            ValidationError: If the value is unparsable or outside the range
        """
        if not value:
            return

        try:
            number = self._parse(value)
        except ValueError:
            raise self.fail(field_label, self.not_a_number_message)

        if not self.min_value <= number <= self.max_value:
            raise self.fail(
                field_label,
                f"must be between {format_bound(self.min_value)} and {format_bound(self.max_value)}",
            )


class FloatRangeValidator(_NumericRangeValidator):
    """Validates that a value is a finite real number within [min, max]."""

    def _parse(self, value: str) -> float:
        if not _DECIMAL_PATTERN.fullmatch(value):
            raise ValueError(f"Not a decimal number: {value}")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Non-finite number: {value}")
        return number

    @property
    def rule_type(self) -> str:
        return "float_range"


class IntRangeValidator(_NumericRangeValidator):
    """Validates that a value is a decimal integer within [min, max]."""

    not_a_number_message = "must be a valid integer"

    def _parse_bound(self, bound: Any) -> float:
        return int(bound)

    def _parse(self, value: str) -> float:
        if not _INTEGER_PATTERN.fullmatch(value):
            raise ValueError(f"Not an integer: {value}")
        return int(value)

    @property
    def rule_type(self) -> str:
        return "int_range"
