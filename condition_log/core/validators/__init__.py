"""
Field rule implementations.

Provides validators for required fields, length ranges, regex patterns,
numeric ranges and enumerated values.
"""

from .base_validator import BaseValidator, ValidationError
from .enum_validator import EnumValueValidator
from .length_validator import LengthRangeValidator
from .range_validator import FloatRangeValidator, IntRangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "LengthRangeValidator",
    "RegexValidator",
    "FloatRangeValidator",
    "IntRangeValidator",
    "EnumValueValidator",
]
