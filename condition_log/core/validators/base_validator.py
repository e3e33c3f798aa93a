"""
Base validator interface for all field rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a field rule fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements one tagged rule variant
    (required, length_range, regex, float_range, int_range, enum_value).
    Validators receive the raw string exactly as the operator typed it;
    every rule except ``required`` treats the empty string as "not supplied"
    and passes it.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Key of the field to validate
            parameters: Rule-specific parameters (e.g., min/max for ranges)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: str, field_label: str) -> None:
        """
        Validate a raw value against this rule.

        Args:
            value: The raw string value
            field_label: Human-readable field name used in the failure message

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def fail(self, field_label: str, message: str) -> ValidationError:
        return ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=f"{field_label} {message}",
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"


def format_bound(value: float) -> str:
    """Render a numeric bound in its shortest form (0, 10000, -50, 0.5)."""
    return f"{value:g}"
