"""
RequiredFieldValidator - ensures a field was supplied.
"""

from typing import Any, Dict
from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is not empty.

    Fails if the value is None or the empty string. Whitespace-only values
    count as supplied unless ``allow_blank`` is False.
    """

    def __init__(self, field_name: str, parameters: Dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_blank = self.parameters.get("allow_blank", True)

    def validate(self, value: str, field_label: str) -> None:
        """
        Validate that the field holds a value.

        Args:
            value: The raw string value
            field_label: Label used in the failure message

        Raises:
            ValidationError: If the value is empty
        """
        if value is None or value == "":
            raise self.fail(field_label, "is required")

        if not self.allow_blank and value.strip() == "":
            raise self.fail(field_label, "is required")

    @property
    def rule_type(self) -> str:
        return "required"
