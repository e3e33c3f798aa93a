"""
RuleDefinition model representing one configurable rule in a field's chain.
"""

from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

RuleType = Literal["required", "length_range", "regex", "float_range", "int_range", "enum_value"]


class RuleDefinition(BaseModel):
    """
    A configurable rule applied to one field.

    Attributes:
        rule_name: Human-readable name ("operator_id_required")
        rule_type: One of the tagged variants: "required", "length_range",
            "regex", "float_range", "int_range", "enum_value"
        field_name: Which field this rule applies to
        parameters: Rule-specific params (e.g., {"min": 0, "max": 100})
        enabled: Whether rule is active
    """

    rule_name: str = Field(..., min_length=1)
    rule_type: RuleType
    field_name: str = Field(..., min_length=1)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True

    model_config = {
        "json_schema_extra": {
            "example": {
                "rule_name": "voltage_float_range",
                "rule_type": "float_range",
                "field_name": "voltage",
                "parameters": {"min": 0, "max": 10000},
                "enabled": True,
            }
        }
    }
