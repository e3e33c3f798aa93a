"""
ValidationOutcome and ValidationReport models (ephemeral, never persisted).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValidationOutcome(BaseModel):
    """
    Result of running one field's rule chain.

    Attributes:
        is_valid: Whether every rule in the chain passed
        message: Message of the first failing rule, if any
        rule_type: Type of the first failing rule, if any
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    message: str | None = None
    rule_type: str | None = None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, rule_type: str | None = None) -> "ValidationOutcome":
        return cls(is_valid=False, message=message, rule_type=rule_type)


class ValidationReport(BaseModel):
    """
    Outcome of validating a whole field map.

    Attributes:
        ok: True when no field failed
        outcomes: One outcome per validated field
        messages_by_field: Message to display next to each failing field
    """

    ok: bool
    outcomes: dict[str, ValidationOutcome] = Field(default_factory=dict)
    messages_by_field: dict[str, str] = Field(default_factory=dict)

    @field_validator("messages_by_field")
    @classmethod
    def check_ok_consistency(cls, v, info):
        """Validate that ok=True implies there are no messages."""
        if info.data.get("ok") and len(v) > 0:
            raise ValueError("ok=True but messages_by_field is not empty")
        return v

    @classmethod
    def from_outcomes(cls, outcomes: dict[str, ValidationOutcome]) -> "ValidationReport":
        messages = {
            field: outcome.message or ""
            for field, outcome in outcomes.items()
            if not outcome.is_valid
        }
        return cls(ok=not messages, outcomes=outcomes, messages_by_field=messages)

    def failed_rules(self) -> dict[str, str]:
        """Field name -> type of the rule that rejected it."""
        return {
            field: outcome.rule_type or "unknown"
            for field, outcome in self.outcomes.items()
            if not outcome.is_valid
        }
