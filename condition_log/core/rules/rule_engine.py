"""
Rule engine evaluating field rule chains over a raw field map.

Each field owns an ordered chain of rules. The chain stops at the first
failing rule, and only that rule's message is reported for the field.
"""

from typing import Any, Iterable, Mapping

from condition_log.core.fields import FIELD_NAMES, field_label
from condition_log.core.models import RuleDefinition, ValidationOutcome, ValidationReport
from condition_log.core.validators import (
    BaseValidator,
    EnumValueValidator,
    FloatRangeValidator,
    IntRangeValidator,
    LengthRangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    ValidationError,
)

from .rule_config import ConfigurationError


class RuleEngine:
    """
    Interprets rule definitions over raw string input.

    Builds one validator per enabled rule, grouped by field in definition
    order, and evaluates them with short-circuit semantics per field.
    """

    VALIDATOR_REGISTRY = {
        "required": RequiredFieldValidator,
        "length_range": LengthRangeValidator,
        "regex": RegexValidator,
        "float_range": FloatRangeValidator,
        "int_range": IntRangeValidator,
        "enum_value": EnumValueValidator,
    }

    def __init__(self, rules: Iterable[RuleDefinition | dict[str, Any]]):
        """
        Initialize the rule engine.

        Args:
            rules: Rule definitions (models or plain dicts with rule_name,
                   rule_type, field_name, parameters, enabled)

        Raises:
            ConfigurationError: If a rule type is unknown or its parameters are invalid
        """
        self.rules = [self._coerce(rule) for rule in rules]
        self.chains: dict[str, list[tuple[str, BaseValidator]]] = {}
        self._build_validators()

    @staticmethod
    def _coerce(rule: RuleDefinition | dict[str, Any]) -> RuleDefinition:
        if isinstance(rule, RuleDefinition):
            return rule
        try:
            return RuleDefinition(**rule)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid rule definition {rule!r}: {e}")

    def _build_validators(self) -> None:
        """Build validator instances from rule definitions."""
        for rule in self.rules:
            if not rule.enabled:
                continue

            validator_class = self.VALIDATOR_REGISTRY.get(rule.rule_type)
            if not validator_class:
                raise ConfigurationError(f"Unknown rule type: {rule.rule_type}")

            try:
                validator = validator_class(rule.field_name, rule.parameters)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Failed to create validator for rule '{rule.rule_name}': {e}")

            self.chains.setdefault(rule.field_name, []).append((rule.rule_name, validator))

    def validate_field(self, field_name: str, value: str, label: str | None = None) -> ValidationOutcome:
        """
        Run one field's chain over a raw value.

        Args:
            field_name: Field key
            value: Raw string value
            label: Label for messages (defaults to the field's form label)

        Returns:
            ValidationOutcome of the first failing rule, or valid
        """
        label = label or field_label(field_name)
        for _, validator in self.chains.get(field_name, []):
            try:
                validator.validate(value, label)
            except ValidationError as e:
                return ValidationOutcome.invalid(e.message, rule_type=e.rule_name)
        return ValidationOutcome.valid()

    def validate(self, field_map: Mapping[str, str]) -> ValidationReport:
        """
        Validate every field of a normalized field map.

        Fields with no rules always validate. Fields that have rules but are
        absent from the map are validated as the empty string.

        Args:
            field_map: Field key -> raw string value

        Returns:
            ValidationReport with one outcome per field
        """
        field_names = list(field_map)
        field_names += [name for name in self.chains if name not in field_map]

        outcomes = {
            name: self.validate_field(name, field_map.get(name) or "")
            for name in field_names
        }
        return ValidationReport.from_outcomes(outcomes)

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and per-field chains
        """
        return {
            "total_rules": sum(len(chain) for chain in self.chains.values()),
            "rules_by_type": self._count_by_type(),
            "chains": {
                field: [validator.rule_type for _, validator in chain]
                for field, chain in self.chains.items()
            },
            "unconstrained_fields": [name for name in FIELD_NAMES if name not in self.chains],
        }

    def _count_by_type(self) -> dict[str, int]:
        """Count validators by rule type."""
        counts: dict[str, int] = {}
        for chain in self.chains.values():
            for _, validator in chain:
                counts[validator.rule_type] = counts.get(validator.rule_type, 0) + 1
        return counts
