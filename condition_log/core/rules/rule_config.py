"""
Rule configuration management.

Loads field rule chains from YAML files and provides utilities
for building them programmatically.
"""

from pathlib import Path
from typing import Any

import yaml

from condition_log.core.models import RuleDefinition


class ConfigurationError(ValueError):
    """Raised when a rule configuration is invalid."""


class RuleConfigLoader:
    """
    Loads field rule chains from YAML configuration files.

    Rules are listed per field in evaluation order. Expected YAML format:
    ```yaml
    rules:
      operator_id:
        - type: required
        - type: length_range
          params:
            min: 1
            max: 64
        - type: regex
          params:
            pattern: "^[A-Za-z0-9_.-]+$"

      voltage:
        - type: float_range
          params:
            min: 0
            max: 10000
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[RuleDefinition]:
        """
        Load and parse field rules from the YAML file.

        Returns:
            List of rule definitions suitable for RuleEngine, in file order

        Raises:
            ConfigurationError: If YAML is invalid or missing required fields
        """
        with open(self.config_path, encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}")

        if not config or "rules" not in config:
            raise ConfigurationError("Configuration file must contain 'rules' section")

        field_rules = config["rules"] or {}
        if not isinstance(field_rules, dict):
            raise ConfigurationError("'rules' section must map field names to rule lists")

        rules = []
        for field_name, field_rule_list in field_rules.items():
            # A field listed with no rules always validates
            if field_rule_list is None:
                continue
            if not isinstance(field_rule_list, list):
                raise ConfigurationError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(field_name, rule_def, idx))

        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> RuleDefinition:
        """
        Parse a single rule definition.

        Args:
            field_name: The field this rule applies to
            rule_def: The rule definition from YAML
            idx: Index of this rule for the field (for naming)

        Returns:
            Parsed rule definition

        Raises:
            ConfigurationError: If rule definition is invalid
        """
        if not isinstance(rule_def, dict) or "type" not in rule_def:
            raise ConfigurationError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        rule_name = rule_def.get("name", f"{field_name}_{rule_type}_{idx}")
        parameters = rule_def.get("params", rule_def.get("parameters")) or {}

        try:
            return RuleDefinition(
                rule_name=rule_name,
                rule_type=rule_type,
                field_name=field_name,
                parameters=parameters,
                enabled=rule_def.get("enabled", True),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid rule '{rule_name}': {e}")


class RuleConfigBuilder:
    """
    Programmatically build rule chains (for defaults, testing or dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[RuleDefinition] = []

    def _add(self, field_name: str, rule_type: str, parameters: dict[str, Any]) -> "RuleConfigBuilder":
        self.rules.append(RuleDefinition(
            rule_name=f"{field_name}_{rule_type}",
            rule_type=rule_type,
            field_name=field_name,
            parameters=parameters,
        ))
        return self

    def add_required(self, field_name: str) -> "RuleConfigBuilder":
        """Add a required rule."""
        return self._add(field_name, "required", {})

    def add_length_range(self, field_name: str, min_length: int, max_length: int) -> "RuleConfigBuilder":
        """Add a length range rule."""
        return self._add(field_name, "length_range", {"min": min_length, "max": max_length})

    def add_regex(self, field_name: str, pattern: str) -> "RuleConfigBuilder":
        """Add a regex rule."""
        return self._add(field_name, "regex", {"pattern": pattern})

    def add_float_range(self, field_name: str, min_value: float, max_value: float) -> "RuleConfigBuilder":
        """Add a real-number range rule."""
        return self._add(field_name, "float_range", {"min": min_value, "max": max_value})

    def add_int_range(self, field_name: str, min_value: int, max_value: int) -> "RuleConfigBuilder":
        """Add an integer range rule."""
        return self._add(field_name, "int_range", {"min": min_value, "max": max_value})

    def add_enum_value(self, field_name: str, allowed: list[str] | tuple[str, ...]) -> "RuleConfigBuilder":
        """Add an enumerated value rule."""
        return self._add(field_name, "enum_value", {"allowed": list(allowed)})

    def build(self) -> list[RuleDefinition]:
        """Build and return the rule configuration."""
        return list(self.rules)
