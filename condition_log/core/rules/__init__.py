"""
Field rule engine and configuration management.
"""

from .default_rules import device_condition_rules
from .rule_config import ConfigurationError, RuleConfigBuilder, RuleConfigLoader
from .rule_engine import RuleEngine

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "ConfigurationError",
    "device_condition_rules",
]
