"""
Core data models for the device-condition record store.

All models use Pydantic for runtime validation and type safety.
"""

from .persist_result import PersistResult, StoreState
from .rule_definition import RuleDefinition
from .validated_record import ValidatedRecord
from .validation_outcome import ValidationOutcome, ValidationReport

__all__ = [
    "RuleDefinition",
    "ValidationOutcome",
    "ValidationReport",
    "ValidatedRecord",
    "PersistResult",
    "StoreState",
]
