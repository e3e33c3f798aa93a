"""
Rule chains for the device-condition form.
"""

from condition_log.core.fields import ACTION_TYPE_VALUES, SEVERITY_VALUES, STATUS_VALUES
from condition_log.core.models import RuleDefinition

from .rule_config import RuleConfigBuilder

OPERATOR_ID_PATTERN = r"^[A-Za-z0-9_.-]+$"


def device_condition_rules() -> list[RuleDefinition]:
    return (
        RuleConfigBuilder()
        .add_required("operator_id")
        .add_length_range("operator_id", 1, 64)
        .add_regex("operator_id", OPERATOR_ID_PATTERN)
        .add_length_range("instance_id", 1, 64)
        .add_length_range("app_version", 0, 32)
        .add_required("device_id")
        .add_length_range("device_name", 0, 128)
        .add_required("status")
        .add_enum_value("status", STATUS_VALUES)
        .add_required("action_type")
        .add_enum_value("action_type", ACTION_TYPE_VALUES)
        .add_float_range("voltage", 0.0, 10000.0)
        .add_float_range("temperature", -50.0, 250.0)
        .add_enum_value("severity", SEVERITY_VALUES)
        .add_int_range("ui_latency_ms", 0, 600000)
        .add_length_range("notes", 0, 500)
        .build()
    )
