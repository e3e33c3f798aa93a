"""
The fixed field set of a device-condition record and its on-disk column orders.
"""

from typing import Any, Mapping

# Record fields in form order
FIELD_NAMES: tuple[str, ...] = (
    "operator_id",
    "instance_id",
    "app_version",
    "device_id",
    "device_name",
    "status",
    "action_type",
    "voltage",
    "temperature",
    "severity",
    "ui_latency_ms",
    "notes",
)

FIELD_LABELS: dict[str, str] = {
    "operator_id": "Operator ID",
    "instance_id": "Instance ID",
    "app_version": "App Version",
    "device_id": "Device ID",
    "device_name": "Device Name",
    "status": "Status",
    "action_type": "Action Type",
    "voltage": "Voltage",
    "temperature": "Temperature",
    "severity": "Severity",
    "ui_latency_ms": "UI Latency",
    "notes": "Notes",
}

# Names a form layer may use instead of the snake_case keys
FIELD_ALIASES: dict[str, str] = {
    "operatorId": "operator_id",
    "instanceId": "instance_id",
    "appVersion": "app_version",
    "deviceId": "device_id",
    "deviceName": "device_name",
    "actionType": "action_type",
    "uiLatencyMs": "ui_latency_ms",
    "uiLatency": "ui_latency_ms",
}

STATUS_VALUES = ("Unknown", "Online", "Offline", "Degraded")
ACTION_TYPE_VALUES = ("Check", "Maintenance", "Repair", "Replace")
SEVERITY_VALUES = ("Low", "Medium", "High", "Critical")

FORM_DEFAULTS: dict[str, str] = {
    **{name: "" for name in FIELD_NAMES},
    "app_version": "1.0.0",
    "status": STATUS_VALUES[0],
    "action_type": ACTION_TYPE_VALUES[0],
    "severity": SEVERITY_VALUES[0],
    "ui_latency_ms": "0",
}

CSV_COLUMNS: tuple[str, ...] = ("uuid", "created_at") + FIELD_NAMES
CSV_HEADER = ",".join(CSV_COLUMNS)

JSON_KEYS: tuple[str, ...] = (
    "uuid",
    "created_at",
    "device_id",
    "device_name",
    "status",
    "voltage",
    "temperature",
    "comment",
)


def normalize_field_map(field_map: Mapping[str, Any]) -> dict[str, str]:
    """
    Map a raw field map onto the fixed field set.

    camelCase aliases are folded onto their snake_case keys, missing fields
    become empty strings, None becomes "" and unknown keys are dropped.

    Args:
        field_map: Field name -> raw value, as supplied by the form

    Returns:
        A dict holding exactly FIELD_NAMES
    """
    normalized = {name: "" for name in FIELD_NAMES}
    for key, value in field_map.items():
        name = FIELD_ALIASES.get(key, key)
        if name in normalized:
            normalized[name] = "" if value is None else str(value)
    return normalized


def field_label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, field_name)
