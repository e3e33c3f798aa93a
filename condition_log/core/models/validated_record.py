"""
ValidatedRecord model: a device-condition record that passed every rule.
"""

from pydantic import BaseModel, ConfigDict, Field

from condition_log.core.fields import CSV_COLUMNS, FIELD_NAMES

UUID_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
TIMESTAMP_PATTERN = r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"


class ValidatedRecord(BaseModel):
    """
    One device-condition observation, stamped with its identity.

    Immutable once constructed. Only built by the record store after the
    field map passed validation; the values are kept as the operator typed
    them so both sinks store the original text.

    Attributes:
        record_id: UUID string (lowercase, 8-4-4-4-12)
        created_at: Local timestamp, YYYY-MM-DD HH:MM:SS
        operator_id ... notes: The raw field values
    """

    model_config = ConfigDict(frozen=True)

    record_id: str = Field(..., pattern=UUID_PATTERN)
    created_at: str = Field(..., pattern=TIMESTAMP_PATTERN)
    operator_id: str
    instance_id: str = ""
    app_version: str = ""
    device_id: str
    device_name: str = ""
    status: str
    action_type: str
    voltage: str = ""
    temperature: str = ""
    severity: str = ""
    ui_latency_ms: str = ""
    notes: str = ""

    @classmethod
    def from_fields(cls, fields: dict[str, str], record_id: str, created_at: str) -> "ValidatedRecord":
        return cls(
            record_id=record_id,
            created_at=created_at,
            **{name: fields.get(name, "") for name in FIELD_NAMES},
        )

    def field_values(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def csv_cells(self) -> list[str]:
        """The 14 cells of this record's CSV row, in column order."""
        values = {"uuid": self.record_id, "created_at": self.created_at, **self.field_values()}
        return [values[column] for column in CSV_COLUMNS]

    def json_object(self) -> dict[str, str]:
        """The JSON view of this record; ``comment`` carries the notes."""
        return {
            "uuid": self.record_id,
            "created_at": self.created_at,
            "device_id": self.device_id,
            "device_name": self.device_name,
            "status": self.status,
            "voltage": self.voltage,
            "temperature": self.temperature,
            "comment": self.notes,
        }
