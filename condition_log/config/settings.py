"""
Runtime settings for the record store.

Values come from constructor arguments or from CONDITION_LOG_* environment
variables, optionally loaded from a .env file.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from condition_log.core.models import RuleDefinition
from condition_log.core.rules import RuleConfigLoader, device_condition_rules

SINK_NAMES = ("csv", "json")


class Settings(BaseModel):
    """
    Record store configuration.

    Attributes:
        destination_dir: Base directory for both the CSV and the JSON sink
        csv_filename: CSV log file name inside destination_dir
        json_filename: JSON document file name inside destination_dir
        sinks: Sinks each persisted record is written to, in write order
        rules_path: Optional YAML rule file replacing the built-in rule chains
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "text"
        log_file: Optional file that receives log lines in addition to stdout
    """

    destination_dir: Path = Path("data")
    csv_filename: str = Field("devices.csv", min_length=1)
    json_filename: str = Field("devices.json", min_length=1)
    sinks: tuple[str, ...] = SINK_NAMES
    rules_path: Path | None = None
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None

    @field_validator("sinks", mode="before")
    @classmethod
    def parse_sinks(cls, v):
        """Accept a comma-separated string and check every sink name."""
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        sinks = tuple(v)
        if not sinks:
            raise ValueError("At least one sink must be configured")
        unknown = [sink for sink in sinks if sink not in SINK_NAMES]
        if unknown:
            raise ValueError(f"Unknown sink(s): {unknown}. Must be among {list(SINK_NAMES)}")
        if len(set(sinks)) != len(sinks):
            raise ValueError(f"Duplicate sinks: {list(sinks)}")
        return sinks

    @field_validator("csv_filename", "json_filename")
    @classmethod
    def check_plain_filename(cls, v):
        if Path(v).name != v:
            raise ValueError(f"'{v}' must be a file name, not a path")
        return v

    @property
    def csv_path(self) -> Path:
        return self.destination_dir / self.csv_filename

    @property
    def json_path(self) -> Path:
        return self.destination_dir / self.json_filename

    def load_rules(self) -> list[RuleDefinition]:
        """Rule chains from rules_path, or the built-in device-condition chains."""
        if self.rules_path is not None:
            return RuleConfigLoader(self.rules_path).load_rules()
        return device_condition_rules()

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides) -> "Settings":
        """
        Build settings from the environment.

        Args:
            env_file: .env file to load first (defaults to ./.env if present);
                      variables already set in the environment win
            **overrides: Explicit values that take precedence over the environment

        Returns:
            Settings instance
        """
        load_dotenv(env_file or Path.cwd() / ".env", override=False)

        values = {
            "destination_dir": os.getenv("CONDITION_LOG_DEST_DIR"),
            "csv_filename": os.getenv("CONDITION_LOG_CSV_FILE"),
            "json_filename": os.getenv("CONDITION_LOG_JSON_FILE"),
            "sinks": os.getenv("CONDITION_LOG_SINKS"),
            "rules_path": os.getenv("CONDITION_LOG_RULES"),
            "log_level": os.getenv("LOG_LEVEL"),
            "log_format": os.getenv("LOG_FORMAT"),
            "log_file": os.getenv("LOG_FILE"),
        }
        values = {key: value for key, value in values.items() if value}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
