"""
Pytest configuration and fixtures for condition-log tests

This module provides shared fixtures for unit and integration tests.
"""
import logging
from typing import Generator

import pytest

from condition_log.config import Settings
from condition_log.store import RecordStore


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't touch the filesystem"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that write real CSV/JSON files under tmp_path"
    )


# =======================
# LOGGING FIXTURES
# =======================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """
    Undo any setup_logger call made during a test

    setup_logger stops propagation at the package logger, which would hide
    later records from caplog.
    """
    yield
    package_logger = logging.getLogger("condition_log")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# =======================
# FIELD MAP FIXTURES
# =======================

@pytest.fixture
def valid_field_map() -> dict[str, str]:
    """
    A submission that passes every built-in rule

    Uses the camelCase names a form layer sends; instance ID and app version
    are left empty because their rules only constrain supplied values.
    """
    return {
        "operatorId": "op_1",
        "instanceId": "",
        "appVersion": "",
        "deviceId": "dev-42",
        "deviceName": "Pump A",
        "status": "Online",
        "actionType": "Check",
        "voltage": "12.3",
        "temperature": "36.5",
        "severity": "Low",
        "uiLatency": "5",
        "notes": "",
    }


# =======================
# STORE FIXTURES
# =======================

@pytest.fixture
def dest_dir(tmp_path):
    """Destination directory that does not exist yet (the sinks create it)"""
    return tmp_path / "records" / "nested"


@pytest.fixture
def settings(dest_dir) -> Settings:
    return Settings(destination_dir=dest_dir)


@pytest.fixture
def store(settings) -> Generator[RecordStore, None, None]:
    """
    Record store writing to both sinks under a temporary directory

    Yields:
        RecordStore, closed after the test
    """
    with RecordStore(settings) as record_store:
        yield record_store


# =======================
# ENVIRONMENT FIXTURES
# =======================

SETTINGS_ENV_VARS = (
    "CONDITION_LOG_DEST_DIR",
    "CONDITION_LOG_CSV_FILE",
    "CONDITION_LOG_JSON_FILE",
    "CONDITION_LOG_SINKS",
    "CONDITION_LOG_RULES",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Unset every settings variable and run from an empty directory

    Returns:
        The temporary working directory
    """
    for name in SETTINGS_ENV_VARS:
        # setenv first so monkeypatch restores the original state, including
        # anything load_dotenv writes during the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
