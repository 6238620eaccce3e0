"""Pytest configuration and shared fixtures.

.lp_env (optional) is loaded FIRST with override=True so a developer can point
the suite at alternative policy files without touching the shell environment.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

_LP_ENV_FILE = Path(__file__).parent.parent / ".lp_env"
if _LP_ENV_FILE.exists():
    load_dotenv(_LP_ENV_FILE, override=True)

from datetime import date
from typing import Any, Dict

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Reference date for every age / expiry assertion in the suite.
TODAY = date(2021, 6, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def config_dir() -> Path:
    return CONFIG_DIR


@pytest.fixture
def raw_customer() -> Dict[str, Any]:
    """A complete registration payload as a partner sends it."""
    return {
        "firstName": "Lewis",
        "middleName": "Fastest",
        "lastName": "Hamilton",
        "dob": "1974-08-22",
        "gender": "",
        "email": "example@gmail.com",
        "phone": "780-555-1212",
        "street": "11535 74 Ave.",
        "city": "Edmonton",
        "province": "AB",
        "country": "",
        "postalCode": "T6G0G9",
        "barcode": "21221012345678",
        "pin": "IlikeBread",
        "type": "MAC-DSSTUD",
        "expiry": "2021-08-22",
        "careOf": "Doe, John",
        "branch": "",
        "status": "OK",
        "notes": "Hi",
    }


@pytest.fixture
def library_policy() -> Dict[str, Any]:
    return {
        "name": "EPL",
        "required": ["firstName", "lastName", "barcode", "pin"],
        "branch": {"default": "EPLMNA", "valid": ["EPLMNA", "EPLCLV"]},
        "expiry": {"days": 365},
    }


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests without external resources")
