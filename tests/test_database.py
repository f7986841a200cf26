"""Unit tests for engine setup and runtime configuration parsing."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

import models
from database import parse_bool
from errors import ConfigError, IngestError
from logging_config import configure_logging


def test_init_db_creates_every_table(engine) -> None:
    tables = set(inspect(engine).get_table_names())

    assert tables == {
        "Travelers", "Trip_Tracker", "CSA", "Incident", "Buildings",
        "Lease_Info", "Central_Records", "form_submissions",
    }


def test_sqlite_engine_enforces_foreign_keys(db) -> None:
    """Incident rows must reference an existing CSA."""
    db.add(models.Incident(csa_id=999, incident_type="Chute", location="Hall", date_reported=date.today()))

    with pytest.raises(IntegrityError):
        db.commit()


@pytest.mark.parametrize("raw_value, expected", [("true", True), ("1", True), ("Off", False), ("", False)])
def test_parse_bool_accepts_common_values(raw_value: str, expected: bool) -> None:
    assert parse_bool("FORMS_SQL_ECHO", raw_value) is expected


def test_parse_bool_rejects_garbage() -> None:
    with pytest.raises(ConfigError):
        parse_bool("FORMS_SQL_ECHO", "peut-être")


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ConfigError):
        configure_logging("BAVARD")


def test_config_error_is_not_an_ingest_error() -> None:
    """Misconfiguration must not be swallowed by ingestion error handlers."""
    assert not issubclass(ConfigError, IngestError)
