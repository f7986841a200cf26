"""Unit tests for staff/lease registration and read helpers."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

import directory
import ingestion
from errors import SubmissionValidationError
from models import RecordType


def test_register_staff_defaults_assignment_to_today(db) -> None:
    staff = directory.register_staff(db, "Luc Gagnon", department="Sécurité", email="luc@example.org")

    assert staff.csa_id is not None
    assert staff.date_assigned == date.today()
    assert [member.name for member in directory.list_staff(db)] == ["Luc Gagnon"]


def test_register_lease_requires_existing_building(db) -> None:
    """Leases can only be attached to a known building."""
    with pytest.raises(SubmissionValidationError):
        directory.register_lease(db, 42, date(2026, 1, 1), date(2026, 12, 31), "Actif")


def test_register_lease_on_ingested_building(db, sheet) -> None:
    ingestion.submit_building(db, "R_bld1", sheet, "Pavillon A", "555 boul.", 40)
    building = directory.list_buildings(db)[0]

    lease = directory.register_lease(db, building.building_id, date(2026, 1, 1), date(2026, 12, 31), "Actif")

    assert lease.building_id == building.building_id
    assert [item.lease_id for item in building.leases] == [lease.lease_id]


def test_get_traveler_trips_unknown_traveler_returns_none(db) -> None:
    assert directory.get_traveler_trips(db, 1) is None


def test_get_traveler_trips_orders_by_start_date(db, survey) -> None:
    for response_id, start in (("R_2", date(2026, 5, 1)), ("R_1", date(2026, 2, 1))):
        ingestion.submit_travel(
            db, response_id, survey, "Alex", "alex@example.org", "TI",
            "Ottawa", start, start + timedelta(days=2), None,
        )
    traveler = directory.list_travelers(db)[0]

    trips = directory.get_traveler_trips(db, traveler.traveler_id)

    assert [trip.start_date for trip in trips] == [date(2026, 2, 1), date(2026, 5, 1)]


def test_list_central_records_filters_type_and_dates(db, survey, sheet) -> None:
    """Rollup listing should filter by record type and record date."""
    staff = directory.register_staff(db, "Luc Gagnon")
    ingestion.submit_building(db, "R_bld1", sheet, "Pavillon A", "555 boul.", 40)
    ingestion.submit_incident(db, "R_inc1", survey, staff.csa_id, "Chute", "Hall B")
    today = date.today()

    incidents = directory.list_central_records(db, record_type=RecordType.INCIDENT)
    in_range = directory.list_central_records(db, start_date=today, end_date=today)
    future = directory.list_central_records(db, start_date=today + timedelta(days=1))

    assert [record.record_type for record in incidents] == [RecordType.INCIDENT]
    assert len(in_range) == 2
    assert future == []
