# ingestion.py
"""
Ingestion des formulaires (voyage, bâtiment, incident).

Déroulement commun aux trois formulaires :
1. La soumission est inscrite 'pending' dans form_submissions (commit séparé,
   pour que la ligne survive à un rollback).
2. Les écritures métier + la ligne Central_Records + le passage à 'processed'
   forment une seule transaction.
3. En cas d'échec : rollback complet des écritures métier, puis passage à
   'error' avec le vrai message d'erreur.
"""

from datetime import date
from typing import Callable

from sqlalchemy import func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import ledger
import models
from errors import (
    ConfigError,
    ConstraintViolationError,
    DuplicateSubmissionError,
    SubmissionValidationError,
)
from logging_config import get_logger

TRAVEL_FORM = "travel_form"
BUILDING_FORM = "building_form"
INCIDENT_FORM = "incident_form"

logger = get_logger(__name__)


# === FORMULAIRE DE VOYAGE ===
def submit_travel(
    db: Session,
    response_id: str,
    source,
    name: str,
    email: str,
    department: str,
    destination: str,
    start_date: date,
    end_date: date,
    purpose: str,
) -> models.FormSubmission:
    """Enregistre un voyage : upsert du voyageur par email, puis le voyage."""

    def write_entities():
        traveler_id = upsert_traveler(db, name, email, department)
        trip = models.TripTracker(
            traveler_id=traveler_id,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            purpose=purpose,
        )
        db.add(trip)
        db.flush()
        _add_central_record(db, models.RecordType.TRAVEL, traveler_id=traveler_id, trip_id=trip.trip_id)

    return _process(db, response_id, TRAVEL_FORM, source, write_entities)


# === FORMULAIRE DE BÂTIMENT ===
def submit_building(
    db: Session,
    response_id: str,
    source,
    name: str,
    address: str,
    total_rooms: int,
) -> models.FormSubmission:
    """Enregistre un bâtiment (toujours une nouvelle ligne, pas de dédoublonnage)."""

    def write_entities():
        building = models.Building(name=name, address=address, total_rooms=total_rooms)
        db.add(building)
        db.flush()
        _add_central_record(db, models.RecordType.BUILDING, building_id=building.building_id)

    return _process(db, response_id, BUILDING_FORM, source, write_entities)


# === FORMULAIRE D'INCIDENT ===
def submit_incident(
    db: Session,
    response_id: str,
    source,
    staff_id: int,
    incident_type: str,
    location: str,
) -> models.FormSubmission:
    """Enregistre un incident daté du jour ; le CSA doit déjà exister."""
    if staff_id is None or db.get(models.CSA, staff_id) is None:
        db.rollback()
        logger.warning("submission_rejected", response_id=response_id,
                       form_name=INCIDENT_FORM, staff_id=staff_id)
        raise SubmissionValidationError(f"CSA_ID invalide: {staff_id}")

    def write_entities():
        incident = models.Incident(
            csa_id=staff_id,
            incident_type=incident_type,
            location=location,
            date_reported=date.today(),
        )
        db.add(incident)
        db.flush()
        _add_central_record(db, models.RecordType.INCIDENT, csa_id=staff_id, incident_id=incident.incident_id)

    return _process(db, response_id, INCIDENT_FORM, source, write_entities)


def upsert_traveler(db: Session, name: str, email: str, department: str) -> int:
    """
    Insère ou met à jour (nom, département) le voyageur identifié par son email
    et retourne son traveler_id, en une seule requête.
    """
    table = models.Traveler.__table__
    values = {"name": name, "email": normalize_email(email), "department": department}
    dialect = db.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.email],
            set_={"name": stmt.excluded.name, "department": stmt.excluded.department},
        ).returning(table.c.traveler_id)
        return db.execute(stmt).scalar_one()

    if dialect in ("mysql", "mariadb"):
        # LAST_INSERT_ID(expr) fait remonter l'id existant en cas de doublon
        stmt = mysql.insert(table).values(**values)
        stmt = stmt.on_duplicate_key_update(
            name=stmt.inserted.name,
            department=stmt.inserted.department,
            traveler_id=func.last_insert_id(table.c.traveler_id),
        )
        return db.execute(stmt).lastrowid

    raise ConfigError(f"Dialecte SQL non supporté pour l'upsert des voyageurs: {dialect}")


def _add_central_record(db: Session, record_type: models.RecordType, **refs) -> models.CentralRecord:
    record = models.CentralRecord(record_date=date.today(), record_type=record_type, **refs)
    db.add(record)
    db.flush()
    return record


def _process(
    db: Session,
    response_id: str,
    form_name: str,
    source,
    write_entities: Callable[[], None],
) -> models.FormSubmission:
    log = logger.bind(response_id=response_id, form_name=form_name)

    try:
        ledger.begin_submission(db, response_id, form_name, source)
    except DuplicateSubmissionError:
        db.rollback()
        log.warning("submission_duplicate")
        raise
    db.commit()
    log.info("submission_received", source_type=source.kind)

    try:
        write_entities()
        submission = ledger.mark_processed(db, response_id)
        db.commit()
        db.refresh(submission)
    except Exception as error:
        db.rollback()
        message = _error_text(error)
        ledger.mark_error(db, response_id, message)
        db.commit()
        log.error("submission_failed", error=message)
        if isinstance(error, SQLAlchemyError):
            raise ConstraintViolationError(response_id, message) from error
        raise

    log.info("submission_processed")
    return submission


def _error_text(error: Exception) -> str:
    # Message du driver (ex: "NOT NULL constraint failed: Travelers.name")
    original = getattr(error, "orig", None)
    text = str(original) if original is not None else str(error)
    return text or type(error).__name__


def normalize_email(email):
    """Email en minuscules sans espaces ; None si vide (rejeté par le NOT NULL)."""
    if email is None:
        return None
    return email.strip().lower() or None
