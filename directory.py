# directory.py
"""
Référentiel : enregistrement du personnel (CSA) et des baux, et lecture des
tables alimentées par les formulaires.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

import models
from errors import SubmissionValidationError
from logging_config import get_logger

logger = get_logger(__name__)


def register_staff(
    db: Session,
    name: str,
    department: Optional[str] = None,
    email: Optional[str] = None,
    date_assigned: Optional[date] = None,
) -> models.CSA:
    """Crée un membre du personnel, affecté aujourd'hui par défaut."""
    staff = models.CSA(
        name=name,
        department=department,
        email=email,
        date_assigned=date_assigned or date.today(),
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    logger.info("staff_registered", csa_id=staff.csa_id, department=department)
    return staff


def register_lease(
    db: Session,
    building_id: int,
    lease_start_date: date,
    lease_end_date: date,
    status: str,
) -> models.LeaseInfo:
    """Ajoute un bail à un bâtiment existant."""
    if db.get(models.Building, building_id) is None:
        raise SubmissionValidationError(f"Building_ID invalide: {building_id}")

    lease = models.LeaseInfo(
        building_id=building_id,
        lease_start_date=lease_start_date,
        lease_end_date=lease_end_date,
        status=status,
    )
    db.add(lease)
    db.commit()
    db.refresh(lease)
    logger.info("lease_registered", lease_id=lease.lease_id, building_id=building_id, status=status)
    return lease


def list_staff(db: Session, skip: int = 0, limit: int = 100) -> List[models.CSA]:
    return db.query(models.CSA).order_by(models.CSA.csa_id).offset(skip).limit(limit).all()


def list_travelers(db: Session, skip: int = 0, limit: int = 100) -> List[models.Traveler]:
    return db.query(models.Traveler).order_by(models.Traveler.traveler_id).offset(skip).limit(limit).all()


def get_traveler_trips(db: Session, traveler_id: int) -> Optional[List[models.TripTracker]]:
    """Retourne les voyages d'un voyageur, ou None si le voyageur n'existe pas."""
    if db.get(models.Traveler, traveler_id) is None:
        return None
    return (
        db.query(models.TripTracker)
        .filter(models.TripTracker.traveler_id == traveler_id)
        .order_by(models.TripTracker.start_date)
        .all()
    )


def list_buildings(db: Session, skip: int = 0, limit: int = 100) -> List[models.Building]:
    return db.query(models.Building).order_by(models.Building.building_id).offset(skip).limit(limit).all()


def list_central_records(
    db: Session,
    record_type: Optional[models.RecordType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[models.CentralRecord]:
    """Liste les faits de Central_Records, filtrés par type et par période."""
    query = db.query(models.CentralRecord)
    if record_type is not None:
        query = query.filter(models.CentralRecord.record_type == record_type)
    if start_date is not None:
        query = query.filter(models.CentralRecord.record_date >= start_date)
    if end_date is not None:
        query = query.filter(models.CentralRecord.record_date <= end_date)
    return query.order_by(models.CentralRecord.record_id).offset(skip).limit(limit).all()
