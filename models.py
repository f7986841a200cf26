# models.py
import enum

from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, ForeignKey, Enum, Index,
)
from sqlalchemy.orm import relationship
from database import Base


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    ERROR = "error"


class RecordType(str, enum.Enum):
    TRAVEL = "TRAVEL"
    BUILDING = "BUILDING"
    INCIDENT = "INCIDENT"


class SourceType(str, enum.Enum):
    SURVEY = "survey"
    SPREADSHEET = "spreadsheet"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# Modèle pour la table Travelers
class Traveler(Base):
    __tablename__ = "Travelers"

    traveler_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    department = Column(String(100), index=True)

    trips = relationship("TripTracker", back_populates="traveler")


# Modèle pour la table Trip_Tracker
class TripTracker(Base):
    __tablename__ = "Trip_Tracker"
    __table_args__ = (Index("idx_trip_dates", "start_date", "end_date"),)

    trip_id = Column(Integer, primary_key=True, index=True)
    traveler_id = Column(Integer, ForeignKey("Travelers.traveler_id"), nullable=False)
    destination = Column(String(255), nullable=False)
    # start_date <= end_date attendu mais non vérifié
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    purpose = Column(String(255))

    traveler = relationship("Traveler", back_populates="trips")


# Modèle pour la table CSA (personnel)
class CSA(Base):
    __tablename__ = "CSA"

    csa_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    department = Column(String(100), index=True)
    email = Column(String(100), index=True)
    date_assigned = Column(Date)

    incidents = relationship("Incident", back_populates="csa")


# Modèle pour la table Incident
class Incident(Base):
    __tablename__ = "Incident"

    incident_id = Column(Integer, primary_key=True, index=True)
    csa_id = Column(Integer, ForeignKey("CSA.csa_id"), nullable=False)
    incident_type = Column(String(100), index=True)
    location = Column(String(100))
    date_reported = Column(Date, index=True)

    csa = relationship("CSA", back_populates="incidents")


# Modèle pour la table Buildings
class Building(Base):
    __tablename__ = "Buildings"

    building_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    address = Column(String(255), nullable=False)
    total_rooms = Column(Integer)

    leases = relationship("LeaseInfo", back_populates="building")


# Modèle pour la table Lease_Info
class LeaseInfo(Base):
    __tablename__ = "Lease_Info"
    __table_args__ = (Index("idx_lease_dates", "lease_start_date", "lease_end_date"),)

    lease_id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("Buildings.building_id"), nullable=False)
    lease_start_date = Column(Date, nullable=False)
    lease_end_date = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, index=True)

    building = relationship("Building", back_populates="leases")


# Table de synthèse : un fait, une date, seules les références utiles au type sont remplies
class CentralRecord(Base):
    __tablename__ = "Central_Records"

    record_id = Column(Integer, primary_key=True, index=True)
    traveler_id = Column(Integer, ForeignKey("Travelers.traveler_id"), nullable=True)
    trip_id = Column(Integer, ForeignKey("Trip_Tracker.trip_id"), nullable=True)
    csa_id = Column(Integer, ForeignKey("CSA.csa_id"), nullable=True)
    incident_id = Column(Integer, ForeignKey("Incident.incident_id"), nullable=True)
    building_id = Column(Integer, ForeignKey("Buildings.building_id"), nullable=True)
    lease_id = Column(Integer, ForeignKey("Lease_Info.lease_id"), nullable=True)
    record_date = Column(Date, index=True)
    record_type = Column(
        Enum(RecordType, native_enum=False, length=50, values_callable=_enum_values),
        index=True,
    )


# Registre des soumissions (idempotence + audit)
class FormSubmission(Base):
    __tablename__ = "form_submissions"
    __table_args__ = (Index("idx_sheet", "sheet_id", "tab_name"),)

    response_id = Column(String(50), primary_key=True)
    form_name = Column(String(50))

    # Localisation de la source : survey{survey_id} | spreadsheet{sheet_id, tab_name, row_number}
    source_type = Column(
        Enum(SourceType, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )
    survey_id = Column(String(50), index=True)
    sheet_id = Column(String(100))
    tab_name = Column(String(100))
    row_number = Column(Integer)

    submission_date = Column(DateTime)
    processing_status = Column(
        Enum(SubmissionStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True,
    )
    error_message = Column(Text)
    last_sync_timestamp = Column(DateTime)
