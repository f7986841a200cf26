# schemas.py
from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models import RecordType, SourceType, SubmissionStatus


# ============ SOURCE DES SOUMISSIONS ============
class SurveyLocator(BaseModel):
    """Soumission provenant d'une plateforme de sondage."""
    kind: Literal["survey"] = "survey"
    survey_id: str = Field(max_length=50)

    def ledger_columns(self) -> dict:
        return {"source_type": SourceType.SURVEY, "survey_id": self.survey_id}


class SpreadsheetLocator(BaseModel):
    """Soumission provenant d'une ligne de tableur (feuille / onglet / ligne)."""
    kind: Literal["spreadsheet"] = "spreadsheet"
    sheet_id: str = Field(max_length=100)
    tab_name: str = Field(max_length=100)
    row_number: int

    def ledger_columns(self) -> dict:
        return {
            "source_type": SourceType.SPREADSHEET,
            "sheet_id": self.sheet_id,
            "tab_name": self.tab_name,
            "row_number": self.row_number,
        }


SourceLocator = Annotated[Union[SurveyLocator, SpreadsheetLocator], Field(discriminator="kind")]


# ============ FORMULAIRES ENTRANTS ============
class FormBase(BaseModel):
    response_id: str = Field(min_length=1, max_length=50)
    source: SourceLocator


class TravelForm(FormBase):
    name: str
    email: str
    department: Optional[str] = None
    destination: str
    start_date: date
    end_date: date
    purpose: Optional[str] = None


class BuildingForm(FormBase):
    name: str
    address: str
    total_rooms: Optional[int] = None


class IncidentForm(FormBase):
    staff_id: int
    incident_type: str
    location: str


# ============ REGISTRE DES SOUMISSIONS ============
class FormSubmission(BaseModel):
    response_id: str
    form_name: str
    source_type: SourceType
    survey_id: Optional[str] = None
    sheet_id: Optional[str] = None
    tab_name: Optional[str] = None
    row_number: Optional[int] = None
    submission_date: Optional[datetime] = None
    processing_status: SubmissionStatus
    error_message: Optional[str] = None
    last_sync_timestamp: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ============ STAFF (CSA) SCHEMAS ============
class StaffCreate(BaseModel):
    name: str
    department: Optional[str] = None
    email: Optional[str] = None
    date_assigned: Optional[date] = None


class Staff(StaffCreate):
    csa_id: int

    model_config = ConfigDict(from_attributes=True)


# ============ TRAVELER / TRIP SCHEMAS ============
class Traveler(BaseModel):
    traveler_id: int
    name: str
    email: Optional[str] = None
    department: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Trip(BaseModel):
    trip_id: int
    traveler_id: int
    destination: str
    start_date: date
    end_date: date
    purpose: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ============ BUILDING / LEASE SCHEMAS ============
class Building(BaseModel):
    building_id: int
    name: str
    address: str
    total_rooms: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class LeaseCreate(BaseModel):
    lease_start_date: date
    lease_end_date: date
    status: str = Field(max_length=50)


class Lease(LeaseCreate):
    lease_id: int
    building_id: int

    model_config = ConfigDict(from_attributes=True)


# ============ CENTRAL RECORDS ============
class CentralRecord(BaseModel):
    record_id: int
    traveler_id: Optional[int] = None
    trip_id: Optional[int] = None
    csa_id: Optional[int] = None
    incident_id: Optional[int] = None
    building_id: Optional[int] = None
    lease_id: Optional[int] = None
    record_date: Optional[date] = None
    record_type: RecordType

    model_config = ConfigDict(from_attributes=True)
