# main.py
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException
from sqlalchemy.orm import Session

import directory
import ingestion
import ledger
import models, schemas
from database import SessionLocal
from errors import ConstraintViolationError, DuplicateSubmissionError, SubmissionValidationError

app = FastAPI(title="Centralized Forms API", version="1.0.0")

# Dépendance pour obtenir une session de DB par requête
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _run_submission(submit, db: Session, form: schemas.FormBase, **fields):
    """Appelle l'ingestion et traduit les erreurs métier en réponses HTTP."""
    try:
        return submit(db, form.response_id, form.source, **fields)
    except DuplicateSubmissionError:
        raise HTTPException(status_code=409, detail=f"Soumission déjà enregistrée: {form.response_id}")
    except SubmissionValidationError as error:
        raise HTTPException(status_code=422, detail=str(error))
    except ConstraintViolationError as error:
        raise HTTPException(
            status_code=400,
            detail={"response_id": error.response_id, "processing_status": "error", "error_message": error.message},
        )


# === ENDPOINTS POUR LES FORMULAIRES ===
@app.post("/forms/travel", response_model=schemas.FormSubmission, status_code=201)
def submit_travel_form(form: schemas.TravelForm, db: Session = Depends(get_db)):
    """Ingère un formulaire de voyage."""
    return _run_submission(
        ingestion.submit_travel, db, form,
        name=form.name,
        email=form.email,
        department=form.department,
        destination=form.destination,
        start_date=form.start_date,
        end_date=form.end_date,
        purpose=form.purpose,
    )

@app.post("/forms/building", response_model=schemas.FormSubmission, status_code=201)
def submit_building_form(form: schemas.BuildingForm, db: Session = Depends(get_db)):
    """Ingère un formulaire de bâtiment."""
    return _run_submission(
        ingestion.submit_building, db, form,
        name=form.name,
        address=form.address,
        total_rooms=form.total_rooms,
    )

@app.post("/forms/incident", response_model=schemas.FormSubmission, status_code=201)
def submit_incident_form(form: schemas.IncidentForm, db: Session = Depends(get_db)):
    """Ingère un formulaire d'incident."""
    return _run_submission(
        ingestion.submit_incident, db, form,
        staff_id=form.staff_id,
        incident_type=form.incident_type,
        location=form.location,
    )

# === ENDPOINTS POUR LES SOUMISSIONS ===
@app.get("/submissions/", response_model=List[schemas.FormSubmission])
def read_submissions(
    status: Optional[models.SubmissionStatus] = None,
    form_name: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """Récupère les soumissions, filtrées par statut ou formulaire."""
    return ledger.list_submissions(db, status=status, form_name=form_name, skip=skip, limit=limit)

@app.get("/submissions/{response_id}", response_model=schemas.FormSubmission)
def read_submission(response_id: str, db: Session = Depends(get_db)):
    """Récupère le statut d'une soumission par son response_id."""
    submission = ledger.get_submission(db, response_id)
    if submission is None:
        raise HTTPException(status_code=404, detail="Soumission non trouvée")
    return submission

# === ENDPOINTS POUR LE PERSONNEL (CSA) ===
@app.get("/staff/", response_model=List[schemas.Staff])
def read_staff(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """Récupère la liste du personnel."""
    return directory.list_staff(db, skip=skip, limit=limit)

@app.post("/staff/", response_model=schemas.Staff, status_code=201)
def create_staff(staff: schemas.StaffCreate, db: Session = Depends(get_db)):
    """Crée un membre du personnel."""
    return directory.register_staff(db, **staff.model_dump())

# === ENDPOINTS POUR LES VOYAGEURS ===
@app.get("/travelers/", response_model=List[schemas.Traveler])
def read_travelers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """Récupère une liste de voyageurs."""
    return directory.list_travelers(db, skip=skip, limit=limit)

@app.get("/travelers/{traveler_id}/trips", response_model=List[schemas.Trip])
def read_traveler_trips(traveler_id: int, db: Session = Depends(get_db)):
    """Récupère les voyages d'un voyageur."""
    trips = directory.get_traveler_trips(db, traveler_id)
    if trips is None:
        raise HTTPException(status_code=404, detail="Voyageur non trouvé")
    return trips

# === ENDPOINTS POUR LES BÂTIMENTS ===
@app.get("/buildings/", response_model=List[schemas.Building])
def read_buildings(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """Récupère une liste de bâtiments."""
    return directory.list_buildings(db, skip=skip, limit=limit)

@app.post("/buildings/{building_id}/leases", response_model=schemas.Lease, status_code=201)
def create_lease(building_id: int, lease: schemas.LeaseCreate, db: Session = Depends(get_db)):
    """Ajoute un bail à un bâtiment."""
    try:
        return directory.register_lease(db, building_id, **lease.model_dump())
    except SubmissionValidationError:
        raise HTTPException(status_code=404, detail="Bâtiment non trouvé")

# === ENDPOINTS POUR CENTRAL RECORDS ===
@app.get("/central-records/", response_model=List[schemas.CentralRecord])
def read_central_records(
    record_type: Optional[models.RecordType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """Récupère les faits de la table de synthèse."""
    return directory.list_central_records(
        db, record_type=record_type, start_date=start_date, end_date=end_date, skip=skip, limit=limit
    )

@app.get("/")
def root():
    """Page d'accueil de l'API."""
    return {
        "message": "Bienvenue sur l'API Centralized Forms",
        "endpoints": {
            "travel_form": "/forms/travel",
            "building_form": "/forms/building",
            "incident_form": "/forms/incident",
            "submissions": "/submissions/",
            "staff": "/staff/",
            "travelers": "/travelers/",
            "buildings": "/buildings/",
            "central_records": "/central-records/",
            "docs": "/docs"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
