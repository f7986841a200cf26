# ledger.py
"""
Registre des soumissions (table form_submissions).

Chaque response_id n'est enregistré qu'une seule fois ; son statut passe de
'pending' à 'processed' ou à 'error', une seule fois, sans retour possible.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models
from errors import DuplicateSubmissionError, LedgerTransitionError, SubmissionNotFoundError
from schemas import SpreadsheetLocator, SurveyLocator


def begin_submission(db: Session, response_id: str, form_name: str, source) -> models.FormSubmission:
    """Insère une ligne 'pending' pour la soumission (flush, sans commit)."""
    if db.get(models.FormSubmission, response_id) is not None:
        raise DuplicateSubmissionError(response_id)

    now = datetime.now()
    submission = models.FormSubmission(
        response_id=response_id,
        form_name=form_name,
        submission_date=now,
        processing_status=models.SubmissionStatus.PENDING,
        last_sync_timestamp=now,
        **_locator_columns(source),
    )
    db.add(submission)
    try:
        db.flush()
    except IntegrityError as error:
        # Insertion concurrente du même response_id
        db.rollback()
        raise DuplicateSubmissionError(response_id) from error
    return submission


def mark_processed(db: Session, response_id: str) -> models.FormSubmission:
    """Passe la soumission de 'pending' à 'processed'."""
    return _transition(db, response_id, models.SubmissionStatus.PROCESSED)


def mark_error(db: Session, response_id: str, message: str) -> models.FormSubmission:
    """Passe la soumission de 'pending' à 'error' en conservant le message."""
    return _transition(db, response_id, models.SubmissionStatus.ERROR, message)


def get_submission(db: Session, response_id: str) -> Optional[models.FormSubmission]:
    return db.get(models.FormSubmission, response_id)


def list_submissions(
    db: Session,
    status: Optional[models.SubmissionStatus] = None,
    form_name: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[models.FormSubmission]:
    """Liste les soumissions, filtrées par statut et/ou formulaire."""
    query = db.query(models.FormSubmission)
    if status is not None:
        query = query.filter(models.FormSubmission.processing_status == status)
    if form_name is not None:
        query = query.filter(models.FormSubmission.form_name == form_name)
    return (
        query.order_by(models.FormSubmission.submission_date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def _transition(db, response_id, status, message=None):
    submission = db.get(models.FormSubmission, response_id)
    if submission is None:
        raise SubmissionNotFoundError(f"Soumission inconnue: {response_id}")
    if submission.processing_status != models.SubmissionStatus.PENDING:
        raise LedgerTransitionError(
            f"Soumission {response_id} déjà '{submission.processing_status.value}', "
            f"passage à '{status.value}' refusé"
        )

    submission.processing_status = status
    submission.error_message = message
    submission.last_sync_timestamp = datetime.now()
    db.flush()
    return submission


def _locator_columns(source) -> dict:
    if isinstance(source, (SurveyLocator, SpreadsheetLocator)):
        return source.ledger_columns()
    raise TypeError(f"Source de soumission non supportée: {type(source).__name__}")
