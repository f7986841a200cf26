"""Unit tests for the form_submissions ledger."""

from __future__ import annotations

import pytest

import ledger
from errors import DuplicateSubmissionError, LedgerTransitionError, SubmissionNotFoundError
from models import SourceType, SubmissionStatus


def test_begin_submission_stamps_pending_row(db, survey) -> None:
    """New submissions should start pending with both timestamps set."""
    submission = ledger.begin_submission(db, "R_1", "travel_form", survey)
    db.commit()

    stored = ledger.get_submission(db, "R_1")
    assert stored.processing_status == SubmissionStatus.PENDING
    assert stored.source_type == SourceType.SURVEY
    assert stored.survey_id == "SV_travel01"
    assert stored.submission_date is not None
    assert stored.last_sync_timestamp == submission.submission_date


def test_begin_submission_rejects_known_response_id(db, survey) -> None:
    """A response_id can only be recorded once."""
    ledger.begin_submission(db, "R_1", "travel_form", survey)
    db.commit()

    with pytest.raises(DuplicateSubmissionError):
        ledger.begin_submission(db, "R_1", "building_form", survey)


def test_begin_submission_rejects_unknown_source(db) -> None:
    """Only survey or spreadsheet locators are accepted."""
    with pytest.raises(TypeError):
        ledger.begin_submission(db, "R_1", "travel_form", {"survey_id": "SV_1"})


def test_mark_processed_is_terminal(db, sheet) -> None:
    """A processed row cannot be processed again nor moved to error."""
    ledger.begin_submission(db, "R_1", "building_form", sheet)
    ledger.mark_processed(db, "R_1")
    db.commit()

    with pytest.raises(LedgerTransitionError):
        ledger.mark_processed(db, "R_1")
    with pytest.raises(LedgerTransitionError):
        ledger.mark_error(db, "R_1", "trop tard")

    assert ledger.get_submission(db, "R_1").processing_status == SubmissionStatus.PROCESSED


def test_mark_error_keeps_message(db, sheet) -> None:
    """Error transition should store the message and block later transitions."""
    ledger.begin_submission(db, "R_1", "building_form", sheet)
    submission = ledger.mark_error(db, "R_1", "NOT NULL constraint failed: Buildings.name")
    db.commit()

    assert submission.processing_status == SubmissionStatus.ERROR
    assert submission.error_message == "NOT NULL constraint failed: Buildings.name"
    with pytest.raises(LedgerTransitionError):
        ledger.mark_processed(db, "R_1")


def test_transition_on_unknown_response_id_fails(db) -> None:
    with pytest.raises(SubmissionNotFoundError):
        ledger.mark_processed(db, "R_absent")


def test_list_submissions_filters_by_status_and_form(db, survey, sheet) -> None:
    """Observers should be able to poll submissions by status."""
    ledger.begin_submission(db, "R_1", "travel_form", survey)
    ledger.begin_submission(db, "R_2", "building_form", sheet)
    ledger.begin_submission(db, "R_3", "building_form", sheet)
    ledger.mark_processed(db, "R_2")
    ledger.mark_error(db, "R_3", "échec")
    db.commit()

    pending = ledger.list_submissions(db, status=SubmissionStatus.PENDING)
    buildings = ledger.list_submissions(db, form_name="building_form")
    errors = ledger.list_submissions(db, status=SubmissionStatus.ERROR, form_name="building_form")

    assert [row.response_id for row in pending] == ["R_1"]
    assert {row.response_id for row in buildings} == {"R_2", "R_3"}
    assert [row.response_id for row in errors] == ["R_3"]


def test_concurrent_insert_of_same_response_id_is_duplicate(db, session_factory, survey, monkeypatch) -> None:
    """When the up-front lookup misses a row committed elsewhere, the key constraint still rejects it."""
    other = session_factory()
    ledger.begin_submission(other, "R_1", "travel_form", survey)
    other.commit()
    other.close()
    monkeypatch.setattr(db, "get", lambda *args, **kwargs: None)

    with pytest.raises(DuplicateSubmissionError):
        ledger.begin_submission(db, "R_1", "building_form", survey)

    monkeypatch.undo()
    stored = ledger.get_submission(db, "R_1")
    assert stored.form_name == "travel_form"
    assert len(ledger.list_submissions(db)) == 1
