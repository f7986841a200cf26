"""Pytest fixtures: in-memory SQLite database with the full schema."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import build_engine, init_db
from schemas import SpreadsheetLocator, SurveyLocator


@pytest.fixture
def engine():
    """Fresh in-memory database with foreign keys enforced."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def survey() -> SurveyLocator:
    return SurveyLocator(survey_id="SV_travel01")


@pytest.fixture
def sheet() -> SpreadsheetLocator:
    return SpreadsheetLocator(sheet_id="1AbCdEf", tab_name="Réponses", row_number=12)
