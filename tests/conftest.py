"""Shared fixtures: every test runs against its own SQLite file."""
import pytest

from core.database import configure_database, init_db, get_db_context
from services.patient_service import create_patient


@pytest.fixture(autouse=True)
def ward_db(tmp_path):
    """Point the store at a fresh database and initialise it."""
    engine = configure_database(f"sqlite:///{tmp_path / 'ward.db'}")
    init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def patient_fields():
    return {
        "registration_number": "R100",
        "patient_name": "Jane Doe",
        "age": 42,
        "gender": "Female",
        "location": "ICU",
        "bed_number": 7,
        "chief_complaints": "Fever",
        "provisional_diagnosis": "Sepsis",
        "misc_notes": "",
        "contact": "555-0100",
    }


@pytest.fixture
def make_patient(patient_fields):
    """Create a patient, overriding any of the default fields."""
    def _make(registration_number="R100", **overrides):
        fields = dict(patient_fields, registration_number=registration_number)
        fields.update(overrides)
        return create_patient(fields)
    return _make


@pytest.fixture
def fetch():
    """Read rows in a fresh session so nothing cached is returned."""
    def _fetch(model, **criteria):
        with get_db_context() as session:
            return session.query(model).filter_by(**criteria).order_by(model.id).all()
    return _fetch


@pytest.fixture
def insert_row():
    """Insert a row directly, e.g. with a fixed date_and_time."""
    def _insert(model, **values):
        with get_db_context() as session:
            row = model(**values)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row
    return _insert
