import logging
from typing import Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import get_db_context
from core.exceptions import ValidationError, DuplicateKeyError, StoreIOError
from models import Patient, Gender, Location
from models.enums import values
from services import identity_service

logger = logging.getLogger(__name__)


# Required text fields and the label used in validation messages
REQUIRED_TEXT_FIELDS = {
    "registration_number": "Registration number",
    "patient_name": "Patient name",
    "gender": "Gender",
    "location": "Location",
    "contact": "Contact information",
}

OPTIONAL_TEXT_FIELDS = ("chief_complaints", "provisional_diagnosis", "misc_notes")

PATIENT_FIELDS = set(REQUIRED_TEXT_FIELDS) | set(OPTIONAL_TEXT_FIELDS) | {"age", "bed_number"}


# ------------------------------------------
# Validation (no store access)
# ------------------------------------------
def _clean_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _positive_int(value, label: str, required: bool):
    if value is None or _clean_text(value) == "":
        if required:
            raise ValidationError(f"{label} is required.")
        return None
    try:
        number = int(_clean_text(value))
    except ValueError:
        raise ValidationError(f"Please enter a valid positive {label.lower()}.") from None
    if number <= 0:
        raise ValidationError(f"Please enter a valid positive {label.lower()}.")
    return number


def validate_patient_fields(fields: Mapping) -> dict:
    """Check and normalise a patient form.

    Returns the cleaned column values; raises ValidationError on the first
    problem found.
    """
    unknown = set(fields) - PATIENT_FIELDS
    if unknown:
        raise ValidationError(f"Unknown patient field(s): {', '.join(sorted(unknown))}")

    cleaned = {}
    for name, label in REQUIRED_TEXT_FIELDS.items():
        text = _clean_text(fields.get(name))
        if not text:
            raise ValidationError(f"{label} is required.")
        cleaned[name] = text

    if cleaned["gender"] not in values(Gender):
        raise ValidationError(f"Gender must be one of: {', '.join(values(Gender))}.")
    if cleaned["location"] not in values(Location):
        raise ValidationError(f"Location must be one of: {', '.join(values(Location))}.")

    cleaned["age"] = _positive_int(fields.get("age"), "Age", required=True)
    cleaned["bed_number"] = _positive_int(fields.get("bed_number"), "Bed number", required=False)

    for name in OPTIONAL_TEXT_FIELDS:
        cleaned[name] = _clean_text(fields.get(name)) or None

    return cleaned


def _registration_taken(db: Session, registration_number: str, exclude_id: int | None = None) -> bool:
    query = db.query(Patient.id).filter(Patient.registration_number == registration_number)
    if exclude_id is not None:
        query = query.filter(Patient.id != exclude_id)
    return query.first() is not None


# ------------------------------------------
# Lookups
# ------------------------------------------
def get_patient(registration_number: str, db: Session | None = None):
    if db is None:
        with get_db_context() as _db:
            return get_patient(registration_number, db=_db)
    try:
        return db.query(Patient).filter(Patient.registration_number == registration_number).first()
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to load patient.") from exc


# ------------------------------------------
# Create a new patient
# ------------------------------------------
def create_patient(fields: Mapping, db: Session | None = None) -> Patient:
    """Admit a new patient.

    Raises ValidationError for a bad form and DuplicateKeyError when the
    registration number is already used by any patient, discharged or not.
    """
    cleaned = validate_patient_fields(fields)
    if db is None:
        with get_db_context() as _db:
            return create_patient(cleaned, db=_db)

    key = cleaned["registration_number"]
    try:
        if _registration_taken(db, key):
            raise DuplicateKeyError(key)

        patient = Patient(**cleaned, is_discharged=0)
        db.add(patient)
        db.commit()
        db.refresh(patient)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error adding patient %s: %s", key, exc)
        raise StoreIOError("Failed to add patient. Please try again.") from exc

    logger.info("Admitted patient %s", key)
    return patient


# ------------------------------------------
# Update patient details (may rename the key)
# ------------------------------------------
def update_patient(original_key: str, fields: Mapping, db: Session | None = None):
    """Edit a patient's details.

    When the registration number changes, the patient row and every dependent
    row are re-keyed in one transaction. Any failure rolls all of it back.
    Returns None if original_key does not exist.
    """
    cleaned = validate_patient_fields(fields)
    if db is None:
        with get_db_context() as _db:
            return update_patient(original_key, cleaned, db=_db)

    new_key = cleaned["registration_number"]
    key_changed = new_key != original_key

    try:
        patient = db.query(Patient).filter(Patient.registration_number == original_key).first()
        if not patient:
            return None

        if key_changed and _registration_taken(db, new_key, exclude_id=patient.id):
            raise DuplicateKeyError(new_key)

        for name, value in cleaned.items():
            setattr(patient, name, value)
        db.flush()

        if key_changed:
            identity_service.propagate_rename(db, original_key, new_key)

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error updating patient %s: %s", original_key, exc)
        raise StoreIOError("Failed to update patient details.") from exc
    except Exception:
        db.rollback()
        raise

    db.refresh(patient)
    if key_changed:
        logger.info("Renamed patient %s -> %s", original_key, new_key)
    return patient


# ------------------------------------------
# Discharge / re-admit
# ------------------------------------------
def set_discharged(registration_number: str, discharged: bool, db: Session | None = None):
    """Set the discharge flag. Idempotent; never touches work items.

    Returns the patient, or None if the registration number is unknown.
    """
    if db is None:
        with get_db_context() as _db:
            return set_discharged(registration_number, discharged, db=_db)

    try:
        patient = db.query(Patient).filter(Patient.registration_number == registration_number).first()
        if not patient:
            return None
        patient.is_discharged = 1 if discharged else 0
        db.commit()
        db.refresh(patient)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreIOError("Failed to update discharge status.") from exc

    logger.info("Patient %s %s", registration_number, "discharged" if discharged else "re-admitted")
    return patient


def discharge_patient(registration_number: str, db: Session | None = None):
    return set_discharged(registration_number, True, db=db)


def readmit_patient(registration_number: str, db: Session | None = None):
    return set_discharged(registration_number, False, db=db)
