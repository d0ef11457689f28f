"""
Registration-number cascade.

Work items and consultations point at their patient by the value of
registrationNumber, not by a foreign key. When a patient is renamed every
dependent row has to follow, otherwise it is silently orphaned.
"""

import logging

from sqlalchemy.orm import Session

from models import Task, OldLab, Consultation, OldConsultation

logger = logging.getLogger(__name__)

# Every relation that refers to a patient by registration number
CASCADE_MODELS = (Task, OldLab, Consultation, OldConsultation)


def _rename_rows(db: Session, model, old_key: str, new_key: str) -> int:
    return (
        db.query(model)
        .filter(model.registration_number == old_key)
        .update({model.registration_number: new_key}, synchronize_session=False)
    )


def propagate_rename(db: Session, old_key: str, new_key: str) -> dict:
    """Re-key all dependent rows from old_key to new_key.

    Runs inside the caller's transaction and never commits; the caller owns
    commit/rollback so the patient row and its dependents change together.

    Returns
    -------
    dict
        {table name: rows re-keyed}
    """
    counts = {}
    for model in CASCADE_MODELS:
        counts[model.__tablename__] = _rename_rows(db, model, old_key, new_key)

    logger.info("Re-keyed dependents %s -> %s: %s", old_key, new_key, counts)
    return counts
