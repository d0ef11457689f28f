"""
Work-item ledger: lab/imaging orders and consultations.

Four relations share this code, picked with the LedgerTable enum:

    tasks             current lab/imaging orders, with status
    oldlabs           historical lab/imaging orders, no status column
    consultations     current consultations, with status
    oldconsultations  historical consultations, with status, no duplicates

Callers identify rows by natural key (WorkItemKey / ConsultationKey). Keys are
resolved to surrogate ids first and the change is applied by id. Targeted
updates and deletes that match nothing are a no-op and return 0.
"""

import dataclasses
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core import settings
from core.database import get_db_context
from core.exceptions import ValidationError, StoreIOError
from models import (
    LEDGER_MODELS,
    Category,
    ConsultationKey,
    ImagingType,
    LabType,
    LedgerTable,
    TaskStatus,
    WorkItemKey,
)
from models.enums import STATUS_ORDER, values
from models.work_item import LabImagingMixin

logger = logging.getLogger(__name__)

WORK_ITEM_TABLES = (LedgerTable.TASKS, LedgerTable.OLDLABS)
CONSULTATION_TABLES = (LedgerTable.CONSULTATIONS, LedgerTable.OLDCONSULTATIONS)
STATUS_TABLES = (LedgerTable.TASKS, LedgerTable.CONSULTATIONS)

CATEGORY_TYPES = {
    Category.LAB: LabType,
    Category.IMAGING: ImagingType,
}

OLD_CONSULTATION_EXISTS = "This old consultation already exists."


# ------------------------------------------
# Argument checks (no store access)
# ------------------------------------------
def _model_for(table, allowed, action: str):
    try:
        table = LedgerTable(table)
    except ValueError:
        raise ValidationError(f"Unknown table: {table!r}") from None
    if table not in allowed:
        raise ValidationError(f"{action} is not supported for {table.value}.")
    return LEDGER_MODELS[table]


def _require_registration(registration_number) -> str:
    key = (registration_number or "").strip()
    if not key:
        raise ValidationError("No registration number found.")
    return key


def _category(category) -> Category:
    try:
        return Category(category)
    except ValueError:
        raise ValidationError(f"Invalid task category: {category!r}") from None


def _item_type(category: Category, item_type) -> str:
    enum_cls = CATEGORY_TYPES[category]
    try:
        return enum_cls(item_type).value
    except ValueError:
        raise ValidationError(
            f"Invalid {category.value} type {item_type!r}; expected one of: {', '.join(values(enum_cls))}."
        ) from None


def _status(status) -> str:
    try:
        return TaskStatus(status).value
    except ValueError:
        raise ValidationError(
            f"Invalid status {status!r}; expected one of: {', '.join(values(TaskStatus))}."
        ) from None


def _normalise_key(model, key, require_subtype: bool):
    """Check the key fits the relation and turn enum members into plain values."""
    if issubclass(model, LabImagingMixin):
        if not isinstance(key, WorkItemKey):
            raise ValidationError(f"{model.__tablename__} rows are identified by a WorkItemKey.")
        if require_subtype and key.subtype is None:
            raise ValidationError("A full key (including subtype) is required.")
        category = _category(key.category)
        return dataclasses.replace(
            key,
            category=category,
            item_type=_item_type(category, key.item_type),
        )

    if not isinstance(key, ConsultationKey):
        raise ValidationError(f"{model.__tablename__} rows are identified by a ConsultationKey.")
    return key


def _check_transition(current: str | None, new: str):
    if not settings.STRICT_STATUS_TRANSITIONS or current is None:
        return
    order = [s.value for s in STATUS_ORDER]
    if order.index(new) < order.index(current):
        raise ValidationError(f"Cannot move a task from '{current}' back to '{new}'.")


# ------------------------------------------
# Store helpers
# ------------------------------------------
def _resolve_ids(db: Session, model, key) -> list[int]:
    rows = db.query(model.id).filter(model.natural_key_filter(key)).all()
    return [row[0] for row in rows]


def _insert(db: Session, row, failure: str):
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s: %s", failure, exc)
        raise StoreIOError(failure) from exc
    return row


def _update_by_key(db: Session, model, key, changes: dict, failure: str, status: str | None = None) -> int:
    try:
        ids = _resolve_ids(db, model, key)
        if not ids:
            return 0
        if status is not None:
            current = db.query(model.task_status).filter(model.id.in_(ids)).all()
            for (value,) in current:
                _check_transition(value, status)
        count = (
            db.query(model)
            .filter(model.id.in_(ids))
            .update(changes, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s: %s", failure, exc)
        raise StoreIOError(failure) from exc
    except ValidationError:
        db.rollback()
        raise
    return count


# ------------------------------------------
# Add lab / imaging orders
# ------------------------------------------
def add_lab_or_imaging(table, registration_number, category, item_type, subtype, db: Session | None = None):
    """Insert a lab or imaging order into tasks or oldlabs.

    Only the chosen category's columns are filled in. Identical orders are
    allowed; a patient may need the same test twice.
    """
    model = _model_for(table, WORK_ITEM_TABLES, "Lab/imaging orders")
    key = _require_registration(registration_number)
    category = _category(category)
    item_type = _item_type(category, item_type)
    subtype = (subtype or "").strip()
    if not subtype:
        raise ValidationError(f"{category.value.capitalize()} subtype cannot be empty.")

    if db is None:
        with get_db_context() as _db:
            return add_lab_or_imaging(table, key, category, item_type, subtype, db=_db)

    if category == Category.LAB:
        row = model(registration_number=key, lab_type=item_type, lab_subtype=subtype)
    else:
        row = model(registration_number=key, imaging_type=item_type, imaging_subtype=subtype)

    row = _insert(db, row, f"Failed to add {category.value} task.")
    logger.info("Added %s %s/%s for %s to %s", category.value, item_type, subtype, key, model.__tablename__)
    return row


# ------------------------------------------
# Add consultations
# ------------------------------------------
def add_consultation(table, registration_number, text, db: Session | None = None):
    """Insert a consultation.

    Returns (row, None) on success. oldconsultations refuses an exact
    (registration number, text) repeat and returns (None, message) instead.
    """
    model = _model_for(table, CONSULTATION_TABLES, "Consultations")
    key = _require_registration(registration_number)
    text = (text or "").strip()
    if not text:
        raise ValidationError("Consultation text cannot be empty.")

    if db is None:
        with get_db_context() as _db:
            return add_consultation(table, key, text, db=_db)

    if model.SUPPRESS_DUPLICATES:
        try:
            existing = (
                db.query(model.id)
                .filter(model.registration_number == key, model.consult == text)
                .first()
            )
        except SQLAlchemyError as exc:
            raise StoreIOError("Failed to add old consultation.") from exc
        if existing:
            logger.warning("Skipped duplicate %s row for %s", model.__tablename__, key)
            return None, OLD_CONSULTATION_EXISTS

    row = _insert(db, model(registration_number=key, consult=text), "Failed to add consultation.")
    logger.info("Added consultation for %s to %s", key, model.__tablename__)
    return row, None


# ------------------------------------------
# Status changes
# ------------------------------------------
def advance_status(table, key, new_status, db: Session | None = None) -> int:
    """Set task_status on the row(s) matching the full natural key.

    Only tasks and consultations have a workflow. Any status may be written
    unless STRICT_STATUS_TRANSITIONS is on.
    """
    model = _model_for(table, STATUS_TABLES, "Status changes")
    status = _status(new_status)
    key = _normalise_key(model, key, require_subtype=True)

    if db is None:
        with get_db_context() as _db:
            return advance_status(table, key, status, db=_db)

    count = _update_by_key(
        db, model, key, {model.task_status: status},
        f"Failed to mark {model.__tablename__} row as {status}.", status=status,
    )
    logger.info("Set %s row(s) in %s to %s", count, model.__tablename__, status)
    return count


def mark_sent(table, key, db: Session | None = None) -> int:
    return advance_status(table, key, TaskStatus.SENT, db=db)


def mark_collected(table, key, db: Session | None = None) -> int:
    return advance_status(table, key, TaskStatus.COLLECTED, db=db)


# ------------------------------------------
# Edit a lab/imaging order
# ------------------------------------------
def edit_subtype_and_status(table, key, new_subtype, new_status=None, db: Session | None = None) -> int:
    """Change the subtype (and, for current orders, the status) of an order.

    The row is found by registration number, timestamp and type; key.subtype
    may be left as None. oldlabs rows have no status to edit.
    """
    model = _model_for(table, WORK_ITEM_TABLES, "Subtype edits")
    subtype = (new_subtype or "").strip()
    if not subtype:
        raise ValidationError("Subtype cannot be empty.")
    if new_status is not None and not model.HAS_STATUS:
        raise ValidationError("Archived orders have no status to edit.")
    status = _status(new_status) if new_status is not None else None
    key = _normalise_key(model, key, require_subtype=False)

    if db is None:
        with get_db_context() as _db:
            return edit_subtype_and_status(table, key, subtype, status, db=_db)

    _, subtype_col, _ = model.payload_columns(key.category)
    changes = {subtype_col: subtype}
    if status is not None:
        changes[model.task_status] = status

    count = _update_by_key(db, model, key, changes, "Failed to update the task.", status=status)
    logger.info("Edited %s row(s) in %s", count, model.__tablename__)
    return count


# ------------------------------------------
# Delete
# ------------------------------------------
def delete_item(table, key, db: Session | None = None) -> int:
    """Delete the row(s) matching the full natural key; returns how many went."""
    model = _model_for(table, WORK_ITEM_TABLES + CONSULTATION_TABLES, "Deletes")
    key = _normalise_key(model, key, require_subtype=True)

    if db is None:
        with get_db_context() as _db:
            return delete_item(table, key, db=_db)

    failure = f"Failed to delete {model.__tablename__} row."
    try:
        ids = _resolve_ids(db, model, key)
        if not ids:
            return 0
        count = db.query(model).filter(model.id.in_(ids)).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("%s: %s", failure, exc)
        raise StoreIOError(failure) from exc

    logger.info("Deleted %s row(s) from %s", count, model.__tablename__)
    return count
