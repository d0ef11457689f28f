"""
Read-only projections used by the screens.

Nothing here writes. Empty results come back as empty lists/dicts, never as
errors.
"""

from dataclasses import dataclass, field

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import get_db_context
from core.exceptions import StoreIOError, ValidationError
from models import (
    Category,
    Consultation,
    Location,
    OldConsultation,
    OldLab,
    Patient,
    Task,
    TaskStatus,
)
from services.identity_service import CASCADE_MODELS


@dataclass(frozen=True)
class WorkItemRow:
    id: int
    registration_number: str
    category: Category
    item_type: str
    subtype: str
    date_and_time: str
    task_status: str | None = None
    patient_name: str | None = None


@dataclass(frozen=True)
class ConsultationRow:
    id: int
    registration_number: str
    consult: str
    date_and_time: str
    task_status: str | None = None
    patient_name: str | None = None


@dataclass
class WorkQueue:
    """Work in one status, split the way the pending screen shows it."""
    labs: list = field(default_factory=list)
    imaging: list = field(default_factory=list)
    consultations: list = field(default_factory=list)
    old_consultations: list = field(default_factory=list)

    def total(self) -> int:
        return self.actionable() + len(self.old_consultations)

    def actionable(self) -> int:
        """Rows whose status can still be moved on."""
        return len(self.labs) + len(self.imaging) + len(self.consultations)


@dataclass
class PatientTasks:
    """Everything recorded against one patient."""
    current_labs: list = field(default_factory=list)
    current_imaging: list = field(default_factory=list)
    old_labs: list = field(default_factory=list)
    old_imaging: list = field(default_factory=list)
    consultations: list = field(default_factory=list)
    old_consultations: list = field(default_factory=list)


# -----------------------------
# Row builders
# -----------------------------
def _work_rows(db: Session, model, category: Category, *criteria, with_patient: bool = False):
    if category == Category.LAB:
        type_col, subtype_col = model.lab_type, model.lab_subtype
    else:
        type_col, subtype_col = model.imaging_type, model.imaging_subtype
    status_col = model.task_status if model.HAS_STATUS else None

    columns = [model.id, model.registration_number, type_col, subtype_col, model.date_and_time]
    if status_col is not None:
        columns.append(status_col)
    query = db.query(*columns)
    if with_patient:
        query = query.add_columns(Patient.patient_name).join(
            Patient, Patient.registration_number == model.registration_number
        )
    query = query.filter(type_col.isnot(None), subtype_col.isnot(None), *criteria)

    rows = []
    for row in query.order_by(model.date_and_time.asc(), model.id.asc()).all():
        values = list(row)
        rows.append(
            WorkItemRow(
                id=values[0],
                registration_number=values[1],
                category=category,
                item_type=values[2],
                subtype=values[3],
                date_and_time=values[4],
                task_status=values[5] if status_col is not None else None,
                patient_name=values[-1] if with_patient else None,
            )
        )
    return rows


def _consultation_rows(db: Session, model, *criteria, with_patient: bool = False):
    query = db.query(
        model.id, model.registration_number, model.consult, model.date_and_time, model.task_status
    )
    if with_patient:
        query = query.add_columns(Patient.patient_name).join(
            Patient, Patient.registration_number == model.registration_number
        )
    query = query.filter(model.consult.isnot(None), *criteria)

    rows = []
    for row in query.order_by(model.date_and_time.asc(), model.id.asc()).all():
        values = list(row)
        rows.append(
            ConsultationRow(
                id=values[0],
                registration_number=values[1],
                consult=values[2],
                date_and_time=values[3],
                task_status=values[4],
                patient_name=values[5] if with_patient else None,
            )
        )
    return rows


# -----------------------------
# Patients
# -----------------------------
def list_patients(discharged: bool = False, search: str | None = None, db: Session | None = None):
    """Admitted (or discharged) patients, newest admission first.

    search matches a case-insensitive substring of the name or registration number.
    """
    if db is None:
        with get_db_context() as _db:
            return list_patients(discharged, search, db=_db)

    try:
        query = db.query(Patient).filter(Patient.is_discharged == (1 if discharged else 0))
        term = (search or "").strip().lower()
        if term:
            query = query.filter(
                or_(
                    func.lower(Patient.patient_name).contains(term, autoescape=True),
                    func.lower(Patient.registration_number).contains(term, autoescape=True),
                )
            )
        return query.order_by(Patient.reg_date.desc(), Patient.id.desc()).all()
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to load patients.") from exc


def location_census(db: Session | None = None) -> dict:
    """Admitted patients per location; every location is listed, zero or not."""
    if db is None:
        with get_db_context() as _db:
            return location_census(db=_db)

    counts = {location.value: 0 for location in Location}
    try:
        rows = (
            db.query(Patient.location, func.count(Patient.id))
            .filter(Patient.is_discharged == 0)
            .group_by(Patient.location)
            .all()
        )
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to load census.") from exc

    for location, count in rows:
        if location in counts:
            counts[location] = count
    return counts


# -----------------------------
# Work queues
# -----------------------------
def work_by_status(status, db: Session | None = None) -> WorkQueue:
    """All work in the given status with the patient's name, oldest first.

    Old consultations cannot be advanced, so they are only listed as pending.
    """
    try:
        status = TaskStatus(status).value
    except ValueError:
        raise ValidationError(
            f"Invalid status {status!r}; expected one of: {', '.join(s.value for s in TaskStatus)}."
        ) from None
    if db is None:
        with get_db_context() as _db:
            return work_by_status(status, db=_db)

    try:
        queue = WorkQueue(
            labs=_work_rows(db, Task, Category.LAB, Task.task_status == status, with_patient=True),
            imaging=_work_rows(db, Task, Category.IMAGING, Task.task_status == status, with_patient=True),
            consultations=_consultation_rows(
                db, Consultation, Consultation.task_status == status, with_patient=True
            ),
        )
        if status == TaskStatus.UNSENT.value:
            queue.old_consultations = _consultation_rows(
                db, OldConsultation, OldConsultation.task_status == status, with_patient=True
            )
        return queue
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to load tasks.") from exc


def pending_by_category(db: Session | None = None) -> WorkQueue:
    return work_by_status(TaskStatus.UNSENT, db=db)


def patient_tasks(registration_number: str, db: Session | None = None) -> PatientTasks:
    if db is None:
        with get_db_context() as _db:
            return patient_tasks(registration_number, db=_db)

    try:
        return PatientTasks(
            current_labs=_work_rows(db, Task, Category.LAB, Task.registration_number == registration_number),
            current_imaging=_work_rows(db, Task, Category.IMAGING, Task.registration_number == registration_number),
            old_labs=_work_rows(db, OldLab, Category.LAB, OldLab.registration_number == registration_number),
            old_imaging=_work_rows(db, OldLab, Category.IMAGING, OldLab.registration_number == registration_number),
            consultations=_consultation_rows(
                db, Consultation, Consultation.registration_number == registration_number
            ),
            old_consultations=_consultation_rows(
                db, OldConsultation, OldConsultation.registration_number == registration_number
            ),
        )
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to load tasks.") from exc


# -----------------------------
# Store health
# -----------------------------
def find_orphaned_rows(db: Session | None = None) -> dict:
    """Dependent rows whose registration number matches no patient.

    Returns {table: {registration number: row count}}; clean tables are omitted.
    """
    if db is None:
        with get_db_context() as _db:
            return find_orphaned_rows(db=_db)

    orphans = {}
    for model in CASCADE_MODELS:
        try:
            rows = (
                db.query(model.registration_number, func.count(model.id))
                .outerjoin(Patient, Patient.registration_number == model.registration_number)
                .filter(Patient.id.is_(None))
                .group_by(model.registration_number)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StoreIOError(f"Failed to scan {model.__tablename__}.") from exc
        if rows:
            orphans[model.__tablename__] = {key: count for key, count in rows}
    return orphans


def table_counts(db: Session | None = None) -> dict:
    if db is None:
        with get_db_context() as _db:
            return table_counts(db=_db)

    try:
        return {
            model.__tablename__: db.query(func.count(model.id)).scalar()
            for model in (Patient,) + CASCADE_MODELS
        }
    except SQLAlchemyError as exc:
        raise StoreIOError("Failed to count rows.") from exc
