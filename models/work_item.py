# models/work_item.py
#
# Lab/imaging orders. `tasks` holds current orders that move through the
# status workflow; `oldlabs` holds manually recorded historical orders and has
# no status column.

from sqlalchemy import Column, Integer, String, CheckConstraint, text, and_
from core.database import Base
from models.enums import Category, LabType, ImagingType, TaskStatus, check_in

# Exactly one payload populated, never both and never neither
PAYLOAD_EXCLUSIVE = (
    '(("lab_type" IS NOT NULL AND "lab_subtype" IS NOT NULL '
    'AND "imaging_type" IS NULL AND "imaging_subtype" IS NULL) OR '
    '("imaging_type" IS NOT NULL AND "imaging_subtype" IS NOT NULL '
    'AND "lab_type" IS NULL AND "lab_subtype" IS NULL))'
)


class LabImagingMixin:
    """Columns and natural-key matching shared by tasks and oldlabs."""

    HAS_STATUS = False

    id = Column(Integer, primary_key=True, autoincrement=True)
    registration_number = Column("registrationNumber", String, nullable=False, index=True)

    lab_type = Column(String, nullable=True)
    lab_subtype = Column(String, nullable=True)

    # Creation time, UTC 'YYYY-MM-DD HH:MM:SS', set by the store
    date_and_time = Column(String, server_default=text("(datetime('now'))"))

    imaging_type = Column(String, nullable=True)
    imaging_subtype = Column(String, nullable=True)

    @classmethod
    def payload_columns(cls, category: Category):
        """Return (type column, subtype column, other category's type column)."""
        if category == Category.LAB:
            return cls.lab_type, cls.lab_subtype, cls.imaging_type
        return cls.imaging_type, cls.imaging_subtype, cls.lab_type

    @classmethod
    def natural_key_filter(cls, key):
        """Predicate for a WorkItemKey.

        Only the key's own category columns are constrained; the other
        category's type must be NULL so a lab key never matches an imaging row.
        """
        type_col, subtype_col, other_type_col = cls.payload_columns(key.category)
        clauses = [
            cls.registration_number == key.registration_number,
            cls.date_and_time == key.date_and_time,
            type_col == key.item_type,
            other_type_col.is_(None),
        ]
        if key.subtype is not None:
            clauses.append(subtype_col == key.subtype)
        return and_(*clauses)

    @property
    def category(self) -> Category:
        return Category.LAB if self.lab_type is not None else Category.IMAGING

    @property
    def item_type(self) -> str:
        return self.lab_type if self.lab_type is not None else self.imaging_type

    @property
    def subtype(self) -> str:
        return self.lab_subtype if self.lab_type is not None else self.imaging_subtype


class Task(LabImagingMixin, Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(check_in("lab_type", LabType), name="ck_tasks_lab_type"),
        CheckConstraint(check_in("imaging_type", ImagingType), name="ck_tasks_imaging_type"),
        CheckConstraint(check_in("task_status", TaskStatus), name="ck_tasks_task_status"),
        CheckConstraint(PAYLOAD_EXCLUSIVE, name="ck_tasks_one_payload"),
    )

    HAS_STATUS = True

    task_status = Column(String, default=TaskStatus.UNSENT.value, server_default=text("'unsent'"))

    def __repr__(self):
        return f"<Task {self.registration_number} {self.item_type}/{self.subtype} ({self.task_status})>"


class OldLab(LabImagingMixin, Base):
    __tablename__ = "oldlabs"
    __table_args__ = (
        CheckConstraint(check_in("lab_type", LabType), name="ck_oldlabs_lab_type"),
        CheckConstraint(check_in("imaging_type", ImagingType), name="ck_oldlabs_imaging_type"),
        CheckConstraint(PAYLOAD_EXCLUSIVE, name="ck_oldlabs_one_payload"),
    )

    def __repr__(self):
        return f"<OldLab {self.registration_number} {self.item_type}/{self.subtype}>"
