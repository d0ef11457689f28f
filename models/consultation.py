# models/consultation.py

from sqlalchemy import Column, Integer, String, Text, CheckConstraint, text, and_
from core.database import Base
from models.enums import TaskStatus, check_in


class ConsultationMixin:
    """Shared shape of consultations and oldconsultations.

    Unlike oldlabs, the archival table keeps its status column.
    """

    HAS_STATUS = True
    SUPPRESS_DUPLICATES = False

    id = Column(Integer, primary_key=True, autoincrement=True)
    registration_number = Column("registrationNumber", String, nullable=False, index=True)
    consult = Column(Text)
    date_and_time = Column(String, server_default=text("(datetime('now'))"))
    task_status = Column(String, default=TaskStatus.UNSENT.value, server_default=text("'unsent'"))

    @classmethod
    def natural_key_filter(cls, key):
        return and_(
            cls.registration_number == key.registration_number,
            cls.consult == key.consult,
            cls.date_and_time == key.date_and_time,
        )


class Consultation(ConsultationMixin, Base):
    __tablename__ = "consultations"
    __table_args__ = (
        CheckConstraint(check_in("task_status", TaskStatus), name="ck_consultations_task_status"),
    )

    def __repr__(self):
        return f"<Consultation {self.registration_number} ({self.task_status})>"


class OldConsultation(ConsultationMixin, Base):
    __tablename__ = "oldconsultations"
    __table_args__ = (
        CheckConstraint(check_in("task_status", TaskStatus), name="ck_oldconsultations_task_status"),
    )

    # Historical entries are recorded once per (registration number, text)
    SUPPRESS_DUPLICATES = True

    def __repr__(self):
        return f"<OldConsultation {self.registration_number} ({self.task_status})>"
