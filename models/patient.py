# models/patient.py

from sqlalchemy import Column, Integer, String, Text, CheckConstraint, text
from core.database import Base
from models.enums import Gender, Location, check_in


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = (
        CheckConstraint(check_in("gender", Gender), name="ck_patients_gender"),
        CheckConstraint(check_in("location", Location), name="ck_patients_location"),
        CheckConstraint('"is_discharged" IN (0, 1)', name="ck_patients_is_discharged"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # User-assigned hospital registration number; the patient's identity
    registration_number = Column("registrationNumber", String, unique=True, index=True, nullable=False)

    # Demographics
    patient_name = Column("patientName", String, nullable=False)
    age = Column(Integer)
    gender = Column(String, nullable=False)

    # Where the patient is admitted
    location = Column(String)
    bed_number = Column("bedNumber", Integer, nullable=True)

    # Free-text clinical notes
    chief_complaints = Column("chiefComplaints", Text, nullable=True)
    provisional_diagnosis = Column("provisionalDiagnosis", Text, nullable=True)
    misc_notes = Column("miscNotes", Text, nullable=True)

    contact = Column(String, nullable=False)

    # Admission date, UTC, set by the store
    reg_date = Column(String, server_default=text("(date('now'))"))

    # 0 = admitted, 1 = discharged
    is_discharged = Column(Integer, nullable=False, default=0, server_default=text("0"))

    def __repr__(self):
        return f"<Patient {self.registration_number} - {self.patient_name}>"
