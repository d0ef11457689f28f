from .enums import Gender, Location, LabType, ImagingType, TaskStatus, Category, LedgerTable
from .patient import Patient
from .work_item import Task, OldLab
from .consultation import Consultation, OldConsultation
from .keys import WorkItemKey, ConsultationKey

# One model per ledger relation
LEDGER_MODELS = {
    LedgerTable.TASKS: Task,
    LedgerTable.OLDLABS: OldLab,
    LedgerTable.CONSULTATIONS: Consultation,
    LedgerTable.OLDCONSULTATIONS: OldConsultation,
}

__all__ = [
    "Gender",
    "Location",
    "LabType",
    "ImagingType",
    "TaskStatus",
    "Category",
    "LedgerTable",
    "Patient",
    "Task",
    "OldLab",
    "Consultation",
    "OldConsultation",
    "WorkItemKey",
    "ConsultationKey",
    "LEDGER_MODELS",
]
