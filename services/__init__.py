from .patient_service import create_patient, update_patient, set_discharged, get_patient
from .ledger_service import add_lab_or_imaging, add_consultation, advance_status, edit_subtype_and_status, delete_item

# View projections are imported from services.view_service directly where needed.

__all__ = [
    "create_patient",
    "update_patient",
    "set_discharged",
    "get_patient",
    "add_lab_or_imaging",
    "add_consultation",
    "advance_status",
    "edit_subtype_and_status",
    "delete_item",
]
