"""Tests for the read-only projections."""
import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import StoreIOError, ValidationError
from models import Category, Consultation, LedgerTable, OldConsultation, Task, TaskStatus
from services.ledger_service import add_consultation, add_lab_or_imaging
from services.patient_service import discharge_patient
from services.view_service import (
    find_orphaned_rows,
    list_patients,
    location_census,
    patient_tasks,
    pending_by_category,
    table_counts,
    work_by_status,
)


class TestListPatients:

    def test_split_by_discharge_state(self, make_patient):
        make_patient("R1")
        make_patient("R2", patient_name="John Roe")
        discharge_patient("R2")

        assert [p.registration_number for p in list_patients()] == ["R1"]
        assert [p.registration_number for p in list_patients(discharged=True)] == ["R2"]

    def test_search_by_name_or_registration_number(self, make_patient):
        make_patient("R1", patient_name="Jane Doe")
        make_patient("X7", patient_name="John Roe")

        assert [p.registration_number for p in list_patients(search="jane")] == ["R1"]
        assert [p.registration_number for p in list_patients(search="x7")] == ["X7"]
        assert list_patients(search="nobody") == []

    def test_empty_store(self):
        assert list_patients() == []


class TestLocationCensus:

    def test_zero_filled_and_ignores_discharged(self, make_patient):
        make_patient("R1", location="ICU")
        make_patient("R2", location="ICU")
        make_patient("R3", location="Emergency")
        make_patient("R4", location="HDU")
        discharge_patient("R4")

        census = location_census()

        assert list(census) == ["Emergency", "ICU", "HDU", "Ward Male", "Ward Female", "Other"]
        assert census["ICU"] == 2
        assert census["Emergency"] == 1
        assert census["HDU"] == 0
        assert census["Other"] == 0


class TestWorkQueues:

    def test_pending_grouped_and_joined_with_patient(self, make_patient, insert_row):
        make_patient("R1", patient_name="Jane Doe")
        insert_row(Task, registration_number="R1", lab_type="blood", lab_subtype="LFT",
                   date_and_time="2024-03-02 08:00:00")
        insert_row(Task, registration_number="R1", lab_type="blood", lab_subtype="CBC",
                   date_and_time="2024-03-01 08:00:00")
        insert_row(Task, registration_number="R1", imaging_type="CT", imaging_subtype="Head",
                   date_and_time="2024-03-01 09:00:00", task_status="sent")
        insert_row(Consultation, registration_number="R1", consult="Cardio")
        insert_row(OldConsultation, registration_number="R1", consult="Neuro")

        queue = pending_by_category()

        assert [r.subtype for r in queue.labs] == ["CBC", "LFT"]
        assert queue.labs[0].patient_name == "Jane Doe"
        assert queue.labs[0].category == Category.LAB
        assert queue.imaging == []
        assert [c.consult for c in queue.consultations] == ["Cardio"]
        assert [c.consult for c in queue.old_consultations] == ["Neuro"]
        assert queue.total() == 4

    def test_other_statuses(self, make_patient, insert_row):
        make_patient("R1")
        insert_row(Task, registration_number="R1", imaging_type="MRI", imaging_subtype="Spine", task_status="sent")
        insert_row(Consultation, registration_number="R1", consult="Ortho", task_status="collected")

        sent = work_by_status(TaskStatus.SENT)
        collected = work_by_status("collected")

        assert [r.item_type for r in sent.imaging] == ["MRI"]
        assert [c.consult for c in collected.consultations] == ["Ortho"]
        assert sent.total() == 1

    def test_rows_without_patient_not_listed(self, insert_row):
        insert_row(Task, registration_number="GHOST", lab_type="blood", lab_subtype="CBC")
        assert pending_by_category().total() == 0


class TestPatientTasks:

    def test_everything_for_one_patient(self, make_patient):
        make_patient("R1")
        add_lab_or_imaging(LedgerTable.TASKS, "R1", Category.LAB, "blood", "CBC")
        add_lab_or_imaging(LedgerTable.TASKS, "R1", Category.IMAGING, "X-RAY", "Chest PA")
        add_lab_or_imaging(LedgerTable.OLDLABS, "R1", Category.LAB, "urine", "Routine")
        add_lab_or_imaging(LedgerTable.OLDLABS, "R1", Category.IMAGING, "USG", "Abdomen")
        add_consultation(LedgerTable.CONSULTATIONS, "R1", "Cardio")
        add_consultation(LedgerTable.OLDCONSULTATIONS, "R1", "Neuro")
        add_lab_or_imaging(LedgerTable.TASKS, "R2", Category.LAB, "blood", "LFT")

        tasks = patient_tasks("R1")

        assert [r.subtype for r in tasks.current_labs] == ["CBC"]
        assert tasks.current_labs[0].task_status == "unsent"
        assert [r.item_type for r in tasks.current_imaging] == ["X-RAY"]
        assert [r.subtype for r in tasks.old_labs] == ["Routine"]
        assert tasks.old_labs[0].task_status is None
        assert [r.subtype for r in tasks.old_imaging] == ["Abdomen"]
        assert [c.consult for c in tasks.consultations] == ["Cardio"]
        assert [c.consult for c in tasks.old_consultations] == ["Neuro"]

    def test_unknown_patient_is_empty(self):
        tasks = patient_tasks("NOPE")
        assert tasks.current_labs == [] and tasks.old_consultations == []


class TestStoreHealth:

    def test_find_orphaned_rows(self, make_patient, insert_row):
        make_patient("R1")
        insert_row(Task, registration_number="R1", lab_type="blood", lab_subtype="CBC")
        insert_row(Consultation, registration_number="OLD1", consult="Cardio")
        insert_row(Consultation, registration_number="OLD1", consult="Pulm")

        assert find_orphaned_rows() == {"consultations": {"OLD1": 2}}

    def test_table_counts(self, make_patient):
        make_patient("R1")
        add_consultation(LedgerTable.CONSULTATIONS, "R1", "Cardio")

        counts = table_counts()

        assert counts["patients"] == 1
        assert counts["consultations"] == 1
        assert counts["oldlabs"] == 0


class TestSearchEscaping:

    def test_wildcards_match_literally(self, make_patient):
        make_patient("R_1", patient_name="Ann Lee")
        make_patient("RX1", patient_name="Bob Lee")
        make_patient("P%2", patient_name="Cy Lee")

        assert [p.registration_number for p in list_patients(search="r_1")] == ["R_1"]
        assert [p.registration_number for p in list_patients(search="%")] == ["P%2"]


class TestQueueEdges:

    def test_invalid_status_is_validation_error(self):
        with pytest.raises(ValidationError):
            work_by_status("done")

    def test_old_consultations_only_in_pending(self, make_patient, insert_row):
        make_patient("R1")
        insert_row(OldConsultation, registration_number="R1", consult="Neuro", task_status="sent")
        insert_row(OldConsultation, registration_number="R1", consult="Derm")

        assert work_by_status("sent").old_consultations == []
        assert work_by_status("collected").total() == 0
        assert [c.consult for c in pending_by_category().old_consultations] == ["Derm"]

    def test_actionable_excludes_old_consultations(self, make_patient, insert_row):
        make_patient("R1")
        insert_row(Consultation, registration_number="R1", consult="Cardio")
        insert_row(OldConsultation, registration_number="R1", consult="Neuro")

        queue = pending_by_category()

        assert queue.actionable() == 1
        assert queue.total() == 2


class BrokenSession:
    """Stands in for a session whose connection has gone away."""

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))


class TestStoreHealthErrors:

    def test_find_orphaned_rows_wraps_store_errors(self):
        with pytest.raises(StoreIOError):
            find_orphaned_rows(db=BrokenSession())

    def test_table_counts_wraps_store_errors(self):
        with pytest.raises(StoreIOError):
            table_counts(db=BrokenSession())
