"""Tests for the registration-number cascade."""
from core.database import get_db_context
from models import Consultation, OldConsultation, OldLab, Task
from services.identity_service import CASCADE_MODELS, propagate_rename


class TestPropagateRename:

    def test_covers_every_dependent_table(self):
        assert {m.__tablename__ for m in CASCADE_MODELS} == {
            "tasks", "oldlabs", "consultations", "oldconsultations",
        }

    def test_rekeys_rows_and_reports_counts(self, insert_row, fetch):
        insert_row(Task, registration_number="R100", lab_type="blood", lab_subtype="CBC")
        insert_row(Task, registration_number="R100", imaging_type="CT", imaging_subtype="Head")
        insert_row(OldLab, registration_number="R100", lab_type="urine", lab_subtype="Routine")
        insert_row(Consultation, registration_number="R100", consult="Cardio")
        insert_row(OldConsultation, registration_number="R100", consult="Neuro")
        insert_row(Task, registration_number="R999", lab_type="blood", lab_subtype="LFT")

        with get_db_context() as db:
            counts = propagate_rename(db, "R100", "R200")
            db.commit()

        assert counts == {"tasks": 2, "oldlabs": 1, "consultations": 1, "oldconsultations": 1}
        assert len(fetch(Task, registration_number="R200")) == 2
        assert len(fetch(Task, registration_number="R999")) == 1
        assert fetch(OldConsultation, registration_number="R100") == []

    def test_does_not_commit_on_its_own(self, insert_row, fetch):
        insert_row(Task, registration_number="R100", lab_type="blood", lab_subtype="CBC")

        with get_db_context() as db:
            propagate_rename(db, "R100", "R200")
            db.rollback()

        assert len(fetch(Task, registration_number="R100")) == 1
