"""Screen tests driven through Streamlit's AppTest."""
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from models import Category, Task, WorkItemKey

PAGES = Path(__file__).resolve().parents[1] / "pages"
STAMP = "2024-03-01 08:30:00"


@pytest.fixture
def sent_lab(insert_row):
    insert_row(Task, registration_number="R1", lab_type="blood", lab_subtype="CBC",
               date_and_time=STAMP, task_status="sent")
    return WorkItemKey("R1", STAMP, Category.LAB, "blood", "CBC")


def open_edit_task(key, status):
    at = AppTest.from_file(str(PAGES / "edit_task.py"), default_timeout=30)
    at.session_state["edit_task"] = {"table": "tasks", "key": key, "status": status}
    return at.run()


class TestEditTaskScreen:
    """The edit screen must not disturb the workflow state it was opened with."""

    def test_status_preselected(self, sent_lab):
        at = open_edit_task(sent_lab, "sent")
        assert at.selectbox[0].value == "sent"

    def test_subtype_only_edit_keeps_status(self, sent_lab, fetch):
        at = open_edit_task(sent_lab, "sent")
        at.text_input[0].set_value("CBC with ESR")
        at.main.button[0].click().run()

        (row,) = fetch(Task, registration_number="R1")
        assert row.lab_subtype == "CBC with ESR"
        assert row.task_status == "sent"

    def test_subtype_only_edit_allowed_in_strict_mode(self, sent_lab, fetch, monkeypatch):
        from core import settings

        monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", True)
        at = open_edit_task(sent_lab, "sent")
        at.text_input[0].set_value("CBC with ESR")
        at.main.button[0].click().run()

        (row,) = fetch(Task, registration_number="R1")
        assert row.lab_subtype == "CBC with ESR"
        assert row.task_status == "sent"

    def test_changed_status_is_saved(self, sent_lab, fetch):
        at = open_edit_task(sent_lab, "sent")
        at.selectbox[0].select("collected")
        at.main.button[0].click().run()

        (row,) = fetch(Task, registration_number="R1")
        assert row.task_status == "collected"
