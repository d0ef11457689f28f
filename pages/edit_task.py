import dataclasses

import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar, show_timestamp
from core.session_manager import ensure_database
from models import LedgerTable, TaskStatus
from models.enums import values
from services.ledger_service import edit_subtype_and_status

# Page config is set globally in app.py

ensure_database()
render_ward_sidebar()

st.title("Edit Task")

target = st.session_state.get("edit_task")
if not target:
    st.error("Invalid task parameters.")
    if st.button("Back to Patient"):
        st.switch_page("pages/patient_tasks.py")
    st.stop()

table = LedgerTable(target["table"])
key = target["key"]
current_status = target.get("status")

st.caption(f"{key.registration_number} • {key.item_type} • {show_timestamp(key.date_and_time)}")

with st.form("edit_task_form"):
    subtype = st.text_input("Subtype", value=key.subtype or "")
    status = None
    if table == LedgerTable.TASKS:
        statuses = values(TaskStatus)
        status = st.selectbox(
            "Status", statuses, index=statuses.index(current_status) if current_status in statuses else 0
        )
    else:
        st.caption("Archived orders have no status.")
    submitted = st.form_submit_button("Save", type="primary")

if submitted:
    # Leave the status alone unless it was actually changed
    if status == current_status:
        status = None
    try:
        # Identify the row by registration number, timestamp and type only
        lookup = dataclasses.replace(key, subtype=None)
        count = edit_subtype_and_status(table, lookup, subtype, status)
    except WardError as e:
        st.error(str(e))
    else:
        if count:
            st.success("Task updated successfully.")
            st.session_state.pop("edit_task", None)
            st.switch_page("pages/patient_tasks.py")
        else:
            st.warning("No matching task found; it may have been deleted.")
