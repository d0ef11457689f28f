import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar, patient_caption, show_timestamp
from core.session_manager import ensure_database, require_patient
from models import Category, ConsultationKey, ImagingType, LabType, LedgerTable, TaskStatus, WorkItemKey
from models.enums import values
from services.ledger_service import add_consultation, add_lab_or_imaging, advance_status, delete_item
from services.patient_service import get_patient
from services.view_service import patient_tasks

# Page config is set globally in app.py

ensure_database()
render_ward_sidebar()

key = require_patient()
patient = get_patient(key)

if not patient:
    st.error("Patient not found.")
    st.stop()

st.title(f"{patient.patient_name}")
st.caption(patient_caption(patient))
if patient.is_discharged:
    st.warning("This patient is discharged.")


def run(action, success: str):
    """Call a ledger operation and report the outcome on the page."""
    try:
        result = action()
    except WardError as e:
        st.error(str(e))
        return None
    st.success(success)
    return result


# -----------------------------
# Add work
# -----------------------------
with st.expander("➕ Add Tasks", expanded=False):
    tab_lab, tab_imaging, tab_consult = st.tabs(["Lab", "Imaging", "Consultation"])

    with tab_lab:
        lab_type = st.selectbox("Lab type", values(LabType), key="lab_type")
        lab_subtype = st.text_input("Lab subtype", placeholder="e.g., CBC", key="lab_subtype")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Add lab task", key="add_lab"):
                run(lambda: add_lab_or_imaging(LedgerTable.TASKS, key, Category.LAB, lab_type, lab_subtype),
                    "Lab task added successfully!")
        with c2:
            if st.button("Record old lab", key="add_old_lab"):
                run(lambda: add_lab_or_imaging(LedgerTable.OLDLABS, key, Category.LAB, lab_type, lab_subtype),
                    "Old lab task added successfully!")

    with tab_imaging:
        imaging_type = st.selectbox("Imaging type", values(ImagingType), key="imaging_type")
        imaging_subtype = st.text_input("Imaging subtype", placeholder="e.g., Chest PA", key="imaging_subtype")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Add imaging task", key="add_imaging"):
                run(lambda: add_lab_or_imaging(LedgerTable.TASKS, key, Category.IMAGING, imaging_type, imaging_subtype),
                    "Imaging task added successfully!")
        with c2:
            if st.button("Record old imaging", key="add_old_imaging"):
                run(lambda: add_lab_or_imaging(LedgerTable.OLDLABS, key, Category.IMAGING, imaging_type, imaging_subtype),
                    "Old imaging task added successfully!")

    with tab_consult:
        consult_text = st.text_area("Consultation", key="consult_text")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Add consultation", key="add_consult"):
                run(lambda: add_consultation(LedgerTable.CONSULTATIONS, key, consult_text),
                    "Consultation added successfully!")
        with c2:
            if st.button("Record old consultation", key="add_old_consult"):
                try:
                    _, warning = add_consultation(LedgerTable.OLDCONSULTATIONS, key, consult_text)
                except WardError as e:
                    st.error(str(e))
                else:
                    if warning:
                        st.warning(warning)
                    else:
                        st.success("Old consultation added successfully!")

st.markdown("---")

tasks = patient_tasks(key)


def work_section(title: str, table: LedgerTable, rows):
    st.subheader(title)
    if not rows:
        st.caption("None recorded.")
        return
    for row in rows:
        item_key = WorkItemKey.for_row(row)
        left, right = st.columns([3, 2])
        with left:
            st.write(f"**{row.item_type}** - {row.subtype}")
            status = f" • {row.task_status}" if row.task_status else ""
            st.caption(f"{show_timestamp(row.date_and_time)}{status}")
        with right:
            c1, c2, c3 = st.columns(3)
            with c1:
                if st.button("Edit", key=f"edit_{table.value}_{row.id}"):
                    st.session_state["edit_task"] = {"table": table.value, "key": item_key, "status": row.task_status}
                    st.switch_page("pages/edit_task.py")
            with c2:
                if table == LedgerTable.TASKS and row.task_status == TaskStatus.UNSENT.value:
                    if st.button("Sent", key=f"sent_{table.value}_{row.id}"):
                        if run(lambda: advance_status(table, item_key, TaskStatus.SENT), "Task marked as sent."):
                            st.rerun()
            with c3:
                if st.button("Delete", key=f"del_{table.value}_{row.id}"):
                    if run(lambda: delete_item(table, item_key), "Task deleted successfully.") is not None:
                        st.rerun()


def consultation_section(title: str, table: LedgerTable, rows):
    st.subheader(title)
    if not rows:
        st.caption("None recorded.")
        return
    for row in rows:
        consult_key = ConsultationKey.for_row(row)
        left, right = st.columns([3, 2])
        with left:
            st.write(row.consult)
            st.caption(f"{show_timestamp(row.date_and_time)} • {row.task_status}")
        with right:
            c1, c2 = st.columns(2)
            with c1:
                if table == LedgerTable.CONSULTATIONS and row.task_status == TaskStatus.UNSENT.value:
                    if st.button("Sent", key=f"sent_{table.value}_{row.id}"):
                        if run(lambda: advance_status(table, consult_key, TaskStatus.SENT), "Consultation marked as sent."):
                            st.rerun()
            with c2:
                if st.button("Delete", key=f"del_{table.value}_{row.id}"):
                    if run(lambda: delete_item(table, consult_key), "Consultation deleted successfully.") is not None:
                        st.rerun()


work_section("Current Labs", LedgerTable.TASKS, tasks.current_labs)
work_section("Current Imaging", LedgerTable.TASKS, tasks.current_imaging)
consultation_section("Consultations", LedgerTable.CONSULTATIONS, tasks.consultations)

with st.expander("Archived records", expanded=False):
    work_section("Old Labs", LedgerTable.OLDLABS, tasks.old_labs)
    work_section("Old Imaging", LedgerTable.OLDLABS, tasks.old_imaging)
    consultation_section("Old Consultations", LedgerTable.OLDCONSULTATIONS, tasks.old_consultations)
