import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar, show_timestamp
from core.session_manager import ensure_database, init_session_state, select_patient
from models import ConsultationKey, LedgerTable, TaskStatus, WorkItemKey
from models.enums import values
from services.ledger_service import advance_status, delete_item
from services.view_service import work_by_status

# Page config is set globally in app.py

ensure_database()
init_session_state()
render_ward_sidebar()

st.title("Tasks")

statuses = values(TaskStatus)
default_status = st.session_state.get("task_status_filter", TaskStatus.UNSENT.value)
status = st.radio(
    "Show", statuses, index=statuses.index(default_status), horizontal=True,
    format_func=lambda s: {"unsent": "Pending", "sent": "To be collected", "collected": "Completed"}[s],
)
st.session_state["task_status_filter"] = status

# Next step in the workflow for each status
NEXT_STATUS = {TaskStatus.UNSENT.value: TaskStatus.SENT, TaskStatus.SENT.value: TaskStatus.COLLECTED}

queue = work_by_status(status)

if not queue.total():
    st.info("Nothing here right now.")
    st.stop()


def act(action, success: str):
    try:
        action()
    except WardError as e:
        st.error(str(e))
    else:
        st.success(success)
        st.rerun()


def render_rows(title: str, table: LedgerTable, rows, make_key, describe, can_advance: bool):
    if not rows:
        return
    st.subheader(f"{title} ({len(rows)})")
    for row in rows:
        row_key = make_key(row)
        left, right = st.columns([3, 2])
        with left:
            st.write(f"**{row.patient_name}** ({row.registration_number}) - {describe(row)}")
            st.caption(show_timestamp(row.date_and_time))
        with right:
            c1, c2, c3 = st.columns(3)
            with c1:
                next_status = NEXT_STATUS.get(row.task_status)
                if can_advance and next_status:
                    if st.button(f"Mark {next_status.value}", key=f"adv_{table.value}_{row.id}"):
                        act(lambda: advance_status(table, row_key, next_status), f"Marked as {next_status.value}.")
            with c2:
                if st.button("Patient", key=f"open_{table.value}_{row.id}"):
                    select_patient(row.registration_number, "pages/patient_tasks.py")
            with c3:
                if st.button("Delete", key=f"del_{table.value}_{row.id}"):
                    act(lambda: delete_item(table, row_key), "Task deleted successfully.")
    st.markdown("---")


render_rows("Labs", LedgerTable.TASKS, queue.labs, WorkItemKey.for_row,
            lambda r: f"{r.item_type} / {r.subtype}", can_advance=True)
render_rows("Imaging", LedgerTable.TASKS, queue.imaging, WorkItemKey.for_row,
            lambda r: f"{r.item_type} / {r.subtype}", can_advance=True)
render_rows("Consultations", LedgerTable.CONSULTATIONS, queue.consultations, ConsultationKey.for_row,
            lambda r: r.consult, can_advance=True)
# Archived consultations keep a status but have no workflow; they can only be removed here
render_rows("Old Consultations", LedgerTable.OLDCONSULTATIONS, queue.old_consultations, ConsultationKey.for_row,
            lambda r: r.consult, can_advance=False)
