import streamlit as st

from core.settings import configure_logging
from core.session_manager import init_session_state, ensure_database
from core.helpers import render_ward_sidebar
from core.time_utils import now_utc, format_local_datetime, STORE_DATETIME_FORMAT
from services.view_service import location_census, work_by_status
from models import TaskStatus


def go_to(page_path: str):
    st.switch_page(page_path)


def main():
    st.set_page_config(
        page_title="Ward Tasks",
        page_icon="🏥",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    configure_logging()
    ensure_database()
    init_session_state()
    render_ward_sidebar()

    cols = st.columns([4, 2])
    with cols[0]:
        st.title("Ward Tasks")
    with cols[1]:
        st.info(format_local_datetime(now_utc().strftime(STORE_DATETIME_FORMAT)))

    st.write("---")

    # Patients
    st.subheader("Patients")
    census = location_census()
    metric_cols = st.columns(len(census))
    for col, (location, count) in zip(metric_cols, census.items()):
        with col:
            st.metric(location, count)

    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("Add a new patient +", use_container_width=True):
            go_to("pages/add_patient.py")
    with c2:
        if st.button("Review current patients", use_container_width=True):
            go_to("pages/current_patients.py")
    with c3:
        if st.button("Review discharged patients", use_container_width=True):
            go_to("pages/discharged_patients.py")

    st.write("---")

    # Tasks
    st.subheader("Tasks")
    labels = {
        TaskStatus.UNSENT: "Pending",
        TaskStatus.SENT: "Reports to be collected",
        TaskStatus.COLLECTED: "Completed",
    }
    task_cols = st.columns(len(labels))
    for col, (status, label) in zip(task_cols, labels.items()):
        with col:
            st.metric(label, work_by_status(status).actionable())
            if st.button(f"Open {label.lower()}", key=f"home_{status.value}", use_container_width=True):
                st.session_state["task_status_filter"] = status.value
                go_to("pages/pending_tasks.py")


if __name__ == "__main__":
    main()
