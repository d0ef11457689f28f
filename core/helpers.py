import streamlit as st

from core.time_utils import format_local_date, format_local_datetime


# -----------------------------
# Sidebar helpers
# -----------------------------
def hide_default_sidebar_nav():
    """Hide Streamlit's default multi-page navigation for a cleaner custom menu."""
    st.markdown(
        """
        <style>
        /* Hide the auto-generated Pages section */
        [data-testid="stSidebarNav"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_ward_sidebar():
    """Render the ward menu.

    Items:
    - Home
    - Add Patient
    - Current Patients
    - Discharged Patients
    - Pending Tasks
    """
    hide_default_sidebar_nav()
    with st.sidebar:
        st.markdown("### Ward Menu")
        if st.button("Home", use_container_width=True):
            st.switch_page("app.py")
        if st.button("Add Patient", use_container_width=True):
            st.switch_page("pages/add_patient.py")
        if st.button("Current Patients", use_container_width=True):
            st.switch_page("pages/current_patients.py")
        if st.button("Discharged Patients", use_container_width=True):
            st.switch_page("pages/discharged_patients.py")
        if st.button("Pending Tasks", use_container_width=True):
            st.switch_page("pages/pending_tasks.py")


# -----------------------------
# Display helpers
# -----------------------------
def show_timestamp(value: str) -> str:
    return format_local_datetime(value) if value else "-"


def show_date(value: str) -> str:
    return format_local_date(value) if value else "-"


def patient_caption(patient) -> str:
    bed = f" • Bed {patient.bed_number}" if patient.bed_number else ""
    return (
        f"Reg. No: {patient.registration_number} • Age: {patient.age} • {patient.gender} • "
        f"{patient.location}{bed} • Admitted: {show_date(patient.reg_date)}"
    )
