import streamlit as st

from core.database import init_db, is_initialized
from core.exceptions import WardError


def init_session_state():
    """Ensure required session keys exist."""
    if "selected_patient" not in st.session_state:
        st.session_state.selected_patient = None
    if "edit_task" not in st.session_state:
        st.session_state.edit_task = None


def ensure_database():
    """Initialise the store once per process; stop the page if that fails."""
    if is_initialized():
        return
    try:
        init_db()
    except WardError as e:
        st.error(str(e))
        st.stop()


def select_patient(registration_number: str, page: str | None = None):
    """Remember the patient the next screen works on, optionally switching to it."""
    st.session_state.selected_patient = registration_number
    if page:
        st.switch_page(page)


def require_patient() -> str:
    """Return the selected registration number or send the user back to the list."""
    init_session_state()
    key = st.session_state.selected_patient
    if not key:
        st.error("No patient selected. Please go back to the patient list.")
        if st.button("Back to Patient List"):
            st.switch_page("pages/current_patients.py")
        st.stop()
    return key


def clear_selection():
    st.session_state.pop("selected_patient", None)
    st.session_state.pop("edit_task", None)
