import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar
from core.session_manager import ensure_database, init_session_state, select_patient
from models import Gender, Location
from models.enums import values
from services.patient_service import create_patient

# Page config is set globally in app.py

ensure_database()
init_session_state()
render_ward_sidebar()

st.title("Add a New Patient")

with st.form("patient_form"):
    registration_number = st.text_input("Registration Number")
    patient_name = st.text_input("Patient Name", placeholder="Jane Doe")
    age = st.number_input("Age", min_value=0, max_value=130, step=1)
    gender = st.selectbox("Gender", values(Gender))
    location = st.selectbox("Location", values(Location))
    bed_number = st.number_input("Bed Number (0 = none)", min_value=0, step=1)
    chief_complaints = st.text_area("Chief Complaints")
    provisional_diagnosis = st.text_area("Provisional Diagnosis")
    misc_notes = st.text_area("Misc Notes")
    contact = st.text_input("Contact Number")
    submitted = st.form_submit_button("Add Patient")

    if submitted:
        try:
            patient = create_patient(
                {
                    "registration_number": registration_number,
                    "patient_name": patient_name,
                    "age": age,
                    "gender": gender,
                    "location": location,
                    "bed_number": bed_number or None,
                    "chief_complaints": chief_complaints,
                    "provisional_diagnosis": provisional_diagnosis,
                    "misc_notes": misc_notes,
                    "contact": contact,
                }
            )
        except WardError as e:
            st.error(str(e))
        else:
            st.success(f"Patient added! Reg. No: {patient.registration_number}")
            select_patient(patient.registration_number, "pages/patient_tasks.py")
