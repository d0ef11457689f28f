import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar
from core.session_manager import ensure_database, require_patient, select_patient
from models import Gender, Location
from models.enums import values
from services.patient_service import get_patient, update_patient

# Page config is set globally in app.py

ensure_database()
render_ward_sidebar()

st.title("Edit Patient")

original_key = require_patient()
patient = get_patient(original_key)

if not patient:
    st.error("Patient not found.")
    st.stop()

genders = values(Gender)
locations = values(Location)

with st.form("edit_patient_form"):
    registration_number = st.text_input("Registration Number", value=patient.registration_number)
    patient_name = st.text_input("Patient Name", value=patient.patient_name)
    age = st.number_input("Age", min_value=0, max_value=130, step=1, value=int(patient.age or 0))
    gender = st.selectbox("Gender", genders, index=genders.index(patient.gender) if patient.gender in genders else 0)
    location = st.selectbox(
        "Location", locations, index=locations.index(patient.location) if patient.location in locations else 0
    )
    bed_number = st.number_input("Bed Number (0 = none)", min_value=0, step=1, value=int(patient.bed_number or 0))
    chief_complaints = st.text_area("Chief Complaints", value=patient.chief_complaints or "")
    provisional_diagnosis = st.text_area("Provisional Diagnosis", value=patient.provisional_diagnosis or "")
    misc_notes = st.text_area("Misc Notes", value=patient.misc_notes or "")
    contact = st.text_input("Contact Number", value=patient.contact)

    if registration_number.strip() != original_key:
        st.caption("Changing the registration number moves all of this patient's tasks and consultations with it.")

    submitted = st.form_submit_button("Save Changes", type="primary")

if submitted:
    try:
        updated = update_patient(
            original_key,
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
            },
        )
    except WardError as e:
        st.error(str(e))
    else:
        if updated:
            st.success("Patient details updated successfully.")
            select_patient(updated.registration_number, "pages/current_patients.py")
        else:
            st.error("Patient not found.")
