import streamlit as st
from streamlit_searchbox import st_searchbox

from core.exceptions import WardError
from core.helpers import render_ward_sidebar, patient_caption
from core.session_manager import ensure_database, init_session_state, select_patient
from services.patient_service import discharge_patient
from services.view_service import list_patients, location_census

# Page config is set globally in app.py

ensure_database()
init_session_state()
render_ward_sidebar()

st.title("Current Patients")

# Census per location
census = location_census()
cols = st.columns(len(census))
for col, (location, count) in zip(cols, census.items()):
    with col:
        st.metric(location, count)


def patient_lookup(term: str):
    term = (term or "").strip()
    if not term:
        return []
    return [
        (f"{p.patient_name} ({p.registration_number})", p.registration_number)
        for p in list_patients(search=term)[:10]
    ]


# Quick jump to a patient's tasks
picked = st_searchbox(patient_lookup, key="patient_search", placeholder="Search by name or registration number")
if picked:
    select_patient(picked, "pages/patient_tasks.py")

detailed = st.toggle("Detailed view", value=False)
location_filter = st.selectbox("Location", ["All"] + list(census.keys()))

patients = list_patients()
if location_filter != "All":
    patients = [p for p in patients if p.location == location_filter]

if not patients:
    st.info("No patients found.")
    st.stop()

st.markdown("---")

for p in patients:
    with st.container():
        st.write(f"**{p.patient_name}**")
        st.caption(patient_caption(p))
        if detailed:
            st.write(f"Chief complaints: {p.chief_complaints or '-'}")
            st.write(f"Provisional diagnosis: {p.provisional_diagnosis or '-'}")
            st.write(f"Notes: {p.misc_notes or '-'}")
            st.write(f"Contact: {p.contact}")

        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button("View / Add Tasks", key=f"tasks_{p.id}"):
                select_patient(p.registration_number, "pages/patient_tasks.py")
        with c2:
            if st.button("Edit Patient", key=f"edit_{p.id}"):
                select_patient(p.registration_number, "pages/edit_patient.py")
        with c3:
            if st.button("Discharge", key=f"discharge_{p.id}"):
                try:
                    discharge_patient(p.registration_number)
                except WardError as e:
                    st.error(str(e))
                else:
                    st.success(f"{p.patient_name} discharged.")
                    st.rerun()
        st.markdown("---")
