import streamlit as st

from core.exceptions import WardError
from core.helpers import render_ward_sidebar, patient_caption
from core.session_manager import ensure_database, init_session_state, select_patient
from services.patient_service import readmit_patient
from services.view_service import list_patients

# Page config is set globally in app.py

ensure_database()
init_session_state()
render_ward_sidebar()

st.title("Discharged Patients")

search_query = st.text_input("Search by name or registration number", placeholder="e.g., Jane or R100")
patients = list_patients(discharged=True, search=search_query)

if not patients:
    st.info("No discharged patients found.")
    st.stop()

for p in patients:
    with st.container():
        st.write(f"**{p.patient_name}**")
        st.caption(patient_caption(p))

        c1, c2 = st.columns(2)
        with c1:
            if st.button("View Tasks", key=f"tasks_{p.id}"):
                select_patient(p.registration_number, "pages/patient_tasks.py")
        with c2:
            if st.button("Re-admit", key=f"readmit_{p.id}"):
                try:
                    readmit_patient(p.registration_number)
                except WardError as e:
                    st.error(str(e))
                else:
                    st.success(f"{p.patient_name} re-admitted.")
                    st.rerun()
        st.markdown("---")
