"""
Nurses Tab - nurse master list + add form
"""
from datetime import date

import streamlit as st

from nurse_roster.core.policy import can_request_delete_nurse, is_allowed
from nurse_roster.security.roles import ALL_ROLES, roles_at_or_below

GENDERS = ["Female", "Male", "Other"]
BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
SPECIALITIES = ["General Ward", "ICU", "Emergency", "Pediatrics", "Maternity", "Surgery", "OPD"]


def render_nurses(service, actor):
    """Render add-nurse form and the nurse table"""
    st.markdown("## 👩‍⚕️ Nurse Master")

    nurses = service.list_nurses()

    # First nurse ever may pick any role; afterwards only roles at or below the actor's
    if not nurses:
        allowed_roles = ALL_ROLES
        st.info("Bootstrap: the first nurse can be created without login.")
    elif actor is None:
        allowed_roles = []
        st.warning("Please login to add nurses.")
    else:
        allowed_roles = roles_at_or_below(actor.role)

    if allowed_roles:
        render_add_form(service, actor, allowed_roles)

    st.divider()
    render_nurse_table(service, actor, nurses)


def render_add_form(service, actor, allowed_roles):
    with st.form("add_nurse_form", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            name = st.text_input("Name")
            dob = st.date_input(
                "Date of birth", value=None,
                min_value=date(1940, 1, 1), max_value=date.today(),
            )
            gender = st.selectbox("Gender", GENDERS)
        with col2:
            experience = st.number_input("Experience (years)", min_value=0, value=0, step=1)
            blood_group = st.selectbox("Blood group", BLOOD_GROUPS)
            speciality = st.selectbox("Ward / Speciality", SPECIALITIES)
        with col3:
            role = st.selectbox("Role", allowed_roles)
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")

        submitted = st.form_submit_button("Add Nurse", type="primary")

    if submitted:
        outcome = service.create_nurse(
            {
                "name": name,
                "dob": dob,
                "gender": gender,
                "experience": experience,
                "blood_group": blood_group,
                "speciality": speciality,
                "role": role,
                "username": username,
                "password": password,
            },
            actor,
        )
        if outcome.ok:
            st.success(f"✅ {outcome.value.name} added")
            st.rerun()
        else:
            st.error(outcome.message)


def render_nurse_table(service, actor, nurses):
    if not nurses:
        st.info("No nurses added yet.")
        return

    header = st.columns([3, 3, 2, 1, 2])
    for col, title in zip(header, ["Name", "Role", "Ward", "Exp.", "Action"]):
        col.markdown(f"**{title}**")

    for nurse in nurses:
        cols = st.columns([3, 3, 2, 1, 2])
        cols[0].write(nurse.name)
        cols[1].write(nurse.role)
        cols[2].write(nurse.speciality)
        cols[3].write(nurse.experience)

        if is_allowed(can_request_delete_nurse(actor, nurse)):
            if cols[4].button("Request Delete", key=f"del_nurse_{nurse.id}"):
                outcome = service.request_delete_nurse(nurse.id, actor)
                if outcome.ok:
                    st.success("Deletion requested. Final approval by Nursing Superintendent.")
                    st.rerun()
                else:
                    st.error(outcome.message)
        else:
            cols[4].caption("No rights")
