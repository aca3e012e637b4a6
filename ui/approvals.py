"""
Requests Tab - raise leave / shift-change, approve or reject
"""
import streamlit as st

from nurse_roster.core.lifecycle import Resolution
from nurse_roster.core.models import RequestType
from nurse_roster.core.read_model import request_rows

SELF_SERVICE_TYPES = [t.value for t in RequestType if t.is_self_service]


def render_requests(service, actor):
    """Render the request form and the actor's requests table"""
    st.markdown("## 📨 Requests & Approvals")

    if actor is None:
        st.info("Login to see requests and approvals.")
        return

    with st.form("request_form", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        request_type = col1.selectbox("Type", SELF_SERVICE_TYPES)
        from_date = col2.date_input("From", value=None)
        to_date = col3.date_input("To", value=None)
        remarks = st.text_area("Remarks")
        submitted = st.form_submit_button("Submit Request", type="primary")

    if submitted:
        outcome = service.submit_request(request_type, actor, from_date, to_date, remarks)
        if outcome.ok:
            st.success(f"Request submitted to {outcome.value.approver_role}.")
        else:
            st.error(outcome.message)

    st.divider()

    rows = request_rows(service.store, actor)
    if not rows:
        st.info("No requests for you currently.")
        return

    for row in rows:
        with st.expander(f"{row['type']} • {row['for']} • {row['status']}", expanded=row["can_act"]):
            st.write(f"**Dates:** {row['date_range']}")
            st.write(f"**Approver:** {row['approver_role']}")
            if row["remarks"]:
                st.write(f"**Remarks:** {row['remarks']}")

            if not row["can_act"]:
                st.caption("No action")
                continue

            col1, col2 = st.columns(2)
            if col1.button("Approve", key=f"approve_{row['id']}"):
                _resolve(service, row["id"], actor, Resolution.APPROVE)
            if col2.button("Reject", key=f"reject_{row['id']}"):
                _resolve(service, row["id"], actor, Resolution.REJECT)


def _resolve(service, request_id, actor, resolution):
    outcome = service.resolve_request(request_id, actor, resolution)
    if outcome.ok:
        st.rerun()
    else:
        st.error(outcome.message)
