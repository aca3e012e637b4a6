"""
Duty Roster Tab - assign form, filters, roster table
"""
from datetime import date

import streamlit as st

from nurse_roster.core.models import Shift
from nurse_roster.core.read_model import roster_frame, shift_counts

SHIFT_OPTIONS = [s.value for s in Shift]


def render_duties(service, actor):
    """Render duty assignment and the filtered roster"""
    st.markdown("## 📋 Duty Roster")

    nurses = service.list_nurses()
    nurse_labels = {n.id: str(n) for n in nurses}

    if actor is None:
        st.info("Login to assign duties.")
    elif not nurses:
        st.info("Add nurses first.")
    else:
        with st.form("assign_duty_form"):
            col1, col2, col3 = st.columns(3)
            duty_date = col1.date_input("Date", value=date.today())
            nurse_id = col2.selectbox(
                "Nurse", list(nurse_labels), format_func=nurse_labels.get
            )
            shift = col3.selectbox("Shift", SHIFT_OPTIONS)
            submitted = st.form_submit_button("Save Duty", type="primary")

        if submitted:
            outcome = service.assign_duty(duty_date, nurse_id, shift, actor)
            if outcome.ok:
                st.success("Duty saved")
            else:
                st.error(outcome.message)

    st.divider()
    st.markdown("### 🔎 Filters")

    col1, col2, col3, col4 = st.columns(4)
    filter_nurse = col1.selectbox(
        "Nurse", [""] + list(nurse_labels),
        format_func=lambda v: nurse_labels.get(v, "All nurses"),
        key="filter_nurse",
    )
    from_date = col2.date_input("From", value=None, key="filter_from")
    to_date = col3.date_input("To", value=None, key="filter_to")
    filter_shift = col4.selectbox("Shift", [""] + SHIFT_OPTIONS, key="filter_shift",
                                  format_func=lambda v: v or "All shifts")

    duties = service.list_duties(
        nurse_id=filter_nurse or None,
        from_date=from_date,
        to_date=to_date,
        shift=filter_shift or None,
    )

    if not duties:
        st.info("No duties found for the selected filters.")
        return

    df = roster_frame(service.store, duties)
    st.dataframe(df.drop(columns=["Id"]), use_container_width=True, hide_index=True)

    st.download_button(
        "⬇️ Export CSV",
        df.drop(columns=["Id"]).to_csv(index=False),
        file_name="nurse_duty_roster.csv",
        mime="text/csv",
    )

    with st.expander("🗑️ Delete a duty"):
        labels = {row.Id: f"{row.Date} • {row.Nurse} • {row.Shift}" for row in df.itertuples()}
        duty_id = st.selectbox("Duty", list(labels), format_func=labels.get)
        if st.button("Delete", type="secondary"):
            outcome = service.delete_duty(duty_id)
            if outcome.ok:
                st.rerun()
            else:
                st.error(outcome.message)

    if st.button("📊 Shift Mix"):
        render_shift_mix(duties)


def render_shift_mix(duties):
    """Bar chart of duties per shift - ONLY when requested"""
    import pandas as pd
    import plotly.express as px

    counts = shift_counts(duties)
    df = pd.DataFrame({"Shift": list(counts), "Duties": list(counts.values())})
    fig = px.bar(df, x="Shift", y="Duties", title="Duties by Shift")
    st.plotly_chart(fig, use_container_width=True)
