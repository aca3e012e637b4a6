"""
Calendar Tab - month grid of duties
"""
import calendar
from datetime import date

import streamlit as st

from nurse_roster.core.models import Shift
from nurse_roster.core.read_model import month_grid

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def render_calendar(service):
    """Render the month calendar with prev / next navigation"""
    if "calendar_month" not in st.session_state:
        today = date.today()
        st.session_state.calendar_month = (today.year, today.month)

    year, month = st.session_state.calendar_month

    col1, col2, col3 = st.columns([1, 4, 1])
    if col1.button("◀ Prev"):
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        st.session_state.calendar_month = (year, month)
        st.rerun()
    col2.markdown(f"### 📅 {calendar.month_name[month]} {year}")
    if col3.button("Next ▶"):
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
        st.session_state.calendar_month = (year, month)
        st.rerun()

    # Reuse the roster tab filters
    nurse_id = st.session_state.get("filter_nurse") or None
    shift = Shift.from_value(st.session_state.get("filter_shift"))

    header = st.columns(7)
    for col, name in zip(header, WEEKDAYS):
        col.markdown(f"**{name}**")

    for week in month_grid(service.store, year, month, nurse_id=nurse_id, shift=shift):
        cols = st.columns(7)
        for col, cell in zip(cols, week):
            if cell is None:
                col.write("")
                continue
            label = f"**{cell['day']}**" + (" 🟢" if cell["is_today"] else "")
            lines = [label] + cell["lines"]
            if cell["more"]:
                lines.append(f"+{cell['more']} more")
            col.markdown("  \n".join(lines))
