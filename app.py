"""
Nurse Duty Roster - Streamlit front end
Thin views over RosterService: every button calls one service command
"""
import logging

import streamlit as st

from nurse_roster.config import LOG_FORMAT, LOG_LEVEL
from nurse_roster.core.service import RosterService

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

# ═══════════════════════════════════════════════════════════════
# PAGE CONFIG (MUST BE FIRST)
# ═══════════════════════════════════════════════════════════════
st.set_page_config(
    page_title="Nurse Duty Roster",
    layout="wide",
    initial_sidebar_state="expanded"
)

# ═══════════════════════════════════════════════════════════════
# SERVICE (LOADED ONCE PER SESSION)
# ═══════════════════════════════════════════════════════════════
if "service" not in st.session_state:
    st.session_state.service = RosterService.load()

service: RosterService = st.session_state.service

# ═══════════════════════════════════════════════════════════════
# SIDEBAR: LOGIN / CURRENT USER
# ═══════════════════════════════════════════════════════════════
with st.sidebar:
    from ui.session import render_session
    render_session(service)

actor = service.current_actor()

# ═══════════════════════════════════════════════════════════════
# HEADER
# ═══════════════════════════════════════════════════════════════
st.title("🩺 Nurse Duty Roster")
st.caption("Roles • Duties • Approvals")

tab_names = ["👩‍⚕️ Nurses", "📋 Duty Roster", "📅 Calendar", "📨 Requests"]
tabs = st.tabs(tab_names)

with tabs[0]:
    from ui.nurses import render_nurses
    render_nurses(service, actor)

with tabs[1]:
    from ui.duties import render_duties
    render_duties(service, actor)

with tabs[2]:
    from ui.calendar_view import render_calendar
    render_calendar(service)

with tabs[3]:
    from ui.approvals import render_requests
    render_requests(service, actor)
