"""
Session panel - login form or current user card
"""
import streamlit as st

from nurse_roster.notifications.in_app_notifier import get_notifications_for_nurse, mark_as_read


def render_session(service):
    """Render login form, or the logged-in nurse with logout + inbox"""
    actor = service.current_actor()

    if actor is None:
        st.markdown("### 🔐 Login")
        with st.form("login_form", clear_on_submit=True):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", type="primary")

        if submitted:
            outcome = service.authenticate(username, password)
            if outcome.ok:
                st.rerun()
            else:
                st.error(outcome.message)

        if not service.list_nurses():
            st.info("No nurses yet. Add the first nurse from the Nurses tab (no login needed).")
        return

    st.markdown(f"### 👤 {actor.name}")
    st.write(f"**Role:** {actor.role}")
    st.write(f"**Ward:** {actor.speciality}")
    st.write(f"**Username:** {actor.username}")

    if st.button("Logout"):
        service.logout()
        st.rerun()

    render_inbox(actor)

    st.divider()
    with st.expander("⚠️ Danger zone"):
        st.caption("Deletes all nurses, duties and requests.")
        confirm = st.checkbox("I understand", key="confirm_clear_all")
        if st.button("Clear all data", disabled=not confirm):
            service.clear_all()
            st.rerun()


def render_inbox(actor):
    """Role and personal notifications (unread first 10)"""
    notifications = get_notifications_for_nurse(actor, unread_only=True)

    st.divider()
    st.markdown(f"### 🔔 Inbox ({len(notifications)})")

    for n in notifications[:10]:
        col1, col2 = st.columns([4, 1])
        col1.write(n["message"])
        if col2.button("✓", key=f"read_{n['id']}"):
            mark_as_read(n["id"])
            st.rerun()
