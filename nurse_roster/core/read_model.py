# nurse_roster/core/read_model.py

import calendar
from collections import Counter
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from nurse_roster.core.models import Duty, Nurse, Request, Shift
from nurse_roster.core.policy import can_act_on_request, is_allowed
from nurse_roster.core.roster_store import RosterStore

UNKNOWN_NURSE = "Unknown"
ROSTER_COLUMNS = ["Date", "Nurse", "Role", "Ward", "Shift"]
CALENDAR_MAX_LINES = 3


# ==================================================
# REQUEST VISIBILITY
# ==================================================

def visible_requests(store: RosterStore, actor: Nurse) -> List[Request]:
    """
    Requests shown to an actor:
    - pending requests routed to the actor's role
    - every request the actor created (any status)
    """
    return [
        r for r in store.requests
        if (r.is_pending and r.approver_role == actor.role)
        or r.created_by_nurse_id == actor.id
    ]


def request_rows(store: RosterStore, actor: Optional[Nurse]) -> List[Dict]:
    """Display rows for the requests table, with a per-row can_act flag."""
    if actor is None:
        return []

    rows = []
    for request in visible_requests(store, actor):
        for_nurse = store.get_nurse(request.for_nurse_id)

        if request.from_date or request.to_date:
            date_range = f"{request.from_date or ''} – {request.to_date or ''}"
        else:
            date_range = "-"

        rows.append({
            "id": request.id,
            "type": request.type.value,
            "for": for_nurse.name if for_nurse else UNKNOWN_NURSE,
            "date_range": date_range,
            "status": request.status.value,
            "remarks": request.remarks,
            "approver_role": request.approver_role,
            "can_act": is_allowed(can_act_on_request(actor, request)),
        })
    return rows


# ==================================================
# DUTY ROSTER
# ==================================================

def roster_frame(store: RosterStore, duties: Optional[List[Duty]] = None) -> pd.DataFrame:
    """
    Tabular roster (one row per duty), sorted by date.

    Duties of nurses that no longer exist show as "Unknown".
    """
    if duties is None:
        duties = store.filter_duties()

    records = []
    for duty in sorted(duties, key=lambda d: d.date):
        nurse = store.get_nurse(duty.nurse_id)
        records.append({
            "Id": duty.id,
            "Date": duty.date,
            "Nurse": nurse.name if nurse else UNKNOWN_NURSE,
            "Role": nurse.role if nurse else "-",
            "Ward": nurse.speciality if nurse else "-",
            "Shift": duty.shift.value,
        })

    return pd.DataFrame(records, columns=["Id"] + ROSTER_COLUMNS)


def shift_counts(duties: List[Duty]) -> Dict[str, int]:
    """Number of duties per shift, every shift present (zero if unused)."""
    counts = Counter(d.shift for d in duties)
    return {shift.value: counts.get(shift, 0) for shift in Shift}


# ==================================================
# MONTH CALENDAR
# ==================================================

def month_grid(
    store: RosterStore,
    year: int,
    month: int,
    nurse_id: Optional[str] = None,
    shift: Optional[Shift] = None,
) -> List[List[Optional[Dict]]]:
    """
    Monday-first weeks for a month.

    Days outside the month are None. Each day cell holds:
        date, day, is_today, lines (at most 3 "M: Name" entries), more
    """
    today = date.today()
    weeks = []

    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        cells: List[Optional[Dict]] = []
        for day in week:
            if day.month != month:
                cells.append(None)
                continue

            iso = day.isoformat()
            duties = [
                d for d in store.duties
                if d.date == iso
                and (not nurse_id or d.nurse_id == nurse_id)
                and (shift is None or d.shift == shift)
            ]

            lines = []
            for duty in duties[:CALENDAR_MAX_LINES]:
                nurse = store.get_nurse(duty.nurse_id)
                lines.append(f"{duty.shift.abbrev}: {nurse.name if nurse else UNKNOWN_NURSE}")

            cells.append({
                "date": iso,
                "day": day.day,
                "is_today": day == today,
                "lines": lines,
                "more": max(0, len(duties) - CALENDAR_MAX_LINES),
            })
        weeks.append(cells)

    return weeks
