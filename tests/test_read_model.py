from nurse_roster.core.lifecycle import Resolution, create_delete_request, resolve_request, submit_request
from nurse_roster.core.models import RequestType, Shift
from nurse_roster.core.read_model import (
    ROSTER_COLUMNS,
    month_grid,
    request_rows,
    roster_frame,
    shift_counts,
)
from nurse_roster.security.roles import NURSE_INCHARGE, NURSING_SUPERINTENDENT, STAFF_NURSE
from tests.conftest import make_nurse


def test_roster_frame_sorted_with_unknown_nurse(store):
    store.add_nurse(make_nurse("bob", STAFF_NURSE))
    store.upsert_duty("2024-01-02", "bob", Shift.NIGHT)
    store.upsert_duty("2024-01-01", "ghost", Shift.MORNING)

    df = roster_frame(store)

    assert list(df.columns) == ["Id"] + ROSTER_COLUMNS
    assert list(df["Date"]) == ["2024-01-01", "2024-01-02"]
    assert list(df["Nurse"]) == ["Unknown", "Bob"]
    assert df.iloc[1]["Role"] == STAFF_NURSE
    assert df.iloc[0]["Ward"] == "-"


def test_roster_frame_empty(store):
    df = roster_frame(store)
    assert df.empty
    assert list(df.columns) == ["Id"] + ROSTER_COLUMNS


def test_shift_counts_includes_every_shift(store):
    store.upsert_duty("2024-01-01", "bob", Shift.NIGHT)
    store.upsert_duty("2024-01-02", "bob", Shift.NIGHT)
    store.upsert_duty("2024-01-02", "ivy", Shift.OFF)

    assert shift_counts(store.duties) == {"Morning": 0, "Evening": 0, "Night": 2, "Off": 1}


def test_request_rows_can_act_flags(store):
    alice = store.add_nurse(make_nurse("alice", NURSING_SUPERINTENDENT))
    ivy = store.add_nurse(make_nurse("ivy", NURSE_INCHARGE))
    bob = store.add_nurse(make_nurse("bob", STAFF_NURSE))
    leave = submit_request(store, RequestType.LEAVE, bob, "2024-03-01", None)

    ivy_rows = request_rows(store, ivy)
    assert [(r["id"], r["can_act"]) for r in ivy_rows] == [(leave.id, True)]
    assert ivy_rows[0]["for"] == "Bob"
    assert ivy_rows[0]["date_range"] == "2024-03-01 – "

    bob_rows = request_rows(store, bob)
    assert [(r["id"], r["can_act"]) for r in bob_rows] == [(leave.id, False)]

    assert request_rows(store, alice) == []
    assert request_rows(store, None) == []


def test_request_rows_after_delete_shows_unknown(store):
    alice = store.add_nurse(make_nurse("alice", NURSING_SUPERINTENDENT))
    carol = store.add_nurse(make_nurse("carol", NURSING_SUPERINTENDENT))
    bob = store.add_nurse(make_nurse("bob", STAFF_NURSE))
    request = create_delete_request(store, alice, bob.id)
    resolve_request(store, request.id, carol, Resolution.APPROVE)

    rows = request_rows(store, alice)

    assert rows[0]["for"] == "Unknown"
    assert rows[0]["date_range"] == "-"
    assert rows[0]["status"] == "approved"
    assert not rows[0]["can_act"]


def test_month_grid_is_monday_first(store):
    # 1 Feb 2024 is a Thursday
    weeks = month_grid(store, 2024, 2)

    assert weeks[0][:3] == [None, None, None]
    assert weeks[0][3]["date"] == "2024-02-01"
    days = [c["day"] for week in weeks for c in week if c]
    assert days == list(range(1, 30))
    assert all(len(week) == 7 for week in weeks)


def test_month_grid_lines_and_filters(store):
    for name in ["ann", "bea", "cat", "dee"]:
        store.add_nurse(make_nurse(name, STAFF_NURSE))
        store.upsert_duty("2024-01-10", name, Shift.MORNING if name != "dee" else Shift.NIGHT)

    cell = _cell(month_grid(store, 2024, 1), "2024-01-10")
    assert cell["lines"] == ["M: Ann", "M: Bea", "M: Cat"]
    assert cell["more"] == 1

    cell = _cell(month_grid(store, 2024, 1, shift=Shift.NIGHT), "2024-01-10")
    assert cell["lines"] == ["N: Dee"] and cell["more"] == 0

    cell = _cell(month_grid(store, 2024, 1, nurse_id="bea"), "2024-01-10")
    assert cell["lines"] == ["M: Bea"]


def _cell(weeks, iso):
    return next(c for week in weeks for c in week if c and c["date"] == iso)
