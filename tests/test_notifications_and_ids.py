from nurse_roster.core.id_generator import clear_id_cache, generate_id, reserve_ids
from nurse_roster.core.lifecycle import Resolution, resolve_request, submit_request
from nurse_roster.core.models import RequestType
from nurse_roster.notifications.in_app_notifier import (
    get_notifications_for,
    get_notifications_for_nurse,
    get_unread_count,
    handle_request_resolved,
    handle_request_submitted,
    mark_as_read,
)
from nurse_roster.security.roles import NURSE_INCHARGE, STAFF_NURSE
from tests.conftest import make_nurse


def test_generate_id_format_and_uniqueness():
    ids = {generate_id("req") for _ in range(500)}
    assert len(ids) == 500
    for record_id in ids:
        prefix, suffix = record_id.split("_")
        assert prefix == "req"
        assert len(suffix) == 7 and suffix.isalnum() and suffix.lower() == suffix


def test_reserved_ids_are_not_reissued(monkeypatch):
    clear_id_cache()
    reserve_ids(["duty_aaaaaaa"])
    choices = iter([list("aaaaaaa"), list("bbbbbbb")])
    monkeypatch.setattr("nurse_roster.core.id_generator.random.choices", lambda *a, **k: next(choices))

    assert generate_id("duty") == "duty_bbbbbbb"


def test_submission_and_resolution_notifications(store):
    ivy = store.add_nurse(make_nurse("ivy", NURSE_INCHARGE))
    bob = store.add_nurse(make_nurse("bob", STAFF_NURSE))
    request = submit_request(store, RequestType.LEAVE, bob)

    handle_request_submitted(request, bob)
    inbox = get_notifications_for(NURSE_INCHARGE)
    assert len(inbox) == 1
    assert inbox[0]["request_id"] == request.id
    assert get_unread_count(NURSE_INCHARGE) == 1

    resolve_request(store, request.id, ivy, Resolution.APPROVE)
    handle_request_resolved(request, ivy)

    personal = get_notifications_for_nurse(bob)
    assert [n["event_type"] for n in personal] == ["REQUEST_APPROVED"]
    assert "approved by Nurse Incharge" in personal[0]["message"]


def test_mark_as_read_checks_recipient(store):
    bob = store.add_nurse(make_nurse("bob", STAFF_NURSE))
    request = submit_request(store, RequestType.SHIFT_CHANGE, bob)
    handle_request_submitted(request, bob)
    notification_id = get_notifications_for(NURSE_INCHARGE)[0]["id"]

    assert not mark_as_read(notification_id, recipient=STAFF_NURSE)
    assert mark_as_read(notification_id, recipient=NURSE_INCHARGE)
    assert get_unread_count(NURSE_INCHARGE) == 0
    assert get_notifications_for(NURSE_INCHARGE, unread_only=True) == []
