import pytest

from nurse_roster.core import lifecycle
from nurse_roster.core.errors import (
    AlreadyResolved,
    InsufficientRank,
    InvalidInput,
    NoApprover,
    NotAuthenticated,
    NotFound,
    SelfApprovalForbidden,
)
from nurse_roster.core.lifecycle import (
    LifecycleError,
    Resolution,
    create_delete_request,
    resolve_request,
    submit_request,
    validate_transition,
)
from nurse_roster.core.models import RequestStatus, RequestType, Shift
from nurse_roster.security.roles import (
    NURSE_INCHARGE,
    NURSE_SUPERVISOR,
    NURSING_SUPERINTENDENT,
    STAFF_NURSE,
)
from tests.conftest import make_nurse


@pytest.fixture
def ward(store):
    alice = store.add_nurse(make_nurse("alice", NURSING_SUPERINTENDENT))
    carol = store.add_nurse(make_nurse("carol", NURSING_SUPERINTENDENT))
    ivy = store.add_nurse(make_nurse("ivy", NURSE_INCHARGE))
    bob = store.add_nurse(make_nurse("bob", STAFF_NURSE))
    store.upsert_duty("2024-01-01", "bob", Shift.MORNING)
    store.upsert_duty("2024-01-02", "bob", Shift.NIGHT)
    store.upsert_duty("2024-01-01", "ivy", Shift.EVENING)
    return store, alice, carol, ivy, bob


def test_transitions_only_leave_pending():
    validate_transition(RequestStatus.PENDING, RequestStatus.APPROVED)
    validate_transition(RequestStatus.PENDING, RequestStatus.REJECTED)

    for terminal in (RequestStatus.APPROVED, RequestStatus.REJECTED):
        for target in RequestStatus:
            with pytest.raises(LifecycleError):
                validate_transition(terminal, target)


def test_submit_routes_to_next_role(ward):
    store, alice, carol, ivy, bob = ward

    request = submit_request(store, RequestType.LEAVE, bob, "2024-03-01", "2024-03-05", " trip ")

    assert request.approver_role == NURSE_INCHARGE
    assert request.for_nurse_id == bob.id == request.created_by_nurse_id
    assert request.status == RequestStatus.PENDING
    assert request.remarks == "trip"
    assert store.get_request(request.id) is request


def test_submit_from_apex_role_has_no_approver(ward):
    store, alice, *_ = ward
    with pytest.raises(NoApprover):
        submit_request(store, RequestType.SHIFT_CHANGE, alice)
    assert store.requests == []


def test_submit_rejects_delete_type_and_anonymous(ward):
    store, *_, bob = ward
    with pytest.raises(InvalidInput):
        submit_request(store, RequestType.DELETE_NURSE, bob)
    with pytest.raises(NotAuthenticated):
        submit_request(store, RequestType.LEAVE, None)


def test_approver_role_fixed_at_creation(ward):
    store, alice, carol, ivy, bob = ward
    request = submit_request(store, RequestType.LEAVE, bob)

    bob.role = NURSE_SUPERVISOR

    assert store.get_request(request.id).approver_role == NURSE_INCHARGE


def test_delete_request_goes_to_superintendent(ward):
    store, alice, carol, ivy, bob = ward

    request = create_delete_request(store, ivy, bob.id)

    assert request.type == RequestType.DELETE_NURSE
    assert request.approver_role == NURSING_SUPERINTENDENT
    assert request.remarks == lifecycle.DELETE_REQUEST_REMARKS
    assert request.from_date is None and request.to_date is None


def test_delete_request_denied_for_equal_rank_and_unknown_target(ward):
    store, alice, carol, *_ = ward
    with pytest.raises(InsufficientRank):
        create_delete_request(store, alice, carol.id)
    with pytest.raises(NotFound):
        create_delete_request(store, alice, "nurse_missing")
    assert store.requests == []


def test_approving_delete_cascades_to_duties(ward):
    store, alice, carol, ivy, bob = ward
    request = create_delete_request(store, alice, bob.id)

    resolved = resolve_request(store, request.id, carol, Resolution.APPROVE)

    assert resolved.status == RequestStatus.APPROVED
    assert resolved.remarks.endswith("[Approved by Nursing Superintendent]")
    assert store.get_nurse(bob.id) is None
    assert all(d.nurse_id != bob.id for d in store.duties)
    assert len(store.duties) == 1


def test_rejecting_delete_leaves_nurse_and_duties(ward):
    store, alice, carol, ivy, bob = ward
    request = create_delete_request(store, alice, bob.id)

    resolved = resolve_request(store, request.id, carol, Resolution.REJECT)

    assert resolved.status == RequestStatus.REJECTED
    assert resolved.remarks == "Request to delete nurse [Rejected by Nursing Superintendent]"
    assert store.get_nurse(bob.id) is not None
    assert len(store.duties) == 3


def test_self_approval_forbidden_keeps_pending(ward):
    store, alice, carol, ivy, bob = ward
    request = create_delete_request(store, alice, bob.id)

    with pytest.raises(SelfApprovalForbidden):
        resolve_request(store, request.id, alice, Resolution.APPROVE)

    assert store.get_request(request.id).status == RequestStatus.PENDING
    assert store.get_nurse(bob.id) is not None


def test_second_resolution_fails_without_side_effects(ward):
    store, alice, carol, ivy, bob = ward
    request = submit_request(store, RequestType.LEAVE, bob, remarks="flu")
    resolve_request(store, request.id, ivy, Resolution.APPROVE)
    remarks = store.get_request(request.id).remarks

    with pytest.raises(AlreadyResolved):
        resolve_request(store, request.id, ivy, Resolution.REJECT)

    assert store.get_request(request.id).status == RequestStatus.APPROVED
    assert store.get_request(request.id).remarks == remarks == "flu [Approved by Nurse Incharge]"


def test_resolve_unknown_request(ward):
    store, alice, *_ = ward
    with pytest.raises(NotFound):
        resolve_request(store, "req_missing", alice, Resolution.APPROVE)


def test_cascade_failure_rolls_back_status(ward, monkeypatch):
    store, alice, carol, ivy, bob = ward
    request = create_delete_request(store, alice, bob.id)

    def boom(nurse_id):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(store, "remove_duties_for_nurse", boom)

    with pytest.raises(RuntimeError):
        resolve_request(store, request.id, carol, Resolution.APPROVE)

    restored = store.get_request(request.id)
    assert restored.status == RequestStatus.PENDING
    assert restored.remarks == lifecycle.DELETE_REQUEST_REMARKS
    assert store.get_nurse(bob.id) is not None
    assert len(store.duties) == 3
