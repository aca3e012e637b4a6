# nurse_roster/core/lifecycle.py

import logging
from enum import Enum
from typing import Optional

from nurse_roster.core.errors import (
    ErrorKind,
    InvalidInput,
    NoApprover,
    NotFound,
    RosterError,
    error_for,
)
from nurse_roster.core.id_generator import generate_id
from nurse_roster.core.models import Nurse, Request, RequestStatus, RequestType
from nurse_roster.core.policy import (
    can_act_on_request,
    can_request_delete_nurse,
    can_submit_request,
)
from nurse_roster.core.roster_store import RosterStore
from nurse_roster.security.roles import DELETE_APPROVER_ROLE, next_approver_role

logger = logging.getLogger(__name__)


class LifecycleError(RosterError):
    """Raised when an invalid request status transition is attempted."""
    kind = ErrorKind.ALREADY_RESOLVED


class Resolution(Enum):
    APPROVE = "approve"
    REJECT = "reject"


# Single source of truth for request status transitions
REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: set(),  # Terminal state
    RequestStatus.REJECTED: set(),  # Terminal state
}

DELETE_REQUEST_REMARKS = "Request to delete nurse"


def validate_transition(current: RequestStatus, target: RequestStatus) -> None:
    """
    Validate whether a request status transition is allowed.

    Raises LifecycleError if invalid.
    """
    allowed = REQUEST_TRANSITIONS.get(current)
    if allowed is None:
        raise LifecycleError(f"Unknown request status: {current}")

    if target not in allowed:
        raise LifecycleError(
            f"Invalid transition: {current.value} → {target.value}"
        )


def _require(decision) -> None:
    allowed, reason = decision
    if not allowed:
        raise error_for(reason)


# ==================================================
# SUBMISSION
# ==================================================

def submit_request(
    store: RosterStore,
    request_type: RequestType,
    created_by: Optional[Nurse],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    remarks: str = "",
) -> Request:
    """
    Raise a self-service (leave / shift-change) request for `created_by`.

    The request always concerns its creator and is routed to the role
    directly above the creator's. The apex role has nobody to route to.
    """
    _require(can_submit_request(created_by))

    if not request_type.is_self_service:
        raise InvalidInput(
            f"'{request_type.value}' requests cannot be self-submitted."
        )

    approver_role = next_approver_role(created_by.role)
    if approver_role is None:
        raise NoApprover()

    request = Request(
        id=generate_id("req"),
        type=request_type,
        for_nurse_id=created_by.id,
        created_by_nurse_id=created_by.id,
        approver_role=approver_role,
        from_date=from_date or None,
        to_date=to_date or None,
        remarks=(remarks or "").strip(),
    )
    store.add_request(request)

    logger.info(
        "Request %s (%s) submitted by %s, awaiting %s",
        request.id, request_type.value, created_by.id, approver_role,
    )
    return request


def create_delete_request(
    store: RosterStore,
    actor: Optional[Nurse],
    target_id: str,
) -> Request:
    """Ask the apex role to delete `target_id`. Actor must outrank the target."""
    target = store.get_nurse(target_id)
    if target is None:
        raise NotFound(f"Nurse '{target_id}' not found.")

    _require(can_request_delete_nurse(actor, target))

    request = Request(
        id=generate_id("req"),
        type=RequestType.DELETE_NURSE,
        for_nurse_id=target.id,
        created_by_nurse_id=actor.id,
        approver_role=DELETE_APPROVER_ROLE,
        remarks=DELETE_REQUEST_REMARKS,
    )
    store.add_request(request)

    logger.info("Delete request %s for nurse %s raised by %s", request.id, target.id, actor.id)
    return request


# ==================================================
# RESOLUTION (status change + cascade, one transaction)
# ==================================================

def resolve_request(
    store: RosterStore,
    request_id: str,
    actor: Optional[Nurse],
    resolution: Resolution,
) -> Request:
    """
    Approve or reject a pending request.

    - Appends "[Approved by <role>]" / "[Rejected by <role>]" to remarks
    - Approving a delete-nurse request removes the nurse and all of
      their duties in the same transaction as the status change

    Raises:
        NotFound, NotAuthenticated, AlreadyResolved, InsufficientRank,
        SelfApprovalForbidden. The store is untouched on any failure.
    """
    request = store.get_request(request_id)
    if request is None:
        raise NotFound(f"Request '{request_id}' not found.")

    _require(can_act_on_request(actor, request))

    approve = resolution == Resolution.APPROVE
    target_status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
    validate_transition(request.status, target_status)

    with store.transaction():
        request.status = target_status
        label = "Approved" if approve else "Rejected"
        request.remarks = f"{request.remarks or ''} [{label} by {actor.role}]"

        if approve and request.type == RequestType.DELETE_NURSE:
            _cascade_delete_nurse(store, request.for_nurse_id)

    logger.info("Request %s %s by %s", request.id, target_status.value, actor.id)
    return request


def _cascade_delete_nurse(store: RosterStore, nurse_id: str) -> None:
    if store.get_nurse(nurse_id) is not None:
        store.remove_nurse(nurse_id)
    removed = store.remove_duties_for_nurse(nurse_id)
    logger.info("Nurse %s deleted with %d duties", nurse_id, removed)
