"""
AUTHORIZATION POLICY WITH DENIAL REASON CODES

Purpose:
- Answer "can actor A create / modify / delete-request / resolve target T"
- Return both the decision and a structured denial reason

Rules:
- No side effects
- No logging
- Deterministic output
- actor is None for an unauthenticated caller

Return:
- (True, None) if allowed
- (False, ErrorKind) if denied
"""

from typing import Optional, Tuple

from nurse_roster.core.errors import ErrorKind
from nurse_roster.core.models import Nurse, Request
from nurse_roster.security.roles import rank_of

Decision = Tuple[bool, Optional[ErrorKind]]

ALLOW: Decision = (True, None)


def can_create_nurse(
    actor: Optional[Nurse],
    new_role: str,
    roster_empty: bool,
) -> Decision:
    """
    Decide whether `actor` may add a nurse holding `new_role`.

    The very first account can be created without a session. After that
    an actor may only provision accounts at or below their own rank.
    """
    if roster_empty:
        return ALLOW

    if actor is None:
        return (False, ErrorKind.NOT_AUTHENTICATED)

    if rank_of(actor.role) < rank_of(new_role):
        return (False, ErrorKind.INSUFFICIENT_RANK)

    return ALLOW


def can_request_delete_nurse(actor: Optional[Nurse], target: Nurse) -> Decision:
    """Deletion may only be requested by a strictly higher-ranked actor."""
    if actor is None:
        return (False, ErrorKind.NOT_AUTHENTICATED)

    if rank_of(actor.role) <= rank_of(target.role):
        return (False, ErrorKind.INSUFFICIENT_RANK)

    return ALLOW


def can_act_on_request(actor: Optional[Nurse], request: Request) -> Decision:
    """
    Decide whether `actor` may approve or reject `request`.

    Checks, in order:
        1. actor is authenticated
        2. request is still pending
        3. actor's role is exactly the request's approver role
        4. actor did not create the request (self-approval is never allowed)
    """
    if actor is None:
        return (False, ErrorKind.NOT_AUTHENTICATED)

    if not request.is_pending:
        return (False, ErrorKind.ALREADY_RESOLVED)

    if request.approver_role != actor.role:
        return (False, ErrorKind.INSUFFICIENT_RANK)

    if request.created_by_nurse_id == actor.id:
        return (False, ErrorKind.SELF_APPROVAL_FORBIDDEN)

    return ALLOW


def can_assign_duty(actor: Optional[Nurse]) -> Decision:
    """Any logged-in nurse may create or change duty assignments."""
    if actor is None:
        return (False, ErrorKind.NOT_AUTHENTICATED)
    return ALLOW


def can_submit_request(actor: Optional[Nurse]) -> Decision:
    if actor is None:
        return (False, ErrorKind.NOT_AUTHENTICATED)
    return ALLOW


def is_allowed(decision: Decision) -> bool:
    """Simple boolean view of a decision."""
    return decision[0]
