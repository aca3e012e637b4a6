"""
ROLE HIERARCHY

Define nursing roles, their ranks and the approval chain.

Rules:
- No imports outside typing
- Rank is a pure function of role name
- Unknown roles rank 0 (lowest authority), never an error
- Used by policy.py and lifecycle.py
"""

from typing import Dict, List, Literal, Optional

# Role definitions
STAFF_NURSE: Literal["Staff Nurse"] = "Staff Nurse"
NURSE_INCHARGE: Literal["Nurse Incharge"] = "Nurse Incharge"
NURSE_SUPERVISOR: Literal["Nurse Supervisor"] = "Nurse Supervisor"
NURSING_SUPERINTENDENT: Literal["Nursing Superintendent"] = "Nursing Superintendent"

# Role to rank mapping (higher rank = more authority)
ROLE_RANK: Dict[str, int] = {
    STAFF_NURSE: 1,
    NURSE_INCHARGE: 2,
    NURSE_SUPERVISOR: 3,
    NURSING_SUPERINTENDENT: 4,
}

# Leave / shift-change approval chain
NEXT_APPROVER_ROLE: Dict[str, Optional[str]] = {
    STAFF_NURSE: NURSE_INCHARGE,
    NURSE_INCHARGE: NURSE_SUPERVISOR,
    NURSE_SUPERVISOR: NURSING_SUPERINTENDENT,
    NURSING_SUPERINTENDENT: None,
}

# Deletion requests always go to the apex role
DELETE_APPROVER_ROLE: str = NURSING_SUPERINTENDENT

# All roles, lowest rank first
ALL_ROLES: List[str] = [
    STAFF_NURSE,
    NURSE_INCHARGE,
    NURSE_SUPERVISOR,
    NURSING_SUPERINTENDENT,
]


def rank_of(role: Optional[str]) -> int:
    """Return the fixed rank of a role, 0 for anything unrecognized."""
    return ROLE_RANK.get(role, 0) if isinstance(role, str) else 0


def next_approver_role(role: Optional[str]) -> Optional[str]:
    """
    Return the role that approves leave / shift-change requests raised
    by a nurse holding `role`.

    Returns None for the apex role and for unknown roles.
    """
    if not isinstance(role, str):
        return None
    return NEXT_APPROVER_ROLE.get(role)


def is_valid_role(role: Optional[str]) -> bool:
    return isinstance(role, str) and role in ROLE_RANK


def roles_at_or_below(role: Optional[str]) -> List[str]:
    """Roles an actor holding `role` may provision for new nurses."""
    rank = rank_of(role)
    return [r for r in ALL_ROLES if ROLE_RANK[r] <= rank]
