"""
ROSTER STORE

In-memory owner of every roster collection:
- nurses (unique username)
- duties (unique per date + nurse; re-assignment updates in place)
- requests
- current_user_id (the single logged-in actor, or None)

Rules:
- No authorization here (policy.py decides who may call what)
- Invariants enforced at insertion time
- transaction() restores all collections if the wrapped block raises
"""

import copy
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from nurse_roster.core.errors import DuplicateUsername, NotFound
from nurse_roster.core.id_generator import generate_id, reserve_ids
from nurse_roster.core.models import Duty, Nurse, Request, RequestStatus, RequestType, Shift

logger = logging.getLogger(__name__)


class RosterStore:
    """Ordered, id-keyed collections of nurses, duties and requests."""

    def __init__(
        self,
        nurses: Optional[List[Nurse]] = None,
        duties: Optional[List[Duty]] = None,
        requests: Optional[List[Request]] = None,
        current_user_id: Optional[str] = None,
    ):
        self.nurses: List[Nurse] = list(nurses or [])
        self.duties: List[Duty] = list(duties or [])
        self.requests: List[Request] = list(requests or [])
        self.current_user_id: Optional[str] = current_user_id

        reserve_ids(n.id for n in self.nurses)
        reserve_ids(d.id for d in self.duties)
        reserve_ids(r.id for r in self.requests)

    # ==================================================
    # NURSES
    # ==================================================

    def is_empty(self) -> bool:
        """True when no nurse exists yet (bootstrap condition)."""
        return not self.nurses

    def add_nurse(self, nurse: Nurse) -> Nurse:
        if self.find_nurse_by_username(nurse.username) is not None:
            raise DuplicateUsername()
        self.nurses.append(nurse)
        return nurse

    def get_nurse(self, nurse_id: Optional[str]) -> Optional[Nurse]:
        if nurse_id is None:
            return None
        return next((n for n in self.nurses if n.id == nurse_id), None)

    def find_nurse_by_username(self, username: str) -> Optional[Nurse]:
        return next((n for n in self.nurses if n.username == username), None)

    def remove_nurse(self, nurse_id: str) -> Nurse:
        nurse = self.get_nurse(nurse_id)
        if nurse is None:
            raise NotFound(f"Nurse '{nurse_id}' not found.")
        self.nurses = [n for n in self.nurses if n.id != nurse_id]
        return nurse

    # ==================================================
    # DUTIES
    # ==================================================

    def upsert_duty(self, date: str, nurse_id: str, shift: Shift) -> Tuple[Duty, bool]:
        """
        Assign a shift to a nurse on a date.

        Returns:
            (duty, created) where created is False when an existing
            (date, nurse) duty had its shift overwritten.
        """
        existing = next(
            (d for d in self.duties if d.date == date and d.nurse_id == nurse_id),
            None,
        )
        if existing is not None:
            existing.shift = shift
            return existing, False

        duty = Duty(id=generate_id("duty"), date=date, nurse_id=nurse_id, shift=shift)
        self.duties.append(duty)
        return duty, True

    def get_duty(self, duty_id: str) -> Optional[Duty]:
        return next((d for d in self.duties if d.id == duty_id), None)

    def remove_duty(self, duty_id: str) -> Duty:
        duty = self.get_duty(duty_id)
        if duty is None:
            raise NotFound(f"Duty '{duty_id}' not found.")
        self.duties = [d for d in self.duties if d.id != duty_id]
        return duty

    def remove_duties_for_nurse(self, nurse_id: str) -> int:
        before = len(self.duties)
        self.duties = [d for d in self.duties if d.nurse_id != nurse_id]
        return before - len(self.duties)

    def filter_duties(
        self,
        nurse_id: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        shift: Optional[Shift] = None,
    ) -> List[Duty]:
        """Duties sorted by date; ISO dates compare correctly as strings."""
        result = []
        for duty in sorted(self.duties, key=lambda d: d.date):
            if nurse_id and duty.nurse_id != nurse_id:
                continue
            if from_date and duty.date < from_date:
                continue
            if to_date and duty.date > to_date:
                continue
            if shift and duty.shift != shift:
                continue
            result.append(duty)
        return result

    # ==================================================
    # REQUESTS
    # ==================================================

    def add_request(self, request: Request) -> Request:
        self.requests.append(request)
        return request

    def get_request(self, request_id: str) -> Optional[Request]:
        return next((r for r in self.requests if r.id == request_id), None)

    def filter_requests(
        self,
        approver_role: Optional[str] = None,
        created_by_nurse_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        request_type: Optional[RequestType] = None,
    ) -> List[Request]:
        result = []
        for request in self.requests:
            if approver_role and request.approver_role != approver_role:
                continue
            if created_by_nurse_id and request.created_by_nurse_id != created_by_nurse_id:
                continue
            if status and request.status != status:
                continue
            if request_type and request.type != request_type:
                continue
            result.append(request)
        return result

    # ==================================================
    # SESSION
    # ==================================================

    def current_user(self) -> Optional[Nurse]:
        return self.get_nurse(self.current_user_id)

    # ==================================================
    # TRANSACTIONS & RESET
    # ==================================================

    @contextmanager
    def transaction(self) -> Iterator["RosterStore"]:
        """
        All-or-nothing scope over the collections.

        If the block raises, nurses, duties, requests and the session are
        restored to their state on entry and the exception propagates.
        """
        saved = (
            copy.deepcopy(self.nurses),
            copy.deepcopy(self.duties),
            copy.deepcopy(self.requests),
            self.current_user_id,
        )
        try:
            yield self
        except Exception:
            self.nurses, self.duties, self.requests, self.current_user_id = saved
            logger.debug("Roster transaction rolled back")
            raise

    def clear(self) -> None:
        """Delete every nurse, duty and request and log out."""
        self.nurses = []
        self.duties = []
        self.requests = []
        self.current_user_id = None

    # ==================================================
    # PERSISTED RECORD
    # ==================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nurses": [n.to_dict() for n in self.nurses],
            "duties": [d.to_dict() for d in self.duties],
            "requests": [r.to_dict() for r in self.requests],
            "currentUserId": self.current_user_id,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RosterStore":
        data = data or {}
        return cls(
            nurses=[Nurse.from_dict(n) for n in data.get("nurses", [])],
            duties=[Duty.from_dict(d) for d in data.get("duties", [])],
            requests=[Request.from_dict(r) for r in data.get("requests", [])],
            current_user_id=data.get("currentUserId"),
        )
