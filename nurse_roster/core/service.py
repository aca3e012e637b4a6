"""
ROSTER SERVICE (QUERY + COMMAND SURFACE)

This is the ONLY entrypoint the UI uses to read or change roster state.

Every command:
- Takes the acting nurse explicitly (None = not logged in)
- Runs inside a store transaction (no partial state on failure)
- Returns an Outcome, never raises for a denied or invalid action
- Saves the full roster record after a successful mutation
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from nurse_roster.core import lifecycle
from nurse_roster.core.errors import (
    AuthError,
    InvalidInput,
    NotFound,
    Outcome,
    RosterError,
    error_for,
)
from nurse_roster.core.id_generator import generate_id
from nurse_roster.core.lifecycle import Resolution
from nurse_roster.core.models import Duty, Nurse, Request, RequestType, Shift
from nurse_roster.core.policy import can_assign_duty, can_create_nurse
from nurse_roster.core.read_model import visible_requests
from nurse_roster.core.roster_store import RosterStore
from nurse_roster.notifications.in_app_notifier import (
    clear_notifications,
    handle_request_resolved,
    handle_request_submitted,
)
from nurse_roster.security.roles import is_valid_role
from nurse_roster.storage.state_store import read_state, write_state

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]

NURSE_REQUIRED_FIELDS = [
    "name",
    "dob",
    "gender",
    "blood_group",
    "speciality",
    "role",
    "username",
    "password",
]


def _to_iso(value: DateLike, field: str) -> Optional[str]:
    """Normalize a date or ISO string; empty input means no date."""
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        raise InvalidInput(f"'{field}' must be a date in YYYY-MM-DD format.") from None


def _require(decision) -> None:
    allowed, reason = decision
    if not allowed:
        raise error_for(reason)


class RosterService:
    """
    Query and command surface over a RosterStore.

    Args:
        store: Roster collections (a fresh empty store if omitted)
        state_path: Where to persist; config default if omitted
        persist: Save after every successful mutation
    """

    def __init__(
        self,
        store: Optional[RosterStore] = None,
        state_path: Optional[Union[str, Path]] = None,
        persist: bool = True,
    ):
        self.store = store if store is not None else RosterStore()
        self.state_path = state_path
        self.persist = persist

    @classmethod
    def load(cls, state_path: Optional[Union[str, Path]] = None) -> "RosterService":
        """
        Restore the roster record verbatim from disk.

        A record that parses but holds malformed entries loads as an
        empty roster, like an unreadable file.
        """
        try:
            store = RosterStore.from_dict(read_state(state_path))
        except (TypeError, KeyError, ValueError, AttributeError) as e:
            logger.error("Roster state is malformed, starting empty: %s", e)
            store = RosterStore()
        logger.info(
            "Loaded roster: %d nurses, %d duties, %d requests",
            len(store.nurses), len(store.duties), len(store.requests),
        )
        return cls(store=store, state_path=state_path)

    # ==================================================
    # INTERNAL HELPERS
    # ==================================================

    def _save(self) -> None:
        if not self.persist:
            return
        try:
            write_state(self.store.to_dict(), self.state_path)
        except OSError as e:
            # In-memory state stays authoritative; next save retries
            logger.error("Failed to save roster state: %s", e)

    def _stored_actor(self, actor: Optional[Nurse]) -> Optional[Nurse]:
        """The store's record for `actor`; None if it is not a current nurse."""
        if actor is None:
            return None
        stored = self.store.get_nurse(getattr(actor, "id", None))
        if stored is None:
            logger.warning("Actor %r is not a nurse in the roster", getattr(actor, "id", actor))
        return stored

    def _run(self, action: str, fn: Callable[[], Any]) -> Outcome:
        try:
            with self.store.transaction():
                value = fn()
        except RosterError as e:
            logger.warning("%s denied: %s (%s)", action, e.kind.value, e)
            return Outcome.failure(e)

        self._save()
        logger.info("%s succeeded", action)
        return Outcome.success(value)

    # ==================================================
    # QUERIES
    # ==================================================

    def list_nurses(self) -> List[Nurse]:
        return list(self.store.nurses)

    def get_nurse(self, nurse_id: str) -> Optional[Nurse]:
        return self.store.get_nurse(nurse_id)

    def current_actor(self) -> Optional[Nurse]:
        return self.store.current_user()

    def list_duties(
        self,
        nurse_id: Optional[str] = None,
        from_date: DateLike = None,
        to_date: DateLike = None,
        shift: Union[Shift, str, None] = None,
    ) -> List[Duty]:
        """Duties sorted by date; unparseable filters are ignored."""
        try:
            from_iso = _to_iso(from_date, "from_date")
            to_iso = _to_iso(to_date, "to_date")
        except InvalidInput:
            from_iso = to_iso = None
        return self.store.filter_duties(
            nurse_id=nurse_id or None,
            from_date=from_iso,
            to_date=to_iso,
            shift=Shift.from_value(shift) if shift else None,
        )

    def list_requests(self, actor: Optional[Nurse] = None) -> List[Request]:
        """All requests, or only those visible to `actor` when given."""
        if actor is None:
            return list(self.store.requests)
        return visible_requests(self.store, actor)

    # ==================================================
    # SESSION COMMANDS
    # ==================================================

    def authenticate(self, username: str, password: str) -> Outcome:
        def _login() -> Nurse:
            nurse = self.store.find_nurse_by_username(str(username or "").strip())
            if nurse is None or nurse.password != password:
                raise AuthError()
            self.store.current_user_id = nurse.id
            return nurse

        return self._run("authenticate", _login)

    def logout(self) -> Outcome:
        def _logout() -> None:
            self.store.current_user_id = None

        return self._run("logout", _logout)

    # ==================================================
    # NURSE COMMANDS
    # ==================================================

    def create_nurse(self, fields: Dict[str, Any], actor: Optional[Nurse]) -> Outcome:
        """
        Add a nurse.

        `fields` keys: name, dob, gender, experience, blood_group,
        speciality, role, username, password.
        """
        actor = self._stored_actor(actor)

        def _create() -> Nurse:
            if not isinstance(fields, dict):
                raise InvalidInput("Nurse fields must be a mapping of field name to value.")
            values = {k: fields.get(k) for k in NURSE_REQUIRED_FIELDS}
            for key in ("name", "username"):
                values[key] = str(values[key] or "").strip()
            missing = [k for k, v in values.items() if v in (None, "")]
            if missing:
                raise InvalidInput(f"Please fill all nurse fields (missing: {', '.join(missing)}).")

            role = values["role"]
            if not is_valid_role(role):
                raise InvalidInput(f"Unknown role: {role}")

            try:
                experience = int(fields.get("experience") or 0)
            except (TypeError, ValueError):
                raise InvalidInput("Experience must be a whole number of years.") from None

            _require(can_create_nurse(actor, role, self.store.is_empty()))

            nurse = Nurse(
                id=generate_id("nurse"),
                name=values["name"],
                dob=_to_iso(values["dob"], "dob"),
                gender=values["gender"],
                experience=experience,
                blood_group=values["blood_group"],
                speciality=values["speciality"],
                role=role,
                username=values["username"],
                password=values["password"],
            )
            return self.store.add_nurse(nurse)

        return self._run("create_nurse", _create)

    def request_delete_nurse(self, target_id: str, actor: Optional[Nurse]) -> Outcome:
        actor = self._stored_actor(actor)
        outcome = self._run(
            "request_delete_nurse",
            lambda: lifecycle.create_delete_request(self.store, actor, target_id),
        )
        if outcome.ok:
            handle_request_submitted(outcome.value, actor)
        return outcome

    # ==================================================
    # DUTY COMMANDS
    # ==================================================

    def assign_duty(
        self,
        duty_date: DateLike,
        nurse_id: str,
        shift: Union[Shift, str],
        actor: Optional[Nurse],
    ) -> Outcome:
        """Create a duty, or overwrite the shift of the (date, nurse) duty."""
        actor = self._stored_actor(actor)

        def _assign() -> Duty:
            _require(can_assign_duty(actor))

            iso_date = _to_iso(duty_date, "date")
            parsed_shift = Shift.from_value(shift)
            if iso_date is None or not nurse_id or parsed_shift is None:
                raise InvalidInput("Please fill all fields (date, nurse, shift).")

            if self.store.get_nurse(nurse_id) is None:
                raise NotFound(f"Nurse '{nurse_id}' not found.")

            duty, _ = self.store.upsert_duty(iso_date, nurse_id, parsed_shift)
            return duty

        return self._run("assign_duty", _assign)

    def delete_duty(self, duty_id: str) -> Outcome:
        return self._run("delete_duty", lambda: self.store.remove_duty(duty_id))

    # ==================================================
    # REQUEST COMMANDS
    # ==================================================

    def submit_request(
        self,
        request_type: Union[RequestType, str],
        actor: Optional[Nurse],
        from_date: DateLike = None,
        to_date: DateLike = None,
        remarks: str = "",
    ) -> Outcome:
        actor = self._stored_actor(actor)

        def _submit() -> Request:
            parsed_type = RequestType.from_value(request_type)
            if parsed_type is None:
                raise InvalidInput("Select request type.")
            return lifecycle.submit_request(
                self.store,
                parsed_type,
                actor,
                from_date=_to_iso(from_date, "from_date"),
                to_date=_to_iso(to_date, "to_date"),
                remarks=remarks,
            )

        outcome = self._run("submit_request", _submit)
        if outcome.ok:
            handle_request_submitted(outcome.value, actor)
        return outcome

    def resolve_request(
        self,
        request_id: str,
        actor: Optional[Nurse],
        decision: Union[Resolution, str],
    ) -> Outcome:
        """Approve or reject; approving a delete-nurse request cascades."""
        actor = self._stored_actor(actor)

        def _resolve() -> Request:
            try:
                resolution = Resolution(decision)
            except ValueError:
                raise InvalidInput(f"Unknown decision: {decision!r}") from None
            return lifecycle.resolve_request(self.store, request_id, actor, resolution)

        outcome = self._run("resolve_request", _resolve)
        if outcome.ok:
            handle_request_resolved(outcome.value, actor)
        return outcome

    # ==================================================
    # RESET
    # ==================================================

    def clear_all(self) -> Outcome:
        """Delete all nurses, duties and requests (full reset)."""
        outcome = self._run("clear_all", self.store.clear)
        if outcome.ok:
            clear_notifications()
        return outcome
