import pytest

from nurse_roster.core.models import Nurse
from nurse_roster.core.roster_store import RosterStore
from nurse_roster.core.service import RosterService
from nurse_roster.notifications.in_app_notifier import clear_notifications
from nurse_roster.security.roles import (
    NURSE_INCHARGE,
    NURSE_SUPERVISOR,
    NURSING_SUPERINTENDENT,
    STAFF_NURSE,
)


def nurse_fields(name, role, username=None, password="secret", **overrides):
    fields = {
        "name": name,
        "dob": "1990-05-17",
        "gender": "Female",
        "experience": 5,
        "blood_group": "O+",
        "speciality": "ICU",
        "role": role,
        "username": username or name.lower(),
        "password": password,
    }
    fields.update(overrides)
    return fields


def make_nurse(nurse_id, role, username=None):
    return Nurse(
        id=nurse_id,
        name=nurse_id.title(),
        dob="1990-01-01",
        gender="Female",
        experience=3,
        blood_group="A+",
        speciality="General Ward",
        role=role,
        username=username or nurse_id,
        password="pw",
    )


@pytest.fixture(autouse=True)
def _reset_notifications():
    clear_notifications()
    yield
    clear_notifications()


@pytest.fixture
def store():
    return RosterStore()


@pytest.fixture
def service():
    return RosterService(persist=False)


@pytest.fixture
def staffed(service):
    """
    A service with one nurse per role.

    Returns (service, nurses) where nurses maps role -> Nurse.
    """
    alice = service.create_nurse(nurse_fields("Alice", NURSING_SUPERINTENDENT), None).value
    nurses = {NURSING_SUPERINTENDENT: alice}
    for name, role in [
        ("Sam", NURSE_SUPERVISOR),
        ("Ivy", NURSE_INCHARGE),
        ("Bob", STAFF_NURSE),
    ]:
        outcome = service.create_nurse(nurse_fields(name, role), alice)
        assert outcome.ok, outcome.message
        nurses[role] = outcome.value
    return service, nurses
