"""
ROSTER DATA MODEL

Records held by the RosterStore and persisted as one JSON record.

Field names on disk are camelCase (forNurseId, createdByNurseId, ...) so a
state file written by the browser version of the roster loads unchanged.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Shift(Enum):
    """Duty shifts."""
    MORNING = "Morning"
    EVENING = "Evening"
    NIGHT = "Night"
    OFF = "Off"

    @property
    def abbrev(self) -> str:
        """Short label used in calendar cells."""
        return {
            Shift.MORNING: "M",
            Shift.EVENING: "E",
            Shift.NIGHT: "N",
            Shift.OFF: "Off",
        }[self]

    @classmethod
    def from_value(cls, value: Any) -> Optional["Shift"]:
        if isinstance(value, cls):
            return value
        for shift in cls:
            if shift.value == value:
                return shift
        return None


class RequestType(Enum):
    """Request types. Leave and shift-change are self-service."""
    LEAVE = "leave"
    SHIFT_CHANGE = "shift-change"
    DELETE_NURSE = "delete-nurse"

    @property
    def is_self_service(self) -> bool:
        return self in (RequestType.LEAVE, RequestType.SHIFT_CHANGE)

    @classmethod
    def from_value(cls, value: Any) -> Optional["RequestType"]:
        if isinstance(value, cls):
            return value
        for request_type in cls:
            if request_type.value == value:
                return request_type
        return None


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass
class Nurse:
    """
    A nurse account.

    Attributes:
        id: Unique nurse identifier
        name: Display name
        dob: Date of birth (ISO date string)
        gender: Free text
        experience: Years of experience
        blood_group: e.g. "O+"
        speciality: Ward / speciality
        role: One of security.roles.ALL_ROLES
        username: Unique login name
        password: Clear text (demo only)
    """
    id: str
    name: str
    dob: str
    gender: str
    experience: int
    blood_group: str
    speciality: str
    role: str
    username: str
    password: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "dob": self.dob,
            "gender": self.gender,
            "experience": self.experience,
            "bloodGroup": self.blood_group,
            "speciality": self.speciality,
            "role": self.role,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Nurse":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            dob=data.get("dob", ""),
            gender=data.get("gender", ""),
            experience=int(data.get("experience") or 0),
            blood_group=data.get("bloodGroup", ""),
            speciality=data.get("speciality", ""),
            role=data.get("role", ""),
            username=data["username"],
            password=data.get("password", ""),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"


@dataclass
class Duty:
    """One shift for one nurse on one date. Unique per (date, nurse_id)."""
    id: str
    date: str
    nurse_id: str
    shift: Shift

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "nurseId": self.nurse_id,
            "shift": self.shift.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Duty":
        shift = Shift.from_value(data.get("shift"))
        if shift is None:
            raise ValueError(f"Unknown shift in stored duty: {data.get('shift')!r}")
        return cls(
            id=data["id"],
            date=data["date"],
            nurse_id=data["nurseId"],
            shift=shift,
        )


@dataclass
class Request:
    """
    A leave, shift-change or delete-nurse request.

    approver_role is fixed when the request is created and is never
    recomputed, even if nurse roles change afterwards.
    """
    id: str
    type: RequestType
    for_nurse_id: str
    created_by_nurse_id: str
    approver_role: str
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    remarks: str = ""
    status: RequestStatus = RequestStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "forNurseId": self.for_nurse_id,
            "createdByNurseId": self.created_by_nurse_id,
            "fromDate": self.from_date,
            "toDate": self.to_date,
            "remarks": self.remarks,
            "status": self.status.value,
            "approverRole": self.approver_role,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Request":
        request_type = RequestType.from_value(data.get("type"))
        if request_type is None:
            raise ValueError(f"Unknown request type in stored request: {data.get('type')!r}")
        return cls(
            id=data["id"],
            type=request_type,
            for_nurse_id=data["forNurseId"],
            created_by_nurse_id=data["createdByNurseId"],
            approver_role=data["approverRole"],
            from_date=data.get("fromDate"),
            to_date=data.get("toDate"),
            remarks=data.get("remarks") or "",
            status=RequestStatus(data.get("status", "pending")),
        )
