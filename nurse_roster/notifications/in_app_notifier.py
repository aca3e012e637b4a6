"""
IN-APP NOTIFICATION ENGINE

Purpose:
- Event-driven notifications for the request workflow
- Inbox style, session-level (in memory)
- Recipients are role names or nurse ids

Triggers:
• Request submitted → approver role
• Request approved / rejected → creating nurse
"""

import itertools
import time
from datetime import datetime
from typing import Dict, List, Optional

from nurse_roster.core.models import Nurse, Request, RequestStatus, RequestType

# In-memory notification store (session-level)
_notification_store: List[Dict] = []
_sequence = itertools.count(1)


def emit_notification(
    request_id: str,
    event_type: str,
    message: str,
    recipients: List[str],
    metadata: Optional[Dict] = None
) -> Dict:
    """
    Emit an in-app notification.

    Args:
        request_id: Request the notification is about
        event_type: REQUEST_SUBMITTED / REQUEST_APPROVED / REQUEST_REJECTED
        message: Notification message
        recipients: Role names and/or nurse ids to notify
        metadata: Additional metadata
    """
    notification = {
        "id": f"NOTIF-{int(time.time() * 1000)}-{next(_sequence)}",
        "request_id": request_id,
        "event_type": event_type,
        "message": message,
        "recipients": list(recipients),
        "timestamp": datetime.now().isoformat(),
        "read": False,
        "metadata": metadata or {}
    }

    _notification_store.append(notification)
    return notification


def get_notifications_for(recipient: str, unread_only: bool = False) -> List[Dict]:
    """Notifications addressed to a role or nurse id, newest first."""
    notifications = [
        n for n in _notification_store
        if recipient in n["recipients"]
    ]

    if unread_only:
        notifications = [n for n in notifications if not n["read"]]

    notifications.sort(key=lambda x: x["timestamp"], reverse=True)
    return notifications


def get_notifications_for_nurse(nurse: Nurse, unread_only: bool = False) -> List[Dict]:
    """Everything a nurse should see: their role's inbox plus personal ones."""
    seen = set()
    merged = []
    for recipient in (nurse.role, nurse.id):
        for n in get_notifications_for(recipient, unread_only=unread_only):
            if n["id"] not in seen:
                seen.add(n["id"])
                merged.append(n)
    merged.sort(key=lambda x: x["timestamp"], reverse=True)
    return merged


def mark_as_read(notification_id: str, recipient: Optional[str] = None) -> bool:
    """
    Mark a notification as read.

    If `recipient` is given it must be one of the notification's recipients.
    """
    for notification in _notification_store:
        if notification["id"] == notification_id:
            if recipient is not None and recipient not in notification.get("recipients", []):
                continue
            notification["read"] = True
            return True
    return False


def clear_notifications() -> None:
    """Clear all notifications (tests and full reset only)."""
    _notification_store.clear()


def get_unread_count(recipient: str) -> int:
    return len([
        n for n in _notification_store
        if recipient in n["recipients"] and not n["read"]
    ])


# Event-driven notification triggers
def handle_request_submitted(request: Request, created_by: Nurse) -> None:
    """Notifies the approver role."""
    if request.type == RequestType.DELETE_NURSE:
        message = f"🗑️ {created_by.name} requested deletion of a nurse."
    else:
        message = f"📝 {created_by.name} submitted a {request.type.value} request."

    emit_notification(
        request_id=request.id,
        event_type="REQUEST_SUBMITTED",
        message=message,
        recipients=[request.approver_role],
        metadata={"type": request.type.value, "created_by": created_by.id},
    )


def handle_request_resolved(request: Request, resolved_by: Nurse) -> None:
    """Notifies the nurse who created the request."""
    approved = request.status == RequestStatus.APPROVED
    icon = "✅" if approved else "❌"
    message = (
        f"{icon} Your {request.type.value} request was "
        f"{request.status.value} by {resolved_by.role}."
    )

    emit_notification(
        request_id=request.id,
        event_type="REQUEST_APPROVED" if approved else "REQUEST_REJECTED",
        message=message,
        recipients=[request.created_by_nurse_id],
        metadata={"resolved_by": resolved_by.id},
    )
