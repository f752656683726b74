"""SMS templating and a logging stand-in for the SMS provider."""
from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime
from typing import Dict, Optional

from .models import SMS_TEMPLATE_TYPES, NotificationLog, Reservation, WaitlistEntry

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render_template(template: str, variables: Dict[str, object]) -> str:
    """Fill ``{{name}}`` placeholders. Unknown names are left untouched."""

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replace, template)


def waitlist_variables(entry: WaitlistEntry) -> Dict[str, object]:
    return {
        "guestName": entry.guest_name,
        "partySize": entry.party_size,
        "waitTime": entry.quoted_wait_time,
    }


def reservation_variables(reservation: Reservation) -> Dict[str, object]:
    when = reservation.date_time
    hour = when.hour % 12 or 12
    return {
        "guestName": reservation.guest_name,
        "partySize": reservation.party_size,
        "time": f"{hour}:{when.minute:02d} {'PM' if when.hour >= 12 else 'AM'}",
        "date": f"{when:%A, %B} {when.day}",
    }


def format_phone(phone: str) -> str:
    """Format US numbers for display; anything else is returned as given."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"+1 ({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    return phone


def send_sms(phone: str, message: str) -> Dict[str, object]:
    """Pretend to send an SMS.

    No provider is contacted; the message is logged and a fresh message id
    returned. A blank phone number is reported as a failed send.
    """
    if not phone.strip():
        logger.warning("SMS not sent, no phone number: %s", message)
        return {"success": False, "message_id": ""}
    message_id = str(uuid.uuid4())
    logger.info("SMS %s to %s: %s", message_id, phone, message)
    return {"success": True, "message_id": message_id}


def create_notification_log(
    location_id: str,
    type: str,
    phone: str,
    message: str,
    status: str,
    related_id: Optional[str] = None,
    sent_at: Optional[datetime] = None,
) -> NotificationLog:
    """Record an SMS attempt. ``sent`` is stored as ``delivered``."""
    if type not in SMS_TEMPLATE_TYPES:
        raise ValueError(f"Unknown notification type: {type}")
    return NotificationLog(
        id=str(uuid.uuid4()),
        location_id=location_id,
        type=type,
        phone=phone,
        message=message,
        sent_at=sent_at or datetime.now(),
        status="delivered" if status == "sent" else "failed",
        related_id=related_id,
    )


def notify_waitlist_guest(entry: WaitlistEntry, template: str) -> NotificationLog:
    """Render ``template`` for a waitlist party, send it and log the outcome."""
    message = render_template(template, waitlist_variables(entry))
    result = send_sms(entry.guest_phone, message)
    return create_notification_log(
        entry.location_id,
        "waitlist-ready",
        entry.guest_phone,
        message,
        "sent" if result["success"] else "failed",
        related_id=entry.id,
    )
