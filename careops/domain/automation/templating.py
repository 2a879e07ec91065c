"""
Placeholder substitution for automation email subjects and bodies.

Plain token replacement only: no conditionals, loops or escaping. Values go
into HTML bodies unescaped.
"""

import re
from datetime import datetime
from typing import Any, Mapping, Optional

from .context import EventContext

PLACEHOLDERS = (
    "firstName",
    "lastName",
    "email",
    "businessName",
    "bookingDate",
    "bookingTime",
    "serviceName",
    "formName",
)

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")


def substitute(template: str, values: Mapping[str, Any]) -> str:
    """
    Replace every known {{token}} in a single pass. Missing values become an
    empty string; unknown tokens are left untouched. Inserted values are never
    rescanned for tokens.
    """
    if not template:
        return template or ""

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in PLACEHOLDERS:
            return match.group(0)
        value = values.get(name)
        return "" if value is None else str(value)

    return _TOKEN_RE.sub(replace, template)


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def build_placeholder_values(context: EventContext, business_name: Optional[str]) -> dict[str, str]:
    """Collect token values from the event context and the owning workspace"""
    contact = context.contact or {}
    booking = context.booking or {}
    submission = context.form_submission or {}

    values = {
        "firstName": contact.get("first_name") or "",
        "lastName": contact.get("last_name") or "",
        "email": contact.get("email") or "",
        "businessName": business_name or "",
        "bookingDate": "",
        "bookingTime": "",
        "serviceName": booking.get("service_name") or "",
        "formName": submission.get("form_name") or "",
    }

    scheduled_at = _as_datetime(booking.get("scheduled_at"))
    if scheduled_at:
        values["bookingDate"] = scheduled_at.strftime("%A, %B %d, %Y")
        values["bookingTime"] = scheduled_at.strftime("%I:%M %p")

    return values
