"""iCalendar (RFC 5545) invites for birthday parties."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from birthday_rsvp.constants.constants import DEFAULT_PARTY_DURATION_HOURS
from birthday_rsvp.core.security import generate_token

PRODUCT_ID = "-//Birthday RSVP//EN"
UID_DOMAIN = "birthday-rsvp"
CRLF = "\r\n"
MAX_LINE_OCTETS = 75


def format_ics_datetime(value: datetime) -> str:
    """Render as UTC basic format, e.g. 20250601T200000Z. Naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y%m%dT%H%M%SZ")


def escape_text(value: str) -> str:
    """Escape a TEXT property value."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line so no physical line exceeds 75 octets."""
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    parts = []
    current = ""
    limit = MAX_LINE_OCTETS
    for char in line:
        if len((current + char).encode("utf-8")) > limit:
            parts.append(current)
            current = char
            # continuation lines start with a space that counts toward the limit
            limit = MAX_LINE_OCTETS - 1
        else:
            current += char
    parts.append(current)
    return (CRLF + " ").join(parts)


def ordinal(number: int) -> str:
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def party_summary(child_name: str, age_turning: int) -> str:
    return f"{child_name}'s {ordinal(age_turning)} Birthday Party"


def generate_ics(
    start: datetime,
    summary: str,
    description: str,
    end: Optional[datetime] = None,
    location: Optional[str] = None,
    uid: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Build a single-event calendar document.

    Args:
        start: Event start; naive values are UTC.
        summary: Event title.
        description: Free text body.
        end: Event end, defaults to start plus the party duration.
        location: Omitted from the document when empty.
        uid: Unique id, random when not given.
        now: Stamp time, defaults to the current UTC time.

    Returns:
        The iCalendar text with CRLF line endings.
    """
    if end is None:
        end = start + timedelta(hours=DEFAULT_PARTY_DURATION_HOURS)
    if now is None:
        now = datetime.now(timezone.utc)
    if uid is None:
        uid = f"{generate_token()}@{UID_DOMAIN}"

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODUCT_ID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{format_ics_datetime(now)}",
        f"DTSTART:{format_ics_datetime(start)}",
        f"DTEND:{format_ics_datetime(end)}",
        f"SUMMARY:{escape_text(summary)}",
        f"DESCRIPTION:{escape_text(description)}",
    ]
    if location:
        lines.append(f"LOCATION:{escape_text(location)}")
    lines += ["END:VEVENT", "END:VCALENDAR"]

    return CRLF.join(fold_line(line) for line in lines) + CRLF


def generate_event_ics(event) -> str:
    """Calendar invite for a stored Event."""
    return generate_ics(
        start=event.event_date,
        summary=party_summary(event.child_name, event.age_turning),
        description=event.description,
    )
