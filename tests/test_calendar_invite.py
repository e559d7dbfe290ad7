from datetime import datetime, timedelta, timezone

from birthday_rsvp.services.CalendarInvite import (
    escape_text,
    fold_line,
    format_ics_datetime,
    generate_event_ics,
    generate_ics,
    ordinal,
    party_summary,
)

START = datetime(2025, 6, 1, 18, 0, tzinfo=timezone.utc)
NOW = datetime(2025, 5, 1, 9, 30, tzinfo=timezone.utc)


def _lines(ics: str) -> list[str]:
    return ics.split("\r\n")


def test_default_duration_is_two_hours():
    ics = generate_ics(start=START, summary="Party", description="Cake", now=NOW, uid="abc@birthday-rsvp")
    lines = _lines(ics)
    assert "DTSTART:20250601T180000Z" in lines
    assert "DTEND:20250601T200000Z" in lines
    assert "DTSTAMP:20250501T093000Z" in lines
    assert "UID:abc@birthday-rsvp" in lines


def test_field_order():
    ics = generate_ics(start=START, summary="Party", description="Cake", location="Park", now=NOW, uid="x")
    keys = [line.split(":", 1)[0] for line in _lines(ics) if line]
    assert keys == [
        "BEGIN", "VERSION", "PRODID", "CALSCALE", "METHOD",
        "BEGIN", "UID", "DTSTAMP", "DTSTART", "DTEND",
        "SUMMARY", "DESCRIPTION", "LOCATION",
        "END", "END",
    ]


def test_location_omitted_when_missing():
    ics = generate_ics(start=START, summary="Party", description="Cake")
    assert "LOCATION" not in ics
    assert "\r\n\r\n" not in ics


def test_explicit_end():
    ics = generate_ics(start=START, end=START + timedelta(hours=3), summary="Party", description="Cake")
    assert "DTEND:20250601T210000Z" in _lines(ics)


def test_crlf_line_endings():
    ics = generate_ics(start=START, summary="Party", description="Cake")
    assert ics.startswith("BEGIN:VCALENDAR\r\nVERSION:2.0\r\n")
    assert ics.endswith("END:VCALENDAR\r\n")
    assert "\n" not in ics.replace("\r\n", "")


def test_random_uid_per_invite():
    first = generate_ics(start=START, summary="Party", description="Cake")
    second = generate_ics(start=START, summary="Party", description="Cake")
    uid = [line for line in _lines(first) if line.startswith("UID:")][0]
    assert uid.endswith("@birthday-rsvp")
    assert uid not in _lines(second)


def test_naive_datetimes_are_utc():
    assert format_ics_datetime(datetime(2025, 12, 25, 15, 0)) == "20251225T150000Z"


def test_aware_datetimes_are_converted():
    eastern = timezone(timedelta(hours=-5))
    assert format_ics_datetime(datetime(2025, 12, 25, 10, 0, tzinfo=eastern)) == "20251225T150000Z"


def test_text_is_escaped():
    assert escape_text("Cake; games, and\nfun\\") == "Cake\\; games\\, and\\nfun\\\\"


def test_carriage_returns_are_escaped():
    assert escape_text("Cake\rgames\r\nfun") == "Cake\\ngames\\nfun"


def test_long_lines_are_folded():
    line = "DESCRIPTION:" + "x" * 200
    folded = fold_line(line)
    physical = folded.split("\r\n")
    assert all(len(part.encode("utf-8")) <= 75 for part in physical)
    assert all(part.startswith(" ") for part in physical[1:])
    assert "".join(part[1:] if i else part for i, part in enumerate(physical)) == line


def test_ordinals():
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 101, 111)] == [
        "1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "101st", "111th",
    ]


def test_party_summary():
    assert party_summary("Ana", 7) == "Ana's 7th Birthday Party"


def test_event_ics(sample_event):
    ics = generate_event_ics(sample_event)
    lines = _lines(ics)
    assert "SUMMARY:Mia's 7th Birthday Party" in lines
    assert "DTSTART:20251225T150000Z" in lines
    assert "DTEND:20251225T170000Z" in lines
    assert "DESCRIPTION:Pizza\\, cake and a magic show" in lines
