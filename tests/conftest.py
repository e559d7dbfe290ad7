"""
Pytest configuration and shared fixtures.
"""

import os
from datetime import datetime
from types import SimpleNamespace

# Settings are read at import time
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MICROSOFT_TENANT_ID"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

from birthday_rsvp.core.config import MailConfig
from birthday_rsvp.core.database import session_manager
from birthday_rsvp.main import app
from birthday_rsvp.services.EventNotifications import EventNotifier
from birthday_rsvp.services.GraphMail import MailDeliveryError


class FakeMailClient:
    """Records messages instead of calling Microsoft Graph."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send_email(self, to_emails, subject, body_html, reply_to=None, attachments=None):
        if self.fail:
            raise MailDeliveryError("Graph is down")
        self.sent.append({
            "to": to_emails,
            "subject": subject,
            "html": body_html,
            "reply_to": reply_to,
            "attachments": attachments or [],
        })
        return {"status": "sent"}


@pytest.fixture
def mail_config():
    return MailConfig(
        sender="party@example.com",
        sender_name="Birthday RSVP",
        frontend_url="https://party.example.com",
    )


@pytest.fixture
def mail_client():
    return FakeMailClient()


@pytest.fixture
def failing_mail_client():
    return FakeMailClient(fail=True)


@pytest.fixture
def notifier(mail_config, mail_client):
    return EventNotifier(mail_config, mail_client)


@pytest.fixture
async def client(tmp_path, notifier):
    """API client backed by a fresh SQLite database."""
    await session_manager.init(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    app.state.notifier = notifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await session_manager.close()


@pytest.fixture
def event_payload():
    return {
        "parentEmail": "organizer@example.com",
        "childName": "Mia",
        "ageTurning": 7,
        "eventDate": "2025-12-25T15:00",
        "description": "Pizza, cake and a magic show",
        "interests": ["Science", "Music"],
    }


@pytest.fixture
def rsvp_payload():
    return {
        "parentEmail": "guest@example.com",
        "childName": "Ana",
        "childBirthMonth": "March",
        "receiveUpdates": True,
    }


@pytest.fixture
async def created_event(client, event_payload):
    """Create an event through the API and return both tokens."""
    response = await client.post("/api/v1/events", json=event_payload)
    assert response.status_code == 201
    admin_token = response.json()["adminToken"]
    admin_view = await client.get(f"/api/v1/events/{admin_token}/admin")
    return {"admin_token": admin_token, "guest_token": admin_view.json()["guestToken"]}


@pytest.fixture
def sample_event():
    """Event-like object for template and calendar tests."""
    return SimpleNamespace(
        id=1,
        parent_email="organizer@example.com",
        child_name="Mia",
        age_turning=7,
        event_date=datetime(2025, 12, 25, 15, 0),
        description="Pizza, cake and a magic show",
        interests=["Science", "Music"],
        admin_token="A" * 21,
        guest_token="G" * 21,
    )


@pytest.fixture
def sample_rsvp():
    return SimpleNamespace(
        id=1,
        event_id=1,
        parent_email="guest@example.com",
        child_name="Ana",
        child_birth_month="March",
        receive_updates=True,
        attending=True,
    )
