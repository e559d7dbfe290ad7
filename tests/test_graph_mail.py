import json

import httpx
import pytest

from birthday_rsvp.services.EventNotifications import calendar_attachment
from birthday_rsvp.services.GraphMail import GraphMailClient, MailDeliveryError


class GraphStub:
    """Answers token and sendMail calls, failing sends with the queued statuses."""

    def __init__(self, send_statuses=()):
        self.send_statuses = list(send_statuses)
        self.token_requests = 0
        self.sent = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/oauth2/v2.0/token"):
            self.token_requests += 1
            return httpx.Response(200, json={
                "access_token": f"token-{self.token_requests}",
                "expires_in": 3600,
            })
        status = self.send_statuses.pop(0) if self.send_statuses else 202
        self.sent.append({
            "authorization": request.headers["Authorization"],
            "path": request.url.path,
            "body": json.loads(request.content),
        })
        return httpx.Response(status, text="nope" if status >= 400 else "")


def make_client(stub: GraphStub) -> GraphMailClient:
    return GraphMailClient(
        tenant_id="tenant",
        client_id="client",
        client_secret="secret",
        sender="party@example.com",
        sender_name="Birthday RSVP",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(stub)),
    )


def test_message_shape():
    client = make_client(GraphStub())
    message = client.build_message(
        ["guest@example.com"],
        "Hello",
        "<p>Hi</p>",
        reply_to="help@example.com",
        attachments=[calendar_attachment("BEGIN:VCALENDAR")],
    )["message"]
    assert message["body"] == {"contentType": "HTML", "content": "<p>Hi</p>"}
    assert message["from"]["emailAddress"] == {"address": "party@example.com", "name": "Birthday RSVP"}
    assert message["toRecipients"] == [{"emailAddress": {"address": "guest@example.com"}}]
    assert message["replyTo"] == [{"emailAddress": {"address": "help@example.com"}}]
    assert message["attachments"][0]["@odata.type"] == "#microsoft.graph.fileAttachment"


def test_optional_fields_left_out():
    message = make_client(GraphStub()).build_message(["a@example.com"], "Hi", "<p/>")["message"]
    assert "replyTo" not in message
    assert "attachments" not in message


async def test_send_posts_to_sender_mailbox():
    stub = GraphStub()
    result = await make_client(stub).send_email(["guest@example.com"], "Hello", "<p>Hi</p>")
    assert result["status"] == "sent"
    assert stub.sent[0]["path"] == "/v1.0/users/party@example.com/sendMail"
    assert stub.sent[0]["authorization"] == "Bearer token-1"
    assert stub.sent[0]["body"]["message"]["subject"] == "Hello"


async def test_token_is_reused():
    stub = GraphStub()
    client = make_client(stub)
    await client.send_email(["a@example.com"], "One", "<p/>")
    await client.send_email(["b@example.com"], "Two", "<p/>")
    assert stub.token_requests == 1


async def test_forbidden_retries_once_with_new_token():
    stub = GraphStub(send_statuses=[403])
    await make_client(stub).send_email(["a@example.com"], "Hi", "<p/>")
    assert stub.token_requests == 2
    assert [sent["authorization"] for sent in stub.sent] == ["Bearer token-1", "Bearer token-2"]


async def test_repeated_forbidden_raises():
    stub = GraphStub(send_statuses=[403, 403])
    with pytest.raises(MailDeliveryError, match="Mail.Send"):
        await make_client(stub).send_email(["a@example.com"], "Hi", "<p/>")
    assert len(stub.sent) == 2


async def test_server_error_raises():
    stub = GraphStub(send_statuses=[500])
    with pytest.raises(MailDeliveryError, match="500"):
        await make_client(stub).send_email(["a@example.com"], "Hi", "<p/>")
    assert len(stub.sent) == 1


async def test_token_failure_raises():
    def handler(request):
        return httpx.Response(401, text="bad secret")

    client = GraphMailClient(
        tenant_id="tenant",
        client_id="client",
        client_secret="wrong",
        sender="party@example.com",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    with pytest.raises(MailDeliveryError, match="Token request failed"):
        await client.send_email(["a@example.com"], "Hi", "<p/>")
