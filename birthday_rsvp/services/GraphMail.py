"""Microsoft Graph mail client used to deliver party emails."""

import logging
import time
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

GRAPH_URL = "https://graph.microsoft.com/v1.0"
LOGIN_URL = "https://login.microsoftonline.com"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# Refresh tokens this many seconds before Graph says they expire
TOKEN_EXPIRY_MARGIN = 300


class MailDeliveryError(Exception):
    """Raised when Graph refuses a token request or a sendMail call."""


class GraphMailClient:
    """
    Sends HTML mail from one application mailbox with the client-credentials flow.

    Pass ``http_client`` to share a connection pool (or a mock transport in
    tests); otherwise a short-lived client is opened per request.
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        sender: str,
        sender_name: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.sender = sender
        self.sender_name = sender_name
        self.timeout = timeout
        self.http_client = http_client
        self._token: Optional[str] = None
        self._token_deadline = 0.0

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        if self.http_client is not None:
            return await self.http_client.post(url, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, **kwargs)

    async def access_token(self) -> str:
        """Application token for Graph, cached until shortly before expiry."""
        if self._token and time.monotonic() < self._token_deadline:
            return self._token

        response = await self._post(
            f"{LOGIN_URL}/{self.tenant_id}/oauth2/v2.0/token",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "scope": GRAPH_SCOPE,
                "grant_type": "client_credentials",
            },
        )
        if response.status_code != 200:
            raise MailDeliveryError(f"Token request failed: {response.status_code} - {response.text}")

        payload = response.json()
        expires_in = int(payload.get("expires_in", 3600))
        self._token = payload["access_token"]
        self._token_deadline = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        logger.info(f"🔑 [Graph] Access token refreshed, valid for {expires_in}s")
        return self._token

    def forget_token(self):
        self._token = None
        self._token_deadline = 0.0

    def build_message(
        self,
        to_emails: List[str],
        subject: str,
        body_html: str,
        reply_to: Optional[str] = None,
        attachments: Optional[List[dict]] = None
    ) -> dict:
        """sendMail request body."""
        sender = {"address": self.sender}
        if self.sender_name:
            sender["name"] = self.sender_name

        message = {
            "subject": subject,
            "body": {"contentType": "HTML", "content": body_html},
            "from": {"emailAddress": sender},
            "toRecipients": [{"emailAddress": {"address": email}} for email in to_emails],
        }
        if reply_to:
            message["replyTo"] = [{"emailAddress": {"address": reply_to}}]
        if attachments:
            message["attachments"] = attachments

        return {"message": message, "saveToSentItems": "true"}

    async def send_email(
        self,
        to_emails: List[str],
        subject: str,
        body_html: str,
        reply_to: Optional[str] = None,
        attachments: Optional[List[dict]] = None
    ) -> dict:
        """
        Deliver one message.

        A 403 is retried once with a fresh token, since a cached token can
        predate a permission grant.

        Raises:
            MailDeliveryError: Graph did not accept the message.
        """
        url = f"{GRAPH_URL}/users/{self.sender}/sendMail"
        body = self.build_message(to_emails, subject, body_html, reply_to, attachments)

        for attempt in range(2):
            token = await self.access_token()
            response = await self._post(
                url,
                headers={"Authorization": f"Bearer {token}"},
                json=body,
            )
            if response.status_code in (200, 202):
                logger.info(f"📧 [Graph] '{subject}' delivered to {', '.join(to_emails)}")
                return {"status": "sent", "to": to_emails, "subject": subject}
            if response.status_code == 403 and attempt == 0:
                logger.warning("⚠️ [Graph] sendMail returned 403, retrying with a new token")
                self.forget_token()
                continue
            break

        if response.status_code == 403:
            raise MailDeliveryError(
                f"Access denied sending as '{self.sender}'; the app needs the Mail.Send "
                "application permission and the mailbox must exist in the tenant"
            )
        raise MailDeliveryError(f"sendMail failed: {response.status_code} - {response.text}")
