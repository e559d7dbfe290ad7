"""Emails sent to organizers and guests when events and RSVPs change."""

import base64
import html
import logging
from typing import Iterable, Optional, Tuple

from birthday_rsvp.core.config import MailConfig
from birthday_rsvp.services.CalendarInvite import party_summary

logger = logging.getLogger(__name__)


BASE_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: linear-gradient(135deg, #ec4899 0%, #8b5cf6 100%); color: white; padding: 30px; border-radius: 10px 10px 0 0; text-align: center; }}
        .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
        .event-details {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #8b5cf6; }}
        .detail-row {{ margin: 10px 0; }}
        .label {{ font-weight: bold; color: #6b7280; }}
        .link-box {{ background: white; padding: 15px 20px; border-radius: 8px; margin: 15px 0; border: 1px solid #e5e7eb; word-break: break-all; }}
        .footer {{ text-align: center; margin-top: 30px; color: #6b7280; font-size: 12px; }}
        h1 {{ margin: 0; font-size: 24px; }}
        h3 {{ margin-top: 0; color: #7c3aed; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{title}</h1>
        </div>
        <div class="content">
            {body}
            <div class="footer">
                <p>Sent by {sender_name}. This is an automated message.</p>
            </div>
        </div>
    </div>
</body>
</html>
"""


def format_event_date(value) -> str:
    return value.strftime("%A, %B %d, %Y at %I:%M %p UTC")


def _event_details(event) -> str:
    return f"""
            <div class="event-details">
                <h3>Event Details</h3>
                <div class="detail-row"><span class="label">Date:</span> {html.escape(format_event_date(event.event_date))}</div>
                <div class="detail-row"><span class="label">Description:</span> {html.escape(event.description)}</div>
            </div>
    """


def _wrap(title: str, body: str, config: MailConfig) -> str:
    return BASE_TEMPLATE.format(
        title=html.escape(title),
        body=body,
        sender_name=html.escape(config.sender_name),
    )


def render_event_created(event, admin_url: str, rsvp_url: str, config: MailConfig) -> Tuple[str, str]:
    """Organizer confirmation with the admin and guest links."""
    party = party_summary(event.child_name, event.age_turning)
    body = f"""
            <p>Your birthday event for <strong>{html.escape(party)}</strong> has been created successfully.</p>
            {_event_details(event)}
            <p class="label">Admin Page</p>
            <div class="link-box"><a href="{html.escape(admin_url)}">{html.escape(admin_url)}</a></div>
            <p><small>Use this link to manage the event, view RSVPs, and make updates. Keep it private.</small></p>
            <p class="label">RSVP Page</p>
            <div class="link-box"><a href="{html.escape(rsvp_url)}">{html.escape(rsvp_url)}</a></div>
            <p><small>Share this link with your guests to collect RSVPs.</small></p>
            <p>We'll send you notifications as guests RSVP to your event.</p>
    """
    subject = f"🎉 {party} is set up!"
    return subject, _wrap("Birthday Event Created!", body, config)


def render_rsvp_confirmation(event, rsvp, config: MailConfig) -> Tuple[str, str]:
    """Respondent confirmation."""
    party = party_summary(event.child_name, event.age_turning)
    answer = "attending" if rsvp.attending else "not attending"
    updates_note = (
        "You'll receive event updates and reminders."
        if rsvp.receive_updates
        else "You opted out of event updates."
    )
    body = f"""
            <p>Hi,</p>
            <p>Your RSVP for <strong>{html.escape(party)}</strong> has been confirmed:
            {html.escape(rsvp.child_name)} is <strong>{answer}</strong>.</p>
            {_event_details(event)}
            <p>We've attached a calendar invite to help you remember the event.</p>
            <p><small>{updates_note}</small></p>
    """
    subject = f"RSVP confirmed: {party}"
    return subject, _wrap("RSVP Confirmed!", body, config)


def render_new_rsvp_notice(event, rsvp, admin_url: str, config: MailConfig) -> Tuple[str, str]:
    """Organizer notice about a new RSVP."""
    party = party_summary(event.child_name, event.age_turning)
    answer = "attending" if rsvp.attending else "not attending"
    body = f"""
            <p>Good news! A new RSVP just came in for <strong>{html.escape(party)}</strong>.</p>
            <div class="event-details">
                <h3>RSVP</h3>
                <div class="detail-row"><span class="label">Child:</span> {html.escape(rsvp.child_name)}</div>
                <div class="detail-row"><span class="label">Birth month:</span> {html.escape(rsvp.child_birth_month)}</div>
                <div class="detail-row"><span class="label">Parent email:</span> {html.escape(rsvp.parent_email)}</div>
                <div class="detail-row"><span class="label">Response:</span> {answer}</div>
            </div>
            <p>See every response on your admin page:</p>
            <div class="link-box"><a href="{html.escape(admin_url)}">{html.escape(admin_url)}</a></div>
    """
    subject = f"New RSVP from {rsvp.child_name} for {party}"
    return subject, _wrap("New RSVP!", body, config)


def render_event_updated(event, rsvp_url: str, config: MailConfig) -> Tuple[str, str]:
    """Notice to opted-in guests that the organizer changed the event."""
    party = party_summary(event.child_name, event.age_turning)
    body = f"""
            <p>The details for <strong>{html.escape(party)}</strong> have changed.</p>
            {_event_details(event)}
            <p>The latest details are always on the event page:</p>
            <div class="link-box"><a href="{html.escape(rsvp_url)}">{html.escape(rsvp_url)}</a></div>
    """
    subject = f"Updated: {party}"
    return subject, _wrap("Event Updated", body, config)


def render_event_cancelled(event, config: MailConfig) -> Tuple[str, str]:
    """Notice to opted-in guests that the event was cancelled."""
    party = party_summary(event.child_name, event.age_turning)
    body = f"""
            <p>We're sorry to let you know that <strong>{html.escape(party)}</strong>
            on {html.escape(format_event_date(event.event_date))} has been cancelled by the organizer.</p>
    """
    subject = f"Cancelled: {party}"
    return subject, _wrap("Event Cancelled", body, config)


def calendar_attachment(calendar_invite: str, filename: str = "invite.ics") -> dict:
    """Graph fileAttachment for an ICS document."""
    return {
        "@odata.type": "#microsoft.graph.fileAttachment",
        "name": filename,
        "contentType": "text/calendar",
        "contentBytes": base64.b64encode(calendar_invite.encode("utf-8")).decode(),
    }


class EventNotifier:
    """
    Composes event emails and hands them to the mail client.

    Every send is best-effort: failures are logged and reported as False.
    """

    def __init__(self, config: MailConfig, mail_client):
        self.config = config
        self.mail_client = mail_client

    async def _send(self, to_email: str, subject: str, body_html: str, attachments: list = None) -> bool:
        if not self.config.enabled:
            logger.info(f"📭 Mail disabled, skipped '{subject}' to {to_email}")
            return False

        try:
            await self.mail_client.send_email(
                to_emails=[to_email],
                subject=subject,
                body_html=body_html,
                reply_to=self.config.reply_to or None,
                attachments=attachments,
            )
            logger.info(f"✅ Sent '{subject}' to {to_email}")
            return True
        except Exception as e:
            logger.error(f"❌ Failed to send '{subject}' to {to_email}: {e}")
            return False

    async def send_event_created(self, event) -> bool:
        subject, body = render_event_created(
            event,
            admin_url=self.config.admin_url(event.admin_token),
            rsvp_url=self.config.rsvp_url(event.guest_token),
            config=self.config,
        )
        return await self._send(event.parent_email, subject, body)

    async def send_rsvp_confirmation(self, event, rsvp, calendar_invite: Optional[str] = None) -> bool:
        subject, body = render_rsvp_confirmation(event, rsvp, self.config)
        attachments = [calendar_attachment(calendar_invite)] if calendar_invite else None
        return await self._send(rsvp.parent_email, subject, body, attachments)

    async def send_new_rsvp_notice(self, event, rsvp) -> bool:
        subject, body = render_new_rsvp_notice(
            event, rsvp, self.config.admin_url(event.admin_token), self.config
        )
        return await self._send(event.parent_email, subject, body)

    async def send_event_updated(self, event, recipients: Iterable[str]) -> int:
        """Returns how many notices went out."""
        subject, body = render_event_updated(event, self.config.rsvp_url(event.guest_token), self.config)
        sent = 0
        for email in recipients:
            if await self._send(email, subject, body):
                sent += 1
        return sent

    async def send_event_cancelled(self, event, recipients: Iterable[str]) -> int:
        """Returns how many notices went out."""
        subject, body = render_event_cancelled(event, self.config)
        sent = 0
        for email in recipients:
            if await self._send(email, subject, body):
                sent += 1
        return sent
