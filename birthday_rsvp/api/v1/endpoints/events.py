"""Birthday event and RSVP router."""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from birthday_rsvp.core.config import settings
from birthday_rsvp.core.database import aget_db
from birthday_rsvp.core.limiter import limiter
from birthday_rsvp.core.security import (
    generate_event_tokens,
    get_event_by_admin_token,
    get_event_by_guest_token,
)
from birthday_rsvp.models.event import Event, RSVP
from birthday_rsvp.schemas.errorSchema import ErrorCodes, error_detail
from birthday_rsvp.schemas.eventSchema import (
    EventAdminResponse,
    EventCreate,
    EventCreatedResponse,
    EventPublicResponse,
    EventUpdate,
    OptionsResponse,
)
from birthday_rsvp.schemas.rsvpSchema import (
    RSVPCreate,
    RSVPPublicResponse,
    RSVPResponse,
    RSVPSubmittedResponse,
)
from birthday_rsvp.services.CalendarInvite import generate_event_ics
from birthday_rsvp.services.EventNotifications import EventNotifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/events",
    tags=["events"]
)


def get_notifier(request: Request) -> EventNotifier:
    """The notifier built at startup; tests swap it on app.state."""
    return request.app.state.notifier


def _duplicate_rsvp(email: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=error_detail(
            "You have already RSVP'd to this event",
            ErrorCodes.DUPLICATE_RSVP,
            [f"parentEmail: {email} already has an RSVP"],
        ),
    )


async def _commit(db: AsyncSession, action: str):
    """Commit the session, turning storage failures into a 500."""
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Failed to {action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail(f"Failed to {action}", ErrorCodes.INTERNAL_ERROR),
        )


def _opted_in_emails(event: Event) -> List[str]:
    return [rsvp.parent_email for rsvp in event.rsvps if rsvp.receive_updates]


@router.post("", response_model=EventCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT)
async def create_event(
    request: Request,
    event_data: EventCreate,
    db: AsyncSession = Depends(aget_db),
    notifier: EventNotifier = Depends(get_notifier)
):
    """
    Create a birthday event.

    Only the admin token is returned; the guest link reaches the organizer
    through the creation email and the admin page.
    """
    admin_token, guest_token = generate_event_tokens()
    event = Event(
        parent_email=event_data.parent_email,
        child_name=event_data.child_name,
        age_turning=event_data.age_turning,
        event_date=event_data.event_date,
        description=event_data.description,
        interests=[interest.value for interest in event_data.interests],
        admin_token=admin_token,
        guest_token=guest_token,
    )
    db.add(event)
    await _commit(db, "create event")
    logger.info(f"🎂 Created event {event.id} for {event.child_name}")

    await notifier.send_event_created(event)

    return EventCreatedResponse(admin_token=admin_token)


@router.get("/{guest_token}", response_model=EventPublicResponse)
async def get_event(event: Event = Depends(get_event_by_guest_token)):
    """Get event details for a guest link, with gift suggestions."""
    return event


@router.get("/{guest_token}/rsvp-count", response_model=int)
async def get_rsvp_count(
    event: Event = Depends(get_event_by_guest_token),
    db: AsyncSession = Depends(aget_db)
):
    result = await db.execute(
        select(func.count(RSVP.id)).where(RSVP.event_id == event.id)
    )
    return result.scalar() or 0


@router.get("/{guest_token}/rsvps", response_model=List[RSVPPublicResponse])
async def list_public_rsvps(
    event: Event = Depends(get_event_by_guest_token),
    db: AsyncSession = Depends(aget_db)
):
    """Who's coming, without contact details."""
    result = await db.execute(
        select(RSVP).where(RSVP.event_id == event.id).order_by(RSVP.created_at.asc(), RSVP.id.asc())
    )
    return result.scalars().all()


@router.get("/{guest_token}/calendar.ics")
async def download_calendar_invite(event: Event = Depends(get_event_by_guest_token)):
    return Response(
        content=generate_event_ics(event),
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="invite.ics"'},
    )


@router.post(
    "/{guest_token}/rsvp",
    response_model=RSVPSubmittedResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.RATE_LIMIT)
async def submit_rsvp(
    request: Request,
    rsvp_data: RSVPCreate,
    event: Event = Depends(get_event_by_guest_token),
    db: AsyncSession = Depends(aget_db),
    notifier: EventNotifier = Depends(get_notifier)
):
    """
    RSVP to an event.

    Sends the respondent a confirmation with a calendar invite, and tells the
    organizer when the respondent opted in to updates.
    """
    existing = await db.execute(
        select(RSVP.id).where(
            RSVP.event_id == event.id,
            RSVP.parent_email == rsvp_data.parent_email
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise _duplicate_rsvp(rsvp_data.parent_email)

    rsvp = RSVP(
        event_id=event.id,
        parent_email=rsvp_data.parent_email,
        child_name=rsvp_data.child_name,
        child_birth_month=rsvp_data.child_birth_month.value,
        receive_updates=rsvp_data.receive_updates,
        attending=rsvp_data.attending,
    )
    db.add(rsvp)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with an identical submission
        await db.rollback()
        raise _duplicate_rsvp(rsvp_data.parent_email)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Failed to submit RSVP: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail("Failed to submit RSVP", ErrorCodes.INTERNAL_ERROR),
        )
    logger.info(f"📨 RSVP {rsvp.id} from {rsvp.child_name} for event {event.id}")

    calendar_invite = generate_event_ics(event)
    confirmation_sent = await notifier.send_rsvp_confirmation(event, rsvp, calendar_invite)
    if rsvp.receive_updates:
        await notifier.send_new_rsvp_notice(event, rsvp)

    return RSVPSubmittedResponse(confirmation_sent=confirmation_sent)


@router.get("/{admin_token}/admin", response_model=EventAdminResponse)
async def get_event_admin(event: Event = Depends(get_event_by_admin_token)):
    return event


@router.put("/{admin_token}/admin", response_model=EventAdminResponse)
async def update_event(
    event_data: EventUpdate,
    event: Event = Depends(get_event_by_admin_token),
    db: AsyncSession = Depends(aget_db),
    notifier: EventNotifier = Depends(get_notifier)
):
    """Overwrite the event's details and tell opted-in guests."""
    event.parent_email = event_data.parent_email
    event.child_name = event_data.child_name
    event.age_turning = event_data.age_turning
    event.event_date = event_data.event_date
    event.description = event_data.description
    event.interests = [interest.value for interest in event_data.interests]

    recipients = _opted_in_emails(event)

    await _commit(db, "update event")
    logger.info(f"✏️ Updated event {event.id}")

    await notifier.send_event_updated(event, recipients)

    return event


@router.delete("/{admin_token}/admin")
async def delete_event(
    event: Event = Depends(get_event_by_admin_token),
    db: AsyncSession = Depends(aget_db),
    notifier: EventNotifier = Depends(get_notifier)
):
    """Cancel the event; its RSVPs go with it."""
    recipients = _opted_in_emails(event)
    event_id = event.id
    rsvp_total = len(event.rsvps)

    await db.delete(event)
    await _commit(db, "delete event")
    logger.info(f"🗑️ Deleted event {event_id} and {rsvp_total} RSVP(s)")

    await notifier.send_event_cancelled(event, recipients)

    return {"success": True}


@router.get("/{admin_token}/admin/rsvps", response_model=List[RSVPResponse])
async def list_admin_rsvps(event: Event = Depends(get_event_by_admin_token)):
    """Every RSVP for the event, oldest first."""
    return event.rsvps


options_router = APIRouter(tags=["options"])


@options_router.get("/options", response_model=OptionsResponse)
async def get_options():
    """Interest and birth month choices for the forms."""
    return OptionsResponse()
