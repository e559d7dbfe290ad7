"""Bearer tokens for event access and the FastAPI dependencies that resolve them."""

import secrets
from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from birthday_rsvp.core.database import aget_db
from birthday_rsvp.models.event import Event
from birthday_rsvp.schemas.errorSchema import ErrorCodes, error_detail

# 64 URL-safe symbols, same alphabet as nanoid
TOKEN_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
TOKEN_SIZE = 21


def generate_token(size: int = TOKEN_SIZE) -> str:
    """
    Generate a random URL-safe token.

    Args:
        - size (int): Number of characters. 21 symbols of a 64-symbol
          alphabet gives 126 bits of randomness.

    Returns:
        - str: The token.
    """
    if size <= 0:
        raise ValueError("Token size must be positive")
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(size))


def generate_event_tokens() -> tuple[str, str]:
    """Return an (admin_token, guest_token) pair."""
    admin_token = generate_token()
    guest_token = generate_token()
    while guest_token == admin_token:
        guest_token = generate_token()
    return admin_token, guest_token


def _event_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_detail("Event not found", ErrorCodes.EVENT_NOT_FOUND),
    )


async def get_event_by_guest_token(
    guest_token: str,
    db: AsyncSession = Depends(aget_db)
) -> Event:
    """
    Dependency resolving the event a guest link points to.
    Raises 404 if no event has this guest token.
    """
    result = await db.execute(
        select(Event).where(Event.guest_token == guest_token)
    )
    event = result.scalar_one_or_none()

    if not event:
        raise _event_not_found()

    return event


async def get_event_by_admin_token(
    admin_token: str,
    db: AsyncSession = Depends(aget_db)
) -> Event:
    """
    Dependency resolving the event an admin link points to, with its RSVPs loaded.
    Raises 404 if no event has this admin token.
    """
    result = await db.execute(
        select(Event)
        .options(selectinload(Event.rsvps))
        .where(Event.admin_token == admin_token)
    )
    event = result.scalar_one_or_none()

    if not event:
        raise _event_not_found()

    return event
