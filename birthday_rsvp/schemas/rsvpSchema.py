from datetime import datetime
from pydantic import EmailStr, Field, field_serializer, field_validator

from birthday_rsvp.constants.constants import BirthMonth
from birthday_rsvp.schemas.eventSchema import CamelModel, as_utc


class RSVPCreate(CamelModel):
    parent_email: EmailStr
    child_name: str = Field(..., max_length=255)
    child_birth_month: BirthMonth
    receive_updates: bool = True
    attending: bool = True

    @field_validator("parent_email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        # One RSVP per address per event, regardless of case
        return value.lower()

    @field_validator("child_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class RSVPResponse(CamelModel):
    id: int
    event_id: int
    parent_email: str
    child_name: str
    child_birth_month: str
    receive_updates: bool
    attending: bool
    created_at: datetime

    @field_serializer("created_at")
    def serialize_utc(self, value: datetime) -> datetime:
        return as_utc(value)


class RSVPPublicResponse(CamelModel):
    """Guest-visible RSVP summary without contact details."""

    child_name: str
    child_birth_month: str
    attending: bool
    created_at: datetime

    @field_serializer("created_at")
    def serialize_utc(self, value: datetime) -> datetime:
        return as_utc(value)


class RSVPSubmittedResponse(CamelModel):
    success: bool = True
    confirmation_sent: bool
