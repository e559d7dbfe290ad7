from datetime import datetime, timezone
from typing import List
from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from birthday_rsvp.constants.constants import BirthMonth, Interest
from birthday_rsvp.services.GiftSuggestions import suggest_gifts


def as_utc(value: datetime) -> datetime:
    """Mark a stored naive UTC datetime as UTC so JSON output carries the offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted on input too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ==================== EVENT SCHEMAS ====================

class EventCreate(CamelModel):
    parent_email: EmailStr
    child_name: str = Field(..., max_length=255)
    age_turning: int = Field(..., gt=0, le=150)
    event_date: datetime
    description: str
    interests: List[Interest]

    @field_validator("child_name", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("event_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        """Store aware datetimes as naive UTC; naive ones are taken as UTC already."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @field_validator("interests")
    @classmethod
    def drop_repeats(cls, value: List[Interest]) -> List[Interest]:
        return list(dict.fromkeys(value))


# Updates replace every mutable field, so they take the same body as create
EventUpdate = EventCreate


class EventCreatedResponse(CamelModel):
    admin_token: str


class EventPublicResponse(CamelModel):
    """What a guest link holder sees; never carries the admin token."""

    id: int
    parent_email: str
    child_name: str
    age_turning: int
    event_date: datetime
    description: str
    interests: List[str]
    guest_token: str
    created_at: datetime
    gift_suggestions: List[str] = []

    @field_serializer("event_date", "created_at")
    def serialize_utc(self, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def fill_gift_suggestions(self):
        self.gift_suggestions = suggest_gifts(self.interests)
        return self


class EventAdminResponse(CamelModel):
    id: int
    parent_email: str
    child_name: str
    age_turning: int
    event_date: datetime
    description: str
    interests: List[str]
    admin_token: str
    guest_token: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("event_date", "created_at", "updated_at")
    def serialize_utc(self, value: datetime) -> datetime:
        return as_utc(value)


class OptionsResponse(CamelModel):
    interests: List[str] = [interest.value for interest in Interest]
    birth_months: List[str] = [month.value for month in BirthMonth]
