from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from carelink.api.schemas.accounts import UserOut
from carelink.api.schemas.common import SchemaBase
from carelink.models.event import DEFAULT_MAX_PARTICIPANTS, DEFAULT_MAX_VOLUNTEERS


class EventCreate(SchemaBase):
    name: str = Field(min_length=1, max_length=200, validation_alias=AliasChoices("name", "eventName"))
    description: str | None = Field(
        default=None, validation_alias=AliasChoices("description", "eventDescription")
    )
    disabled_friendly: bool = False
    scheduled_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("scheduled_at", "datetime")
    )
    location: str | None = None
    additional_information: str | None = None
    max_participants: int = Field(default=DEFAULT_MAX_PARTICIPANTS, ge=0)
    max_volunteers: int = Field(default=DEFAULT_MAX_VOLUNTEERS, ge=0)


class EventUpdate(SchemaBase):
    """Full replacement; every field must be sent, nullable ones as null."""

    name: str = Field(min_length=1, max_length=200, validation_alias=AliasChoices("name", "eventName"))
    description: str | None = Field(validation_alias=AliasChoices("description", "eventDescription"))
    disabled_friendly: bool
    scheduled_at: datetime | None = Field(validation_alias=AliasChoices("scheduled_at", "datetime"))
    location: str | None
    additional_information: str | None
    max_participants: int = Field(ge=0)
    max_volunteers: int = Field(ge=0)


class EventOut(SchemaBase):
    id: int
    name: str
    description: str | None = None
    disabled_friendly: bool
    scheduled_at: datetime | None = None
    location: str | None = None
    additional_information: str | None = None
    created_by: int | None = None
    max_participants: int
    max_volunteers: int
    created_at: datetime | None = None


class EventWithCountsOut(EventOut):
    registered_participants: int = 0
    registered_volunteers: int = 0


class EventCreatedOut(SchemaBase):
    event_id: int


class ParticipantRegistrationIn(SchemaBase):
    participant_id: int = Field(validation_alias=AliasChoices("participant_id", "participantID"))
    event_id: int = Field(validation_alias=AliasChoices("event_id", "eventID"))


class VolunteerRegistrationIn(SchemaBase):
    volunteer_id: int = Field(validation_alias=AliasChoices("volunteer_id", "volunteerID"))
    event_id: int = Field(validation_alias=AliasChoices("event_id", "eventID"))


class RegistrationOut(SchemaBase):
    registrant_id: int
    event_id: int
    kind: str
    signed_at: datetime | None = None


class RegistrantOut(UserOut):
    signed_at: datetime | None = None


class RegisteredEventOut(EventOut):
    signed_at: datetime | None = None
