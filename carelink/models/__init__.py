from carelink.models.accounts import Participant, Staff, Volunteer
from carelink.models.base import Base
from carelink.models.event import Event
from carelink.models.registration import ParticipantEvent, VolunteerEvent
from carelink.models.user import User

__all__ = [
    "Base",
    "User",
    "Participant",
    "Volunteer",
    "Staff",
    "Event",
    "ParticipantEvent",
    "VolunteerEvent",
]
