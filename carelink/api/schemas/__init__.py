from carelink.api.schemas.accounts import (
    AuthOut,
    CheckOrCreateIn,
    CheckOrCreateOut,
    CreatedOut,
    CredentialAccountCreate,
    CredentialAccountOut,
    LoginIn,
    LoginOtpIn,
    ParticipantCreate,
    ParticipantOut,
    PasswordUpdate,
    UserCreate,
    UserOut,
    UserUpdate,
)
from carelink.api.schemas.common import Envelope, MessageOut
from carelink.api.schemas.events import (
    EventCreate,
    EventCreatedOut,
    EventOut,
    EventUpdate,
    EventWithCountsOut,
    ParticipantRegistrationIn,
    RegisteredEventOut,
    RegistrantOut,
    RegistrationOut,
    VolunteerRegistrationIn,
)

__all__ = [
    "Envelope",
    "MessageOut",
    "UserOut",
    "UserCreate",
    "UserUpdate",
    "CreatedOut",
    "ParticipantCreate",
    "ParticipantOut",
    "CredentialAccountCreate",
    "CredentialAccountOut",
    "PasswordUpdate",
    "LoginIn",
    "AuthOut",
    "CheckOrCreateIn",
    "CheckOrCreateOut",
    "LoginOtpIn",
    "EventCreate",
    "EventUpdate",
    "EventOut",
    "EventWithCountsOut",
    "EventCreatedOut",
    "ParticipantRegistrationIn",
    "VolunteerRegistrationIn",
    "RegistrationOut",
    "RegistrantOut",
    "RegisteredEventOut",
]
