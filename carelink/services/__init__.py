from carelink.services.accounts_service import (
    authenticate,
    check_or_create_participant,
    create_participant,
    create_staff,
    create_volunteer,
    delete_account,
)
from carelink.services.events_service import create_event, delete_event, update_event
from carelink.services.registration_service import RegistrantKind, register, unregister

__all__ = [
    "create_participant",
    "create_volunteer",
    "create_staff",
    "authenticate",
    "check_or_create_participant",
    "delete_account",
    "create_event",
    "update_event",
    "delete_event",
    "RegistrantKind",
    "register",
    "unregister",
]
