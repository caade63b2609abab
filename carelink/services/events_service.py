from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from carelink.models import Event, ParticipantEvent, User, VolunteerEvent
from carelink.models.user import UserRole
from carelink.services.error_codes import ErrorCode
from carelink.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from carelink.services.registration_service import RegistrantKind, current_count

logger = structlog.get_logger(__name__)

_LIMIT_KEYS = {
    RegistrantKind.PARTICIPANT: "max_participants",
    RegistrantKind.VOLUNTEER: "max_volunteers",
}


def _counts_select():
    participants = (
        select(func.count())
        .select_from(ParticipantEvent)
        .where(ParticipantEvent.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
    )
    volunteers = (
        select(func.count())
        .select_from(VolunteerEvent)
        .where(VolunteerEvent.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
    )
    return select(
        Event,
        participants.label("registered_participants"),
        volunteers.label("registered_volunteers"),
    )


def _with_counts(row) -> dict[str, Any]:
    event, participants, volunteers = row
    return {
        "event": event,
        "registered_participants": int(participants or 0),
        "registered_volunteers": int(volunteers or 0),
    }


def list_events(db: Session) -> list[dict[str, Any]]:
    rows = db.execute(
        _counts_select().order_by(Event.scheduled_at.desc(), Event.id.desc())
    ).all()
    return [_with_counts(row) for row in rows]


def get_event(db: Session, event_id: int) -> dict[str, Any]:
    row = db.execute(_counts_select().where(Event.id == event_id)).first()
    if row is None:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "Event not found")
    return _with_counts(row)


def create_event(db: Session, creator_id: int, fields: dict[str, Any]) -> Event:
    # The token already carries the role; re-read it in case the user changed.
    creator = db.get(User, creator_id)
    if not creator:
        raise UnauthorizedError(ErrorCode.USER_NOT_FOUND.value, "User not found")
    if creator.role != UserRole.STAFF:
        raise PermissionDeniedError(
            ErrorCode.STAFF_ONLY.value, "Only staff members can create events"
        )

    event = Event(created_by=creator.id, **fields)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("event_created", event_id=event.id, created_by=creator.id)
    return event


def update_event(db: Session, event_id: int, fields: dict[str, Any]) -> Event:
    event = db.scalar(select(Event).where(Event.id == event_id).with_for_update())
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "Event not found")

    for kind, limit_key in _LIMIT_KEYS.items():
        new_limit = fields.get(limit_key)
        if new_limit is not None and new_limit < current_count(db, kind, event.id):
            raise ConflictError(
                ErrorCode.CAPACITY_BELOW_REGISTRATIONS.value,
                f"{limit_key} cannot be below the current number of registrations",
            )

    for key, value in fields.items():
        setattr(event, key, value)

    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: int) -> None:
    db.execute(delete(Event).where(Event.id == event_id))
    db.commit()
    logger.info("event_deleted", event_id=event_id)


def list_event_registrants(
    db: Session, kind: RegistrantKind, event_id: int
) -> list[tuple[User, Any]]:
    join_model = ParticipantEvent if kind == RegistrantKind.PARTICIPANT else VolunteerEvent
    registrant_col = (
        ParticipantEvent.participant_id
        if kind == RegistrantKind.PARTICIPANT
        else VolunteerEvent.volunteer_id
    )
    rows = db.execute(
        select(User, join_model.signed_at)
        .join(join_model, registrant_col == User.id)
        .where(join_model.event_id == event_id)
        .order_by(join_model.signed_at, User.id)
    ).all()
    return [(user, signed_at) for user, signed_at in rows]


def list_registrant_events(
    db: Session, kind: RegistrantKind, registrant_id: int
) -> list[tuple[Event, Any]]:
    join_model = ParticipantEvent if kind == RegistrantKind.PARTICIPANT else VolunteerEvent
    registrant_col = (
        ParticipantEvent.participant_id
        if kind == RegistrantKind.PARTICIPANT
        else VolunteerEvent.volunteer_id
    )
    rows = db.execute(
        select(Event, join_model.signed_at)
        .join(join_model, join_model.event_id == Event.id)
        .where(registrant_col == registrant_id)
        .order_by(Event.scheduled_at, Event.id)
    ).all()
    return [(event, signed_at) for event, signed_at in rows]
