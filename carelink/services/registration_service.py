"""Admission of participants and volunteers to events.

Both registrant kinds share one code path. The event row is locked for the
duration of the check-and-insert, so two concurrent admissions for the same
event are serialized and cannot push the join count past the event's limit.
The composite primary key on the join table rejects a duplicate pair even if
the lock is unavailable (SQLite ignores ``FOR UPDATE``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carelink.models import Event, Participant, ParticipantEvent, Volunteer, VolunteerEvent
from carelink.services.error_codes import ErrorCode
from carelink.services.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)


class RegistrantKind(str, Enum):
    PARTICIPANT = "participant"
    VOLUNTEER = "volunteer"


@dataclass(frozen=True)
class _KindSpec:
    join_model: type
    registrant_column: str
    registrant_model: type
    limit_attr: str
    not_found: ErrorCode


_KINDS: dict[RegistrantKind, _KindSpec] = {
    RegistrantKind.PARTICIPANT: _KindSpec(
        join_model=ParticipantEvent,
        registrant_column="participant_id",
        registrant_model=Participant,
        limit_attr="max_participants",
        not_found=ErrorCode.PARTICIPANT_NOT_FOUND,
    ),
    RegistrantKind.VOLUNTEER: _KindSpec(
        join_model=VolunteerEvent,
        registrant_column="volunteer_id",
        registrant_model=Volunteer,
        limit_attr="max_volunteers",
        not_found=ErrorCode.VOLUNTEER_NOT_FOUND,
    ),
}


def _registrant_col(spec: _KindSpec):
    return getattr(spec.join_model, spec.registrant_column)


def current_count(db: Session, kind: RegistrantKind, event_id: int) -> int:
    spec = _KINDS[kind]
    return int(
        db.scalar(
            select(func.count())
            .select_from(spec.join_model)
            .where(spec.join_model.event_id == event_id)
        )
        or 0
    )


def find_registration(db: Session, kind: RegistrantKind, registrant_id: int, event_id: int):
    spec = _KINDS[kind]
    return db.scalar(
        select(spec.join_model).where(
            _registrant_col(spec) == registrant_id,
            spec.join_model.event_id == event_id,
        )
    )


def register(db: Session, kind: RegistrantKind, registrant_id: int, event_id: int):
    """Admit registrant to event and return the new join row.

    Raises NotFoundError, CapacityExceededError or AlreadyRegisteredError.
    Other persistence errors propagate unchanged.
    """
    spec = _KINDS[kind]

    event = db.scalar(select(Event).where(Event.id == event_id).with_for_update())
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "Event not found")

    limit = getattr(event, spec.limit_attr)
    count = current_count(db, kind, event.id)
    if count >= limit:
        logger.info(
            "registration_rejected_full",
            kind=kind.value,
            event_id=event.id,
            registrant_id=registrant_id,
            count=count,
            limit=limit,
        )
        raise CapacityExceededError(ErrorCode.EVENT_FULL.value, "Event is full")

    if find_registration(db, kind, registrant_id, event.id):
        raise AlreadyRegisteredError(ErrorCode.ALREADY_REGISTERED.value, "Already registered")

    if not db.get(spec.registrant_model, registrant_id):
        raise NotFoundError(spec.not_found.value, f"{kind.value.capitalize()} not found")

    row = spec.join_model(event_id=event.id, **{spec.registrant_column: registrant_id})
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if find_registration(db, kind, registrant_id, event_id):
            raise AlreadyRegisteredError(
                ErrorCode.ALREADY_REGISTERED.value, "Already registered"
            ) from exc
        raise

    db.refresh(row)
    logger.info(
        "registration_admitted",
        kind=kind.value,
        event_id=event_id,
        registrant_id=registrant_id,
    )
    return row


def unregister(db: Session, kind: RegistrantKind, registrant_id: int, event_id: int) -> bool:
    """Delete the join row for the pair. Returns whether a row was removed."""
    spec = _KINDS[kind]
    result = db.execute(
        delete(spec.join_model).where(
            _registrant_col(spec) == registrant_id,
            spec.join_model.event_id == event_id,
        )
    )
    db.commit()
    removed = bool(result.rowcount)
    logger.info(
        "registration_removed",
        kind=kind.value,
        event_id=event_id,
        registrant_id=registrant_id,
        removed=removed,
    )
    return removed
