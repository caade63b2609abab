from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from carelink.api.schemas import (
    Envelope,
    EventCreate,
    EventCreatedOut,
    EventUpdate,
    EventWithCountsOut,
    MessageOut,
    RegistrantOut,
)
from carelink.auth.deps import DBSession, StaffUser
from carelink.services import events_service
from carelink.services.registration_service import RegistrantKind

router = APIRouter(prefix="/events", tags=["events"])


def _event_out(item: dict[str, Any]) -> EventWithCountsOut:
    out = EventWithCountsOut.model_validate(item["event"])
    return out.model_copy(
        update={
            "registered_participants": item["registered_participants"],
            "registered_volunteers": item["registered_volunteers"],
        }
    )


@router.get("", response_model=Envelope[list[EventWithCountsOut]])
def list_events(db: DBSession):
    items = events_service.list_events(db)
    return Envelope[list[EventWithCountsOut]](data=[_event_out(i) for i in items])


@router.get("/{event_id}", response_model=Envelope[EventWithCountsOut])
def read_event(event_id: int, db: DBSession):
    return Envelope[EventWithCountsOut](data=_event_out(events_service.get_event(db, event_id)))


@router.post("", response_model=Envelope[EventCreatedOut], status_code=201)
def create_event(payload: EventCreate, db: DBSession, staff: StaffUser):
    event = events_service.create_event(db, staff.id, payload.model_dump())
    return Envelope[EventCreatedOut](data=EventCreatedOut(event_id=event.id))


@router.put("/{event_id}", response_model=MessageOut)
def update_event(event_id: int, payload: EventUpdate, db: DBSession):
    events_service.update_event(db, event_id, payload.model_dump())
    return MessageOut(message="Event updated")


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(event_id: int, db: DBSession):
    events_service.delete_event(db, event_id)
    return MessageOut(message="Event deleted")


def _registrants(db, kind: RegistrantKind, event_id: int) -> list[RegistrantOut]:
    return [
        RegistrantOut.model_validate(user).model_copy(update={"signed_at": signed_at})
        for user, signed_at in events_service.list_event_registrants(db, kind, event_id)
    ]


@router.get("/{event_id}/participants", response_model=Envelope[list[RegistrantOut]])
def list_event_participants(event_id: int, db: DBSession):
    return Envelope[list[RegistrantOut]](data=_registrants(db, RegistrantKind.PARTICIPANT, event_id))


@router.get("/{event_id}/volunteers", response_model=Envelope[list[RegistrantOut]])
def list_event_volunteers(event_id: int, db: DBSession):
    return Envelope[list[RegistrantOut]](data=_registrants(db, RegistrantKind.VOLUNTEER, event_id))
