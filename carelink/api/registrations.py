from __future__ import annotations

from fastapi import APIRouter

from carelink.api.schemas import (
    Envelope,
    MessageOut,
    ParticipantRegistrationIn,
    RegisteredEventOut,
    RegistrationOut,
    VolunteerRegistrationIn,
)
from carelink.auth.deps import DBSession
from carelink.services import events_service, registration_service
from carelink.services.registration_service import RegistrantKind

router = APIRouter(tags=["registrations"])


def _admit(db, kind: RegistrantKind, registrant_id: int, event_id: int) -> Envelope[RegistrationOut]:
    row = registration_service.register(db, kind, registrant_id, event_id)
    return Envelope[RegistrationOut](
        data=RegistrationOut(
            registrant_id=registrant_id,
            event_id=event_id,
            kind=kind.value,
            signed_at=row.signed_at,
        )
    )


def _registered_events(db, kind: RegistrantKind, registrant_id: int) -> list[RegisteredEventOut]:
    return [
        RegisteredEventOut.model_validate(event).model_copy(update={"signed_at": signed_at})
        for event, signed_at in events_service.list_registrant_events(db, kind, registrant_id)
    ]


@router.post("/participant-events", response_model=Envelope[RegistrationOut], status_code=201)
def register_participant(payload: ParticipantRegistrationIn, db: DBSession):
    return _admit(db, RegistrantKind.PARTICIPANT, payload.participant_id, payload.event_id)


@router.delete("/participant-events/{participant_id}/{event_id}", response_model=MessageOut)
def unregister_participant(participant_id: int, event_id: int, db: DBSession):
    registration_service.unregister(db, RegistrantKind.PARTICIPANT, participant_id, event_id)
    return MessageOut(message="Participant removed from event")


@router.get("/participants/{participant_id}/events", response_model=Envelope[list[RegisteredEventOut]])
def list_participant_events(participant_id: int, db: DBSession):
    return Envelope[list[RegisteredEventOut]](
        data=_registered_events(db, RegistrantKind.PARTICIPANT, participant_id)
    )


@router.post("/volunteer-events", response_model=Envelope[RegistrationOut], status_code=201)
def register_volunteer(payload: VolunteerRegistrationIn, db: DBSession):
    return _admit(db, RegistrantKind.VOLUNTEER, payload.volunteer_id, payload.event_id)


@router.delete("/volunteer-events/{volunteer_id}/{event_id}", response_model=MessageOut)
def unregister_volunteer(volunteer_id: int, event_id: int, db: DBSession):
    registration_service.unregister(db, RegistrantKind.VOLUNTEER, volunteer_id, event_id)
    return MessageOut(message="Volunteer removed from event")


@router.get("/volunteers/{volunteer_id}/events", response_model=Envelope[list[RegisteredEventOut]])
def list_volunteer_events(volunteer_id: int, db: DBSession):
    return Envelope[list[RegisteredEventOut]](
        data=_registered_events(db, RegistrantKind.VOLUNTEER, volunteer_id)
    )
