from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from carelink.db import SessionLocal, engine
from carelink.models import ParticipantEvent, VolunteerEvent
from carelink.services import registration_service
from carelink.services.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    NotFoundError,
)
from carelink.services.registration_service import RegistrantKind, register, unregister
from tests.helpers import (
    auth_headers,
    create_event,
    create_volunteer,
    participant_ids,
    register_participant,
    register_volunteer,
    staff_token,
)


def _participant_rows(db_session, event_id: int, participant_id: int | None = None) -> int:
    stmt = select(func.count()).select_from(ParticipantEvent).where(ParticipantEvent.event_id == event_id)
    if participant_id is not None:
        stmt = stmt.where(ParticipantEvent.participant_id == participant_id)
    return db_session.scalar(stmt)


@pytest.mark.parametrize("capacity", [1, 3])
def test_capacity_reached_rejects_next_participant(client: TestClient, db_session, capacity: int):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=capacity)
    ids = participant_ids(client, capacity + 1)

    for pid in ids[:capacity]:
        resp = register_participant(client, pid, event_id)
        assert resp.status_code == 201
        assert resp.json()["success"] is True

    overflow = register_participant(client, ids[-1], event_id)
    assert overflow.status_code == 400
    body = overflow.json()
    assert body["success"] is False
    assert body["code"] == "EVENT_FULL"

    assert _participant_rows(db_session, event_id) == capacity
    assert _participant_rows(db_session, event_id, ids[-1]) == 0


def test_duplicate_registration_rejected(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token)
    (pid,) = participant_ids(client, 1)

    first = register_participant(client, pid, event_id)
    assert first.status_code == 201
    assert first.json()["data"]["signed_at"] is not None

    second = register_participant(client, pid, event_id)
    assert second.status_code == 400
    assert second.json()["code"] == "ALREADY_REGISTERED"

    assert _participant_rows(db_session, event_id, pid) == 1


def test_unregister_never_registered_is_success(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token)
    (pid,) = participant_ids(client, 1)

    resp = client.delete(f"/participant-events/{pid}/{event_id}")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert _participant_rows(db_session, event_id, pid) == 0


def test_unregister_frees_a_slot(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=1)
    first, second = participant_ids(client, 2)

    assert register_participant(client, first, event_id).status_code == 201
    assert register_participant(client, second, event_id).status_code == 400

    assert client.delete(f"/participant-events/{first}/{event_id}").status_code == 200
    assert register_participant(client, second, event_id).status_code == 201
    assert _participant_rows(db_session, event_id) == 1


def test_zero_volunteer_capacity_rejects_everyone(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token, max_volunteers=0)

    for i in range(3):
        vid = create_volunteer(client, f"vol{i}@example.com").json()["data"]["user_id"]
        resp = register_volunteer(client, vid, event_id)
        assert resp.status_code == 400
        assert resp.json()["code"] == "EVENT_FULL"

    count = db_session.scalar(
        select(func.count()).select_from(VolunteerEvent).where(VolunteerEvent.event_id == event_id)
    )
    assert count == 0


def test_volunteer_register_and_unregister(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token, max_volunteers=2)
    vid = create_volunteer(client, "helper@example.com").json()["data"]["user_id"]

    resp = register_volunteer(client, vid, event_id)
    assert resp.status_code == 201
    assert resp.json()["data"]["kind"] == "volunteer"

    volunteers = client.get(f"/events/{event_id}/volunteers").json()["data"]
    assert [v["id"] for v in volunteers] == [vid]

    events = client.get(f"/volunteers/{vid}/events").json()["data"]
    assert [e["id"] for e in events] == [event_id]

    assert client.delete(f"/volunteer-events/{vid}/{event_id}").status_code == 200
    assert client.get(f"/events/{event_id}/volunteers").json()["data"] == []


def test_missing_event_is_not_found(client: TestClient):
    (pid,) = participant_ids(client, 1)
    resp = register_participant(client, pid, 9999)
    assert resp.status_code == 404
    assert resp.json()["code"] == "EVENT_NOT_FOUND"


def test_missing_participant_is_not_found(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token)
    resp = register_participant(client, 4242, event_id)
    assert resp.status_code == 404
    assert resp.json()["code"] == "PARTICIPANT_NOT_FOUND"


def test_camel_case_body_is_accepted(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token)
    (pid,) = participant_ids(client, 1)

    resp = client.post("/participant-events", json={"participantID": pid, "eventID": event_id})
    assert resp.status_code == 201


def test_missing_fields_are_validation_errors(client: TestClient):
    resp = client.post("/participant-events", json={"event_id": 1})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_FAILED"


def test_event_counts_track_registrations(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token)
    pids = participant_ids(client, 2)
    for pid in pids:
        register_participant(client, pid, event_id)
    vid = create_volunteer(client, "counter@example.com").json()["data"]["user_id"]
    register_volunteer(client, vid, event_id)

    event = client.get(f"/events/{event_id}").json()["data"]
    assert event["registered_participants"] == 2
    assert event["registered_volunteers"] == 1

    listed = client.get("/events").json()["data"]
    assert listed[0]["registered_participants"] == 2

    events_for_participant = client.get(f"/participants/{pids[0]}/events").json()["data"]
    assert events_for_participant[0]["id"] == event_id
    assert events_for_participant[0]["signed_at"] is not None


def test_deleting_event_removes_registrations(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token)
    (pid,) = participant_ids(client, 1)
    register_participant(client, pid, event_id)

    assert client.delete(f"/events/{event_id}", headers=auth_headers(token)).status_code == 200
    assert _participant_rows(db_session, event_id) == 0
    assert client.get(f"/events/{event_id}").status_code == 404


def test_service_register_and_unregister(client: TestClient, db_session):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=2)
    first, second, third = participant_ids(client, 3)

    row = register(db_session, RegistrantKind.PARTICIPANT, first, event_id)
    assert row.participant_id == first

    with pytest.raises(AlreadyRegisteredError):
        register(db_session, RegistrantKind.PARTICIPANT, first, event_id)
    db_session.rollback()

    register(db_session, RegistrantKind.PARTICIPANT, second, event_id)
    with pytest.raises(CapacityExceededError):
        register(db_session, RegistrantKind.PARTICIPANT, third, event_id)
    db_session.rollback()

    with pytest.raises(NotFoundError):
        register(db_session, RegistrantKind.VOLUNTEER, first, event_id + 100)
    db_session.rollback()

    assert unregister(db_session, RegistrantKind.PARTICIPANT, first, event_id) is True
    assert unregister(db_session, RegistrantKind.PARTICIPANT, first, event_id) is False


def _full_event_body(**overrides) -> dict:
    body = {
        "name": "Morning Tai Chi",
        "description": "Gentle exercise",
        "disabled_friendly": True,
        "scheduled_at": "2026-01-20T08:00:00+08:00",
        "location": "Community Centre",
        "additional_information": None,
        "max_participants": 10,
        "max_volunteers": 5,
    }
    body.update(overrides)
    return body


def test_event_update_cannot_drop_below_registrations(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=3)
    for pid in participant_ids(client, 2):
        register_participant(client, pid, event_id)

    payload = _full_event_body(max_participants=1)
    resp = client.put(f"/events/{event_id}", json=payload)
    assert resp.status_code == 409
    assert resp.json()["code"] == "CAPACITY_BELOW_REGISTRATIONS"

    payload["max_participants"] = 2
    payload["location"] = "Void Deck"
    assert client.put(f"/events/{event_id}", json=payload).status_code == 200
    event = client.get(f"/events/{event_id}").json()["data"]
    assert event["max_participants"] == 2
    assert event["location"] == "Void Deck"


def test_event_update_requires_every_field(client: TestClient):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=3, max_volunteers=1)

    resp = client.put(f"/events/{event_id}", json={"name": "Renamed", "location": "Void Deck"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_FAILED"

    event = client.get(f"/events/{event_id}").json()["data"]
    assert event["name"] == "Morning Tai Chi"
    assert event["max_participants"] == 3
    assert event["max_volunteers"] == 1
    assert event["description"] == "Gentle exercise"

    body = _full_event_body(name="Renamed", description=None, max_participants=3, max_volunteers=1)
    assert client.put(f"/events/{event_id}", json=body).status_code == 200
    event = client.get(f"/events/{event_id}").json()["data"]
    assert event["name"] == "Renamed"
    assert event["description"] is None
    assert event["max_participants"] == 3


@pytest.mark.skipif(
    engine.dialect.name == "postgresql",
    reason="the second insert would wait on the event row lock held by the first session",
)
def test_duplicate_insert_race_reports_already_registered(client: TestClient, db_session, monkeypatch):
    token = staff_token(client)
    event_id = create_event(client, token, max_participants=5)
    (pid,) = participant_ids(client, 1)

    original_find = registration_service.find_registration
    calls = []

    def _find_after_concurrent_insert(db, kind, registrant_id, ev_id):
        # First lookup misses; another session commits the same pair right after
        if not calls:
            calls.append(registrant_id)
            other = SessionLocal()
            try:
                other.add(ParticipantEvent(participant_id=registrant_id, event_id=ev_id))
                other.commit()
            finally:
                other.close()
            return None
        return original_find(db, kind, registrant_id, ev_id)

    monkeypatch.setattr(registration_service, "find_registration", _find_after_concurrent_insert)

    with pytest.raises(AlreadyRegisteredError):
        register(db_session, RegistrantKind.PARTICIPANT, pid, event_id)

    assert calls == [pid]
    assert _participant_rows(db_session, event_id, pid) == 1
