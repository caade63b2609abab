from __future__ import annotations

from fastapi.testclient import TestClient

STAFF_PASSWORD = "StrongPass123"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def create_staff(client: TestClient, email: str, password: str = STAFF_PASSWORD, name: str = "Staff"):
    return client.post(
        "/staff",
        json={"full_name": name, "email": email, "password": password},
    )


def create_volunteer(client: TestClient, email: str, password: str = STAFF_PASSWORD, name: str = "Volunteer"):
    return client.post(
        "/volunteers",
        json={"full_name": name, "email": email, "password": password},
    )


def create_participant(
    client: TestClient,
    phone: str,
    name: str = "Participant",
    birthdate: str = "1950-05-15",
):
    return client.post(
        "/participants",
        json={"full_name": name, "phone_number": phone, "birthdate": birthdate},
    )


def login(client: TestClient, email: str, password: str = STAFF_PASSWORD):
    return client.post("/login", json={"email": email, "password": password})


def staff_token(client: TestClient, email: str = "staff@example.com") -> str:
    create_staff(client, email)
    return login(client, email).json()["data"]["access_token"]


def create_event(client: TestClient, token: str, **overrides) -> int:
    payload = {
        "name": "Morning Tai Chi",
        "description": "Gentle exercise",
        "disabled_friendly": True,
        "scheduled_at": "2026-01-20T08:00:00+08:00",
        "location": "Community Centre",
        "max_participants": 10,
        "max_volunteers": 5,
    }
    payload.update(overrides)
    resp = client.post("/events", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["event_id"]


def participant_ids(client: TestClient, count: int, prefix: str = "9000") -> list[int]:
    ids = []
    for i in range(count):
        resp = create_participant(client, f"{prefix}{i:04d}", name=f"Participant {i}")
        assert resp.status_code == 201, resp.text
        ids.append(resp.json()["data"]["user_id"])
    return ids


def register_participant(client: TestClient, participant_id: int, event_id: int):
    return client.post(
        "/participant-events",
        json={"participant_id": participant_id, "event_id": event_id},
    )


def register_volunteer(client: TestClient, volunteer_id: int, event_id: int):
    return client.post(
        "/volunteer-events",
        json={"volunteer_id": volunteer_id, "event_id": event_id},
    )
