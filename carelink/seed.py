"""Seed demo accounts and events.

Usage: python -m carelink.seed [--reset]
"""

from __future__ import annotations

import argparse
from datetime import date, datetime

import structlog
from sqlalchemy import select

from carelink.core.logging import configure_logging
from carelink.db import SessionLocal, engine, init_db
from carelink.models import Base, Event, Participant, Staff, Volunteer
from carelink.services import accounts_service
from carelink.services.exceptions import ConflictError

logger = structlog.get_logger(__name__)

DEMO_STAFF = ("Demo Staff", "staff@example.com", "test123")
DEMO_VOLUNTEER = ("Test Volunteer", "volunteer@example.com", "volunteer123")
DEMO_PARTICIPANT = ("Ah Kow", "91234567", date(1950, 5, 15))

SAMPLE_EVENTS = [
    {
        "name": "Morning Tai Chi Session",
        "description": "Gentle Tai Chi exercises to improve balance, flexibility and well-being.",
        "disabled_friendly": True,
        "scheduled_at": datetime(2026, 1, 20, 8, 0),
        "location": "Community Centre @ Toa Payoh",
        "additional_information": "Wear comfortable clothing and bring a water bottle.",
    },
    {
        "name": "Kopi & Kueh Social Gathering",
        "description": "A casual gathering over traditional coffee and snacks.",
        "disabled_friendly": True,
        "scheduled_at": datetime(2026, 1, 21, 10, 0),
        "location": "Void Deck @ Ang Mo Kio",
        "additional_information": "Free refreshments. Wheelchair accessible venue.",
    },
    {
        "name": "Gardening Club: Growing Herbs",
        "description": "Grow common herbs used in local cooking and take a pot home.",
        "disabled_friendly": False,
        "scheduled_at": datetime(2026, 1, 25, 9, 0),
        "location": "Community Garden @ Pasir Ris",
        "additional_information": "Outdoor activity. Bring a hat and sunscreen.",
        "max_participants": 8,
        "max_volunteers": 2,
    },
    {
        "name": "Cooking Class: Healthy Local Recipes",
        "description": "Healthier versions of familiar dishes, cooked together.",
        "disabled_friendly": True,
        "scheduled_at": datetime(2026, 1, 28, 11, 0),
        "location": "Community Kitchen @ Clementi",
        "additional_information": "Ingredients provided.",
    },
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed CareLink demo data")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    return parser.parse_args()


def _ensure_credentialed(db, create, model, full_name: str, email: str, password: str) -> int:
    existing = db.scalar(select(model).where(model.email == email))
    if existing:
        return existing.user_id
    try:
        user, _ = create(db, full_name, email, password)
    except ConflictError:
        logger.warning("seed_email_taken", email=email)
        raise
    return user.id


def main() -> None:
    args = parse_args()
    configure_logging()

    if args.reset:
        Base.metadata.drop_all(bind=engine)
    init_db()

    db = SessionLocal()
    try:
        staff_id = _ensure_credentialed(db, accounts_service.create_staff, Staff, *DEMO_STAFF)
        _ensure_credentialed(db, accounts_service.create_volunteer, Volunteer, *DEMO_VOLUNTEER)

        full_name, phone, birthdate = DEMO_PARTICIPANT
        if not db.scalar(select(Participant).where(Participant.phone_number == phone)):
            accounts_service.create_participant(db, full_name, phone, birthdate)

        created = 0
        for fields in SAMPLE_EVENTS:
            if db.scalar(select(Event.id).where(Event.name == fields["name"])) is not None:
                logger.info("seed_event_skipped", name=fields["name"])
                continue
            db.add(Event(created_by=staff_id, **fields))
            created += 1
        db.commit()
        logger.info("seed_complete", events_created=created)
    finally:
        db.close()


if __name__ == "__main__":
    main()
