"""Participant, volunteer and staff account routes."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import delete, select

from carelink.api.schemas import (
    CreatedOut,
    CredentialAccountCreate,
    CredentialAccountOut,
    Envelope,
    MessageOut,
    ParticipantCreate,
    ParticipantOut,
    PasswordUpdate,
)
from carelink.auth.deps import DBSession
from carelink.models import Participant, Staff, User, Volunteer
from carelink.services import accounts_service

router = APIRouter()


def _participant_out(user: User, participant: Participant) -> ParticipantOut:
    return ParticipantOut(
        id=user.id,
        full_name=user.full_name,
        role=user.role,
        image_url=user.image_url,
        created_at=participant.created_at,
        phone_number=participant.phone_number,
        birthdate=participant.birthdate,
    )


def _credential_out(user: User, account: Staff | Volunteer) -> CredentialAccountOut:
    return CredentialAccountOut(
        id=user.id,
        full_name=user.full_name,
        role=user.role,
        image_url=user.image_url,
        created_at=account.created_at,
        email=account.email,
    )


# -- participants --


@router.get("/participants", response_model=Envelope[list[ParticipantOut]], tags=["participants"])
def list_participants(db: DBSession):
    rows = db.execute(
        select(User, Participant).join(Participant, Participant.user_id == User.id).order_by(User.id)
    ).all()
    return Envelope[list[ParticipantOut]](data=[_participant_out(u, p) for u, p in rows])


@router.post(
    "/participants",
    response_model=Envelope[CreatedOut],
    status_code=201,
    tags=["participants"],
)
def create_participant(payload: ParticipantCreate, db: DBSession):
    user, _ = accounts_service.create_participant(
        db,
        payload.full_name,
        payload.phone_number,
        payload.birthdate,
        payload.image_url,
    )
    return Envelope[CreatedOut](data=CreatedOut(user_id=user.id))


@router.delete("/participants/{user_id}", response_model=MessageOut, tags=["participants"])
def delete_participant(user_id: int, db: DBSession):
    # Only the participant row goes; the owning user row is kept.
    db.execute(delete(Participant).where(Participant.user_id == user_id))
    db.commit()
    return MessageOut(message="Participant deleted")


# -- volunteers --


@router.get("/volunteers", response_model=Envelope[list[CredentialAccountOut]], tags=["volunteers"])
def list_volunteers(db: DBSession):
    rows = db.execute(
        select(User, Volunteer).join(Volunteer, Volunteer.user_id == User.id).order_by(User.id)
    ).all()
    return Envelope[list[CredentialAccountOut]](data=[_credential_out(u, v) for u, v in rows])


@router.post(
    "/volunteers",
    response_model=Envelope[CreatedOut],
    status_code=201,
    tags=["volunteers"],
)
def create_volunteer(payload: CredentialAccountCreate, db: DBSession):
    user, _ = accounts_service.create_volunteer(
        db, payload.full_name, payload.email, payload.password, payload.image_url
    )
    return Envelope[CreatedOut](data=CreatedOut(user_id=user.id))


@router.delete("/volunteers/{user_id}", response_model=MessageOut, tags=["volunteers"])
def delete_volunteer(user_id: int, db: DBSession):
    db.execute(delete(Volunteer).where(Volunteer.user_id == user_id))
    db.commit()
    return MessageOut(message="Volunteer deleted")


# -- staff --


@router.get("/staff", response_model=Envelope[list[CredentialAccountOut]], tags=["staff"])
def list_staff(db: DBSession):
    rows = db.execute(
        select(User, Staff).join(Staff, Staff.user_id == User.id).order_by(User.id)
    ).all()
    return Envelope[list[CredentialAccountOut]](data=[_credential_out(u, s) for u, s in rows])


@router.post("/staff", response_model=Envelope[CreatedOut], status_code=201, tags=["staff"])
def create_staff(payload: CredentialAccountCreate, db: DBSession):
    user, _ = accounts_service.create_staff(
        db, payload.full_name, payload.email, payload.password, payload.image_url
    )
    return Envelope[CreatedOut](data=CreatedOut(user_id=user.id))


@router.put("/staff/{user_id}", response_model=MessageOut, tags=["staff"])
def update_staff_password(user_id: int, payload: PasswordUpdate, db: DBSession):
    accounts_service.update_staff_password(db, user_id, payload.password)
    return MessageOut(message="Staff updated")


@router.delete("/staff/{user_id}", response_model=MessageOut, tags=["staff"])
def delete_staff(user_id: int, db: DBSession):
    db.execute(delete(Staff).where(Staff.user_id == user_id))
    db.commit()
    return MessageOut(message="Staff deleted")
