from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import delete, select

from carelink.api.schemas import CreatedOut, Envelope, MessageOut, UserCreate, UserOut, UserUpdate
from carelink.auth.deps import DBSession
from carelink.models import User
from carelink.services.accounts_service import get_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=Envelope[list[UserOut]])
def list_users(db: DBSession):
    users = db.scalars(select(User).order_by(User.id)).all()
    return Envelope[list[UserOut]](data=[UserOut.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=Envelope[UserOut])
def read_user(user_id: int, db: DBSession):
    return Envelope[UserOut](data=UserOut.model_validate(get_user(db, user_id)))


@router.post("", response_model=Envelope[CreatedOut], status_code=201)
def create_user(payload: UserCreate, db: DBSession):
    user = User(full_name=payload.full_name, role=payload.role, image_url=payload.image_url)
    db.add(user)
    db.commit()
    db.refresh(user)
    return Envelope[CreatedOut](data=CreatedOut(user_id=user.id))


@router.put("/{user_id}", response_model=MessageOut)
def update_user(user_id: int, payload: UserUpdate, db: DBSession):
    user = get_user(db, user_id)
    user.full_name = payload.full_name
    user.role = payload.role
    user.image_url = payload.image_url
    db.add(user)
    db.commit()
    return MessageOut(message="User updated")


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(user_id: int, db: DBSession):
    # Role rows and registrations go with the user through ON DELETE CASCADE
    db.execute(delete(User).where(User.id == user_id))
    db.commit()
    return MessageOut(message="User deleted")
