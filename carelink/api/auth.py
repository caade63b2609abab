from __future__ import annotations

from fastapi import APIRouter

from carelink.api.schemas import (
    AuthOut,
    CheckOrCreateIn,
    CheckOrCreateOut,
    Envelope,
    LoginIn,
    LoginOtpIn,
    MessageOut,
    UserOut,
)
from carelink.auth.deps import CurrentUser, DBSession
from carelink.auth.jwt import create_access_token
from carelink.auth.otp import consume_otp, get_otp_store, issue_otp
from carelink.core.config import settings
from carelink.models import User
from carelink.services import accounts_service

router = APIRouter(tags=["auth"])


def _auth_out(user: User) -> AuthOut:
    return AuthOut(
        access_token=create_access_token(user.id, user.role.value),
        expires_in=settings.access_token_ttl_seconds,
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=Envelope[AuthOut])
def login(payload: LoginIn, db: DBSession):
    user = accounts_service.authenticate(db, payload.email, payload.password)
    return Envelope[AuthOut](data=_auth_out(user))


@router.post("/participant/check-or-create", response_model=Envelope[CheckOrCreateOut])
def check_or_create(payload: CheckOrCreateIn, db: DBSession):
    phone = payload.phone_number
    user, is_new = accounts_service.check_or_create_participant(
        db, phone, payload.full_name, payload.birthdate
    )
    code = issue_otp(get_otp_store(), phone, user.id)
    return Envelope[CheckOrCreateOut](
        data=CheckOrCreateOut(
            user_id=user.id,
            is_new_user=is_new,
            message="Account created. OTP sent." if is_new else "OTP sent to your phone.",
            otp=code if settings.otp_echo else None,
        )
    )


@router.post("/login-otp", response_model=Envelope[AuthOut])
def login_otp(payload: LoginOtpIn, db: DBSession):
    user_id = consume_otp(get_otp_store(), payload.phone, payload.otp)
    user = accounts_service.get_user(db, user_id)
    return Envelope[AuthOut](data=_auth_out(user))


@router.get("/account/me", response_model=Envelope[UserOut])
def me(user: CurrentUser):
    return Envelope[UserOut](data=UserOut.model_validate(user))


@router.delete("/account", response_model=MessageOut)
def delete_account(user: CurrentUser, db: DBSession):
    accounts_service.delete_account(db, user.id)
    return MessageOut(message="Account deleted")
