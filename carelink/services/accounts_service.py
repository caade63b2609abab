from __future__ import annotations

from datetime import date

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carelink.auth.password import hash_password, verify_password
from carelink.models import Participant, Staff, User, Volunteer
from carelink.models.user import UserRole
from carelink.services.error_codes import ErrorCode
from carelink.services.exceptions import ConflictError, NotFoundError, UnauthorizedError

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _email_in_use(db: Session, email: str) -> bool:
    for model in (Staff, Volunteer):
        if db.scalar(select(model.user_id).where(model.email == email)) is not None:
            return True
    return False


def _commit_signup(db: Session, conflict: ConflictError) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise conflict from exc


def create_participant(
    db: Session,
    full_name: str,
    phone_number: str,
    birthdate: date,
    image_url: str | None = None,
) -> tuple[User, Participant]:
    conflict = ConflictError(ErrorCode.PHONE_IN_USE.value, "phone number already registered")
    if db.scalar(select(Participant).where(Participant.phone_number == phone_number)):
        raise conflict

    user = User(full_name=full_name, role=UserRole.PARTICIPANT, image_url=image_url)
    db.add(user)
    db.flush()

    participant = Participant(user_id=user.id, phone_number=phone_number, birthdate=birthdate)
    db.add(participant)
    _commit_signup(db, conflict)

    db.refresh(user)
    db.refresh(participant)
    logger.info("participant_created", user_id=user.id)
    return user, participant


def _create_credentialed(
    db: Session,
    model: type[Staff] | type[Volunteer],
    role: UserRole,
    full_name: str,
    email: str,
    password: str,
    image_url: str | None,
):
    email = normalize_email(email)
    conflict = ConflictError(ErrorCode.EMAIL_IN_USE.value, "email already registered")
    if _email_in_use(db, email):
        raise conflict

    user = User(full_name=full_name, role=role, image_url=image_url)
    db.add(user)
    db.flush()

    account = model(user_id=user.id, email=email, password_hash=hash_password(password))
    db.add(account)
    _commit_signup(db, conflict)

    db.refresh(user)
    db.refresh(account)
    logger.info("account_created", user_id=user.id, role=role.value)
    return user, account


def create_volunteer(
    db: Session, full_name: str, email: str, password: str, image_url: str | None = None
) -> tuple[User, Volunteer]:
    return _create_credentialed(db, Volunteer, UserRole.VOLUNTEER, full_name, email, password, image_url)


def create_staff(
    db: Session, full_name: str, email: str, password: str, image_url: str | None = None
) -> tuple[User, Staff]:
    return _create_credentialed(db, Staff, UserRole.STAFF, full_name, email, password, image_url)


def update_staff_password(db: Session, user_id: int, password: str) -> Staff:
    staff = db.get(Staff, user_id)
    if not staff:
        raise NotFoundError(ErrorCode.STAFF_NOT_FOUND.value, "Staff not found")
    staff.password_hash = hash_password(password)
    db.add(staff)
    db.commit()
    return staff


def authenticate(db: Session, email: str, password: str) -> User:
    """Credential login for staff and volunteers; staff accounts are checked first."""
    email = normalize_email(email)
    account = db.scalar(select(Staff).where(Staff.email == email)) or db.scalar(
        select(Volunteer).where(Volunteer.email == email)
    )
    if not account or not verify_password(password, account.password_hash):
        logger.info("login_failed", email=email)
        raise UnauthorizedError(ErrorCode.INVALID_CREDENTIALS.value, "Invalid email or password")

    user = db.get(User, account.user_id)
    if not user:
        raise UnauthorizedError(ErrorCode.INVALID_CREDENTIALS.value, "Invalid email or password")
    logger.info("login_succeeded", user_id=user.id, role=user.role.value)
    return user


def check_or_create_participant(
    db: Session, phone_number: str, full_name: str, birthdate: date
) -> tuple[User, bool]:
    """Find the participant for a phone number or sign them up.

    Returns the user and whether it was newly created.
    """
    participant = db.scalar(select(Participant).where(Participant.phone_number == phone_number))
    if participant is None:
        user, _ = create_participant(db, full_name, phone_number, birthdate)
        return user, True

    if participant.birthdate != birthdate:
        raise ConflictError(
            ErrorCode.BIRTHDATE_MISMATCH.value,
            "phone number is registered with a different birthdate",
        )

    user = db.get(User, participant.user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, "User not found")
    if user.full_name != full_name:
        user.full_name = full_name
        db.add(user)
        db.commit()
        db.refresh(user)
    return user, False


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, "User not found")
    return user


def delete_account(db: Session, user_id: int) -> None:
    """Remove the role rows and then the user, in one transaction."""
    user = get_user(db, user_id)
    for model in (Participant, Volunteer, Staff):
        db.execute(delete(model).where(model.user_id == user.id))
    db.execute(delete(User).where(User.id == user.id))
    db.commit()
    logger.info("account_deleted", user_id=user_id)
