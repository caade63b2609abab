from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from carelink.models.base import Base, CreatedAtMixin


class Participant(Base, CreatedAtMixin):
    __tablename__ = "participants"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Login identifier for the one-time-code flow
    phone_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)


class Volunteer(Base, CreatedAtMixin):
    __tablename__ = "volunteers"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class Staff(Base, CreatedAtMixin):
    __tablename__ = "staff"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
