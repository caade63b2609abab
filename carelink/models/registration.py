from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from carelink.models.base import Base


class ParticipantEvent(Base):
    __tablename__ = "participant_events"

    # Composite primary key doubles as the one-row-per-pair constraint
    participant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("participants.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    signed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class VolunteerEvent(Base):
    __tablename__ = "volunteer_events"

    volunteer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("volunteers.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    signed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
