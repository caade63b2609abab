from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from carelink.models.base import Base, CreatedAtMixin, IntPrimaryKeyMixin

DEFAULT_MAX_PARTICIPANTS = 10
DEFAULT_MAX_VOLUNTEERS = 5


class Event(Base, IntPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    disabled_friendly: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    location: Mapped[str | None] = mapped_column(String(300), nullable=True)
    additional_information: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    max_participants: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_MAX_PARTICIPANTS
    )
    max_volunteers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_MAX_VOLUNTEERS
    )
