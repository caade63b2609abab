from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from carelink.models.base import Base, CreatedAtMixin, IntPrimaryKeyMixin


class UserRole(str, Enum):
    PARTICIPANT = "participant"
    VOLUNTEER = "volunteer"
    STAFF = "staff"


class User(Base, IntPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
    )
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
