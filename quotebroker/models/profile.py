# quotebroker/models/profile.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from quotebroker.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    """
    Identity record: the token subject resolves here for email and admin flag.
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True, unique=True)

    # 🔐 AUTH
    password_hash: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    company_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    company_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )
