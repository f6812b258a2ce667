# quotebroker/models/registered_email.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from quotebroker.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RegisteredEmail(Base):
    """
    Contractor contact kept by administrators for project mail-outs.
    Not tied to a profile: the address may belong to someone without an account.
    """

    __tablename__ = "registered_emails"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    city: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    company_type: Mapped[str] = mapped_column(String(64), nullable=False)
    contractor_type: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    __table_args__ = (Index("ix_registered_emails_created_at", "created_at"),)
