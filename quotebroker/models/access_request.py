#quotebroker/models/access_request.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotebroker.db.base import Base

_ACTIVE_WHERE = text("status IN ('pending', 'granted')")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AccessRequest(Base):
    """
    One requester's bid to see one quote in full.

    uploader_user_id is copied from the quote at creation time.
    At most one active (pending/granted) row per (quote, requester): enforced by
    the pre-insert check in the service and by uq_access_request_active.
    """

    __tablename__ = "quote_access_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    quote_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False
    )
    requester_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    uploader_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", server_default=text("'pending'")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )

    quote = relationship("Quote", back_populates="access_requests")
    requester = relationship("Profile", foreign_keys=[requester_user_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'granted', 'denied')",
            name="ck_access_requests_status",
        ),
        Index(
            "uq_access_request_active",
            "quote_id",
            "requester_user_id",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
        Index("ix_access_requests_requester", "requester_user_id"),
        Index("ix_access_requests_uploader_status", "uploader_user_id", "status"),
    )
