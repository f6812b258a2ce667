# quotebroker/models/project.py
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotebroker.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(
        String(64), nullable=False, default="open", server_default=text("'open'")
    )

    # descriptive details, all optional and editable by administrators
    area: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    project_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    client_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    client_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    client_category: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    main_contractor: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    environmental_class: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    gross_floor_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    building_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    num_buildings: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    num_floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    num_apartments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tender_document_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    supplementary_tender_document_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    other_project_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    quotes: Mapped[List["Quote"]] = relationship(
        "Quote",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_projects_created_at", "created_at"),)
