# quotebroker/services/projects_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quotebroker.core.errors import DependencyFailure, InvalidInput, NotFound
from quotebroker.models.project import Project
from quotebroker.policies.rbac import Principal, require_admin
from quotebroker.services.storage_service import LocalQuoteStorage

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "description",
    "category",
    "area",
    "project_type",
    "client_name",
    "client_type",
    "client_category",
    "main_contractor",
    "start_date",
    "completion_date",
    "environmental_class",
    "gross_floor_area",
    "building_area",
    "num_buildings",
    "num_floors",
    "num_apartments",
    "tender_document_url",
    "supplementary_tender_document_url",
    "other_project_info",
)
EDITABLE_FIELDS = ("title", "status") + DETAIL_FIELDS


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise InvalidInput("Title is required.")
    return title


class ProjectsService:
    def create(
        self,
        db: Session,
        *,
        owner: Principal,
        title: str,
        **details: Any,
    ) -> Project:
        unknown = set(details) - set(DETAIL_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown project fields: {', '.join(sorted(unknown))}.")

        p = Project(
            title=_clean_title(title),
            created_by=uuid.UUID(owner.user_id),
            **details,
        )
        db.add(p)
        db.commit()
        db.refresh(p)

        logger.info("project created", extra={"project_id": str(p.id), "user_id": owner.user_id})
        return p

    def get(self, db: Session, *, project_id) -> Project:
        try:
            parsed = uuid.UUID(str(project_id))
        except (TypeError, ValueError):
            parsed = None

        p = db.get(Project, parsed) if parsed is not None else None
        if p is None:
            raise NotFound("Could not find the specified project.")
        return p

    def list(self, db: Session, *, limit: int = 200) -> List[Project]:
        return list(
            db.execute(
                select(Project).order_by(Project.created_at.desc()).limit(limit)
            ).scalars().all()
        )

    def update(
        self, db: Session, *, project_id, caller: Principal, changes: Dict[str, Any]
    ) -> Project:
        """
        Admin only. Applies the given fields and leaves every other column
        untouched. Title and status may be changed but never cleared.
        """
        require_admin(caller)
        p = self.get(db, project_id=project_id)

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown project fields: {', '.join(sorted(unknown))}.")

        if "title" in changes:
            changes["title"] = _clean_title(changes["title"])
        if "status" in changes and not (changes["status"] or "").strip():
            raise InvalidInput("Status is required.")

        for field, value in changes.items():
            setattr(p, field, value)

        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("project update failed", extra={"project_id": str(p.id)})
            raise DependencyFailure("Failed to update project.")

        db.refresh(p)
        logger.info(
            "project updated",
            extra={"project_id": str(p.id), "user_id": caller.user_id, "fields": sorted(changes)},
        )
        return p

    def delete(
        self, db: Session, *, project_id, caller: Principal, storage: LocalQuoteStorage
    ) -> None:
        """
        Admin only. Quotes and their access requests go with the project;
        stored files are removed afterwards, best-effort.
        """
        require_admin(caller)
        p = self.get(db, project_id=project_id)

        file_paths = [q.file_path for q in p.quotes]
        try:
            db.delete(p)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("project delete failed", extra={"project_id": str(p.id)})
            raise DependencyFailure("Failed to delete project.")

        logger.info(
            "project deleted",
            extra={"project_id": str(project_id), "quotes_removed": len(file_paths)},
        )

        for path in file_paths:
            try:
                storage.delete(path)
            except (OSError, ValueError):
                logger.exception("quote file removal failed", extra={"path": path})
