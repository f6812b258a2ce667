# quotebroker/services/quotes_service.py
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from quotebroker.core.errors import DependencyFailure, InvalidInput, NotFound, PermissionDenied
from quotebroker.models.access_request import AccessRequest
from quotebroker.models.project import Project
from quotebroker.models.quote import Quote
from quotebroker.policies.access_policy import enforce_can_delete_quote, enforce_can_upload_quote
from quotebroker.policies.rbac import Principal
from quotebroker.policies.visibility import QuoteVisibility, decide_quote_visibility
from quotebroker.services.storage_service import LocalQuoteStorage, build_quote_path

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def _parse_uuid(raw) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


def _is_pdf(file_name: str, content_type: Optional[str]) -> bool:
    if content_type and content_type != PDF_CONTENT_TYPE:
        return False
    return file_name.lower().endswith(".pdf")


class QuotesService:
    def __init__(self, storage: LocalQuoteStorage, max_file_bytes: int):
        self.storage = storage
        self.max_file_bytes = max_file_bytes

    # ---------------------------
    # UPLOAD
    # ---------------------------

    def upload(
        self,
        db: Session,
        *,
        project_id,
        uploader: Principal,
        contractor_type: str,
        amount: Decimal,
        file_name: str,
        content_type: Optional[str],
        data: bytes,
        company_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Quote:
        """
        Stores the PDF first, then the row. A failed insert removes the file
        again so no orphan is left behind in the store.
        """
        contractor_type = (contractor_type or "").strip()
        if not contractor_type or len(contractor_type) > 50:
            raise InvalidInput("Contractor type must be between 1 and 50 characters.")
        if amount is None or amount <= 0:
            raise InvalidInput("Amount must be greater than zero.")
        if not file_name or not _is_pdf(file_name, content_type):
            raise InvalidInput("Only PDF files are allowed.")
        if not data:
            raise InvalidInput("The uploaded file is empty.")
        if len(data) > self.max_file_bytes:
            raise InvalidInput(
                f"The file is too large (max {self.max_file_bytes // (1024 * 1024)}MB)."
            )

        project = self._load_project(db, project_id)
        enforce_can_upload_quote(uploader, project.created_by)

        file_path = build_quote_path(project.id, file_name)
        try:
            self.storage.save(file_path, data)
        except (OSError, ValueError):
            logger.exception("quote file store failed", extra={"project_id": str(project.id)})
            raise DependencyFailure("Failed to store the quote file.")

        quote = Quote(
            project_id=project.id,
            user_id=uuid.UUID(uploader.user_id),
            contractor_type=contractor_type,
            amount=amount,
            file_path=file_path,
            file_name=file_name,
            company_name=company_name,
            phone_number=phone_number,
            email=email,
        )
        try:
            db.add(quote)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("quote insert failed", extra={"project_id": str(project.id)})
            self._remove_file(file_path)
            raise DependencyFailure("Failed to save quote.")

        db.refresh(quote)
        logger.info(
            "quote uploaded",
            extra={"quote_id": str(quote.id), "project_id": str(project.id), "user_id": uploader.user_id},
        )
        return quote

    # ---------------------------
    # LIST (visibility gated)
    # ---------------------------

    def list_for_viewer(
        self, db: Session, *, project_id, viewer: Principal
    ) -> List[Tuple[Quote, QuoteVisibility]]:
        project = self._load_project(db, project_id)

        quotes = list(
            db.execute(
                select(Quote)
                .options(joinedload(Quote.uploader))
                .where(Quote.project_id == project.id)
                .order_by(Quote.created_at.desc())
            ).scalars().all()
        )
        if not quotes:
            return []

        quote_ids = [q.id for q in quotes]
        viewer_id = uuid.UUID(viewer.user_id)

        my_requests = db.execute(
            select(AccessRequest).where(
                AccessRequest.requester_user_id == viewer_id,
                AccessRequest.quote_id.in_(quote_ids),
            )
        ).scalars().all()

        requests_for_my_quotes = db.execute(
            select(AccessRequest)
            .options(joinedload(AccessRequest.requester))
            .where(
                AccessRequest.uploader_user_id == viewer_id,
                AccessRequest.quote_id.in_(quote_ids),
            )
            .order_by(AccessRequest.created_at.asc())
        ).scalars().all()

        return [
            (
                q,
                decide_quote_visibility(
                    q,
                    viewer_id=viewer.user_id,
                    viewer_is_admin=viewer.is_admin,
                    my_requests=my_requests,
                    requests_for_my_quotes=requests_for_my_quotes,
                ),
            )
            for q in quotes
        ]

    # ---------------------------
    # DOWNLOAD
    # ---------------------------

    def get_download(self, db: Session, *, quote_id, viewer: Principal) -> Tuple[Quote, Path]:
        quote = self._load_quote(db, quote_id)

        my_requests = db.execute(
            select(AccessRequest).where(
                AccessRequest.requester_user_id == uuid.UUID(viewer.user_id),
                AccessRequest.quote_id == quote.id,
            )
        ).scalars().all()

        visibility = decide_quote_visibility(
            quote,
            viewer_id=viewer.user_id,
            viewer_is_admin=viewer.is_admin,
            my_requests=my_requests,
        )
        if not visibility.can_download:
            logger.warning(
                "quote download refused",
                extra={"quote_id": str(quote.id), "user_id": viewer.user_id},
            )
            raise PermissionDenied("You do not have access to this quote.")

        try:
            path = self.storage.open_path(quote.file_path)
        except (FileNotFoundError, ValueError):
            logger.error("quote file missing", extra={"quote_id": str(quote.id), "path": quote.file_path})
            raise NotFound("Could not find the quote file.")

        return quote, path

    # ---------------------------
    # DELETE
    # ---------------------------

    def delete(self, db: Session, *, quote_id, caller: Principal) -> None:
        quote = self._load_quote(db, quote_id)
        enforce_can_delete_quote(caller, quote)

        file_path = quote.file_path
        try:
            db.delete(quote)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("quote delete failed", extra={"quote_id": str(quote_id)})
            raise DependencyFailure("Failed to delete quote.")

        logger.info("quote deleted", extra={"quote_id": str(quote_id), "deleted_by": caller.user_id})
        self._remove_file(file_path)

    # ---------------------------
    # internal
    # ---------------------------

    def _remove_file(self, file_path: str) -> None:
        try:
            self.storage.delete(file_path)
        except (OSError, ValueError):
            logger.exception("quote file removal failed", extra={"path": file_path})

    def _load_project(self, db: Session, project_id) -> Project:
        parsed = _parse_uuid(project_id)
        project = db.get(Project, parsed) if parsed is not None else None
        if project is None:
            raise NotFound("Could not find the specified project.")
        return project

    def _load_quote(self, db: Session, quote_id) -> Quote:
        parsed = _parse_uuid(quote_id)
        quote = db.get(Quote, parsed) if parsed is not None else None
        if quote is None:
            raise NotFound("Could not find the specified quote.")
        return quote
