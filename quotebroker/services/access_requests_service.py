#quotebroker/services/access_requests_service.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from quotebroker.core.errors import DependencyFailure, InvalidOperation, NotFound
from quotebroker.models.access_request import AccessRequest
from quotebroker.models.enums import ACTIVE_ACCESS_STATUSES, AccessRequestStatus
from quotebroker.models.profile import Profile
from quotebroker.models.quote import Quote
from quotebroker.policies.access_policy import enforce_can_grant
from quotebroker.policies.rbac import Principal
from quotebroker.services.notification_service import (
    EmailNotifier,
    notify_access_granted,
    notify_access_requested,
    project_url,
)

logger = logging.getLogger(__name__)

MSG_CREATED = "Access request created successfully."
MSG_ALREADY_PENDING = "Access request already pending."
MSG_ALREADY_GRANTED = "Access already granted."
MSG_GRANTED = "Access granted successfully."


@dataclass(frozen=True)
class IntakeResult:
    created: bool
    message: str
    access_request: Optional[AccessRequest] = None


def _parse_uuid(raw) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


class AccessRequestsService:
    def __init__(self, notifier: Optional[EmailNotifier] = None, app_base_url: str = ""):
        self.notifier = notifier
        self.app_base_url = app_base_url

    # ---------------------------
    # READS
    # ---------------------------

    def get_active_request(
        self, db: Session, *, quote_id: uuid.UUID, requester_id: uuid.UUID
    ) -> Optional[AccessRequest]:
        """
        The active (pending or granted) request for the pair, granted first
        if a lost race ever left two rows behind.
        """
        rows = db.execute(
            select(AccessRequest).where(
                AccessRequest.quote_id == quote_id,
                AccessRequest.requester_user_id == requester_id,
                AccessRequest.status.in_(ACTIVE_ACCESS_STATUSES),
            )
        ).scalars().all()

        for row in rows:
            if row.status == AccessRequestStatus.granted.value:
                return row
        return rows[0] if rows else None

    def list_for_requester(self, db: Session, *, requester_id: uuid.UUID) -> List[AccessRequest]:
        return list(
            db.execute(
                select(AccessRequest)
                .where(AccessRequest.requester_user_id == requester_id)
                .order_by(AccessRequest.created_at.desc())
            ).scalars().all()
        )

    def list_for_uploader(
        self,
        db: Session,
        *,
        uploader_id: uuid.UUID,
        status: Optional[str] = None,
    ) -> List[AccessRequest]:
        stmt = (
            select(AccessRequest)
            .options(joinedload(AccessRequest.requester))
            .where(AccessRequest.uploader_user_id == uploader_id)
        )
        if status:
            stmt = stmt.where(AccessRequest.status == status)
        stmt = stmt.order_by(AccessRequest.created_at.desc())
        return list(db.execute(stmt).scalars().all())

    # ---------------------------
    # REQUEST INTAKE
    # ---------------------------

    def request_access(self, db: Session, *, quote_id, requester: Principal) -> IntakeResult:
        """
        Creates a pending request for (quote, requester) unless one is already
        active, then tells the uploader. The email is best-effort.
        """
        quote = self._load_quote(db, quote_id)

        if requester.is_user(quote.user_id):
            logger.warning(
                "self access request rejected",
                extra={"quote_id": str(quote.id), "user_id": requester.user_id},
            )
            raise InvalidOperation("You cannot request access to your own quote.")

        requester_id = uuid.UUID(requester.user_id)

        try:
            existing = self.get_active_request(db, quote_id=quote.id, requester_id=requester_id)
        except SQLAlchemyError:
            logger.exception("existing request check failed", extra={"quote_id": str(quote.id)})
            raise DependencyFailure("Database error checking existing requests.")

        if existing is not None:
            return self._already_active(existing)

        row = AccessRequest(
            quote_id=quote.id,
            requester_user_id=requester_id,
            uploader_user_id=quote.user_id,
            status=AccessRequestStatus.pending.value,
        )
        try:
            db.add(row)
            db.commit()
        except IntegrityError:
            # a concurrent call for the same pair won the partial unique index
            db.rollback()
            winner = self.get_active_request(db, quote_id=quote.id, requester_id=requester_id)
            if winner is not None:
                return self._already_active(winner)
            logger.exception("insert request failed", extra={"quote_id": str(quote.id)})
            raise DependencyFailure("Failed to create access request.")
        except SQLAlchemyError:
            db.rollback()
            logger.exception("insert request failed", extra={"quote_id": str(quote.id)})
            raise DependencyFailure("Failed to create access request.")

        db.refresh(row)
        logger.info(
            "access request created",
            extra={
                "access_request_id": str(row.id),
                "quote_id": str(quote.id),
                "requester_user_id": requester.user_id,
            },
        )

        project = quote.project
        notify_access_requested(
            self.notifier,
            uploader_email=self._lookup_email(db, quote.user_id),
            requester_email=requester.email,
            contractor_type=quote.contractor_type,
            project_title=project.title if project else None,
            link=project_url(self.app_base_url, quote.project_id),
        )

        return IntakeResult(created=True, message=MSG_CREATED, access_request=row)

    # ---------------------------
    # GRANT DECISION
    # ---------------------------

    def grant(self, db: Session, *, request_id, caller: Optional[Principal]) -> AccessRequest:
        """
        pending -> granted. Only the uploader recorded on the request or an
        admin may do this; everyone else gets PermissionDenied and the row is
        left untouched.
        """
        req = self._load_request(db, request_id)

        enforce_can_grant(caller, req)

        if req.status == AccessRequestStatus.granted.value:
            logger.info("access request already granted", extra={"access_request_id": str(req.id)})
            return req

        if req.status != AccessRequestStatus.pending.value:
            raise InvalidOperation("Only pending requests can be granted.")

        try:
            req.status = AccessRequestStatus.granted.value
            db.add(req)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("grant update failed", extra={"access_request_id": str(req.id)})
            raise DependencyFailure("Failed to grant access.")

        db.refresh(req)
        logger.info(
            "access request granted",
            extra={"access_request_id": str(req.id), "granted_by": caller.user_id},
        )

        quote = req.quote
        project = quote.project if quote else None
        notify_access_granted(
            self.notifier,
            requester_email=self._lookup_email(db, req.requester_user_id),
            contractor_type=quote.contractor_type if quote else None,
            project_title=project.title if project else None,
            link=project_url(self.app_base_url, quote.project_id if quote else None),
        )

        return req

    # ---------------------------
    # internal
    # ---------------------------

    def _already_active(self, existing: AccessRequest) -> IntakeResult:
        message = (
            MSG_ALREADY_PENDING
            if existing.status == AccessRequestStatus.pending.value
            else MSG_ALREADY_GRANTED
        )
        return IntakeResult(created=False, message=message, access_request=existing)

    def _load_quote(self, db: Session, quote_id) -> Quote:
        parsed = _parse_uuid(quote_id)
        quote = None
        if parsed is not None:
            try:
                quote = db.execute(
                    select(Quote).options(joinedload(Quote.project)).where(Quote.id == parsed)
                ).scalar_one_or_none()
            except SQLAlchemyError:
                logger.exception("quote fetch failed", extra={"quote_id": str(quote_id)})
        if quote is None:
            logger.warning("quote not found", extra={"quote_id": str(quote_id)})
            raise NotFound("Could not find the specified quote.")
        return quote

    def _load_request(self, db: Session, request_id) -> AccessRequest:
        parsed = _parse_uuid(request_id)
        req = None
        if parsed is not None:
            try:
                req = db.execute(
                    select(AccessRequest)
                    .options(joinedload(AccessRequest.quote).joinedload(Quote.project))
                    .where(AccessRequest.id == parsed)
                ).scalar_one_or_none()
            except SQLAlchemyError:
                logger.exception("request fetch failed", extra={"access_request_id": str(request_id)})
        if req is None:
            logger.warning("access request not found", extra={"access_request_id": str(request_id)})
            raise NotFound("Could not find the request details.")
        return req

    def _lookup_email(self, db: Session, user_id) -> Optional[str]:
        try:
            profile = db.get(Profile, user_id)
        except SQLAlchemyError:
            logger.exception("email lookup failed", extra={"user_id": str(user_id)})
            return None
        return profile.email if profile else None
