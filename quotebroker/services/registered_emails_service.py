# quotebroker/services/registered_emails_service.py
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quotebroker.core.errors import DependencyFailure, InvalidOperation
from quotebroker.models.registered_email import RegisteredEmail
from quotebroker.policies.rbac import Principal, require_admin

logger = logging.getLogger(__name__)

MSG_DUPLICATE = "The email address is already registered."


class RegisteredEmailsService:
    """Admin-only registry of contractor addresses for project mail-outs."""

    def create(
        self,
        db: Session,
        *,
        caller: Principal,
        email: str,
        company_type: str,
        contractor_type: str,
        city: Optional[str] = None,
    ) -> RegisteredEmail:
        require_admin(caller)

        email = email.strip().lower()
        exists = db.execute(
            select(RegisteredEmail.id).where(func.lower(RegisteredEmail.email) == email)
        ).first()
        if exists:
            raise InvalidOperation(MSG_DUPLICATE)

        row = RegisteredEmail(
            email=email,
            city=(city or "").strip() or None,
            company_type=company_type,
            contractor_type=contractor_type,
        )
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise InvalidOperation(MSG_DUPLICATE)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("registered email insert failed")
            raise DependencyFailure("Could not register the email address.")

        db.refresh(row)
        logger.info(
            "email registered",
            extra={"registered_email_id": str(row.id), "user_id": caller.user_id},
        )
        return row

    def list(
        self,
        db: Session,
        *,
        caller: Principal,
        city: Optional[str] = None,
        company_type: Optional[str] = None,
        contractor_type: Optional[str] = None,
    ) -> List[RegisteredEmail]:
        """
        Newest first. City matches case-insensitively on a substring; the two
        type filters match exactly.
        """
        require_admin(caller)

        stmt = select(RegisteredEmail)
        if city:
            stmt = stmt.where(func.lower(RegisteredEmail.city).contains(city.strip().lower()))
        if company_type:
            stmt = stmt.where(RegisteredEmail.company_type == company_type)
        if contractor_type:
            stmt = stmt.where(RegisteredEmail.contractor_type == contractor_type)

        stmt = stmt.order_by(RegisteredEmail.created_at.desc())
        return list(db.execute(stmt).scalars().all())
