# quotebroker/services/auth_service.py
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quotebroker.core.errors import InvalidOperation
from quotebroker.core.security import hash_password, verify_password
from quotebroker.models.profile import Profile
from quotebroker.policies.rbac import Principal

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.execute(
        select(Profile).where(func.lower(Profile.email) == _normalize_email(email))
    ).scalar_one_or_none()


def register(
    db: Session,
    *,
    email: str,
    password: str,
    company_name: Optional[str] = None,
    company_type: Optional[str] = None,
    is_admin: bool = False,
) -> Profile:
    if find_by_email(db, email) is not None:
        raise InvalidOperation("Email already registered.")

    p = Profile(
        email=_normalize_email(email),
        password_hash=hash_password(password),
        company_name=company_name,
        company_type=company_type,
        is_admin=is_admin,
    )
    db.add(p)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidOperation("Email already registered.")

    db.refresh(p)
    logger.info("profile registered", extra={"user_id": str(p.id)})
    return p


def authenticate(db: Session, email: str, password: str) -> Principal | None:
    p = find_by_email(db, email)

    if not p:
        return None

    if not verify_password(password, p.password_hash):
        return None

    return Principal(user_id=str(p.id), email=p.email, is_admin=bool(p.is_admin))
