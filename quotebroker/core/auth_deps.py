#quotebroker/core/auth_deps.py
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import Depends, Header, Request
from jose import JWTError
from sqlalchemy.orm import Session

from quotebroker.core.errors import Unauthenticated
from quotebroker.core.security import decode_token
from quotebroker.db.session import get_db
from quotebroker.models.profile import Profile
from quotebroker.policies.rbac import Principal

logger = logging.getLogger(__name__)


def resolve_principal(db: Session, authorization: Optional[str]) -> Principal:
    """
    Bearer credential -> Principal.

    The admin flag always comes from the profile row, never from token claims.
    """
    if not authorization:
        raise Unauthenticated("Missing authorization header.")

    token = authorization.replace("Bearer ", "", 1).strip()

    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.warning("token rejected", extra={"reason": str(e)})
        raise Unauthenticated("Authentication failed.")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except (TypeError, ValueError):
        logger.warning("token subject is not a user id")
        raise Unauthenticated("Authentication failed.")

    profile = db.get(Profile, user_id)
    if profile is None:
        logger.warning("token subject has no profile", extra={"user_id": str(user_id)})
        raise Unauthenticated("Authentication failed.")

    return Principal(
        user_id=str(profile.id),
        email=profile.email or payload.get("email"),
        is_admin=bool(profile.is_admin),
    )


def resolve_optional_principal(db: Session, authorization: Optional[str]) -> Optional[Principal]:
    try:
        return resolve_principal(db, authorization)
    except Unauthenticated:
        return None


def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Canonical authentication dependency for the CRUD endpoints.
    The two access-request endpoints resolve the caller themselves so that
    body validation happens before authentication.
    """
    principal = resolve_principal(db, authorization)

    # Make principal available to downstream middleware / handlers
    request.state.principal = principal

    return principal
