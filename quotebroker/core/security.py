# quotebroker/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from quotebroker.core.config import get_settings
from quotebroker.core.errors import ServiceConfigError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)


def verify_password(raw: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(raw, hashed)


def _signing_key() -> str:
    key = get_settings().jwt_secret_key
    if not key:
        raise ServiceConfigError()
    return key


def create_access_token(subject: str, claims: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    exp_minutes = expires_minutes or settings.jwt_access_token_minutes
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_minutes)).timestamp()),
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Raises jose.JWTError on a bad signature, malformed token or expiry.
    """
    settings = get_settings()
    return jwt.decode(token, _signing_key(), algorithms=[settings.jwt_algorithm])
