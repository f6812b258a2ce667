#quotebroker/api/v1/auth.py
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quotebroker.core.auth_deps import get_current_principal
from quotebroker.core.errors import Unauthenticated
from quotebroker.core.security import create_access_token
from quotebroker.db.session import get_db
from quotebroker.models.profile import Profile
from quotebroker.schemas.auth import (
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    TokenResponse,
)
from quotebroker.services.auth_service import authenticate, register

router = APIRouter(prefix="/auth")


def _profile(p: Profile) -> dict:
    return {
        "id": str(p.id),
        "email": p.email,
        "is_admin": bool(p.is_admin),
        "company_name": p.company_name,
        "company_type": p.company_type,
    }


@router.post("/register", response_model=ProfileResponse, status_code=201)
def register_profile(req: RegisterRequest, db: Session = Depends(get_db)):
    p = register(
        db,
        email=req.email,
        password=req.password,
        company_name=req.company_name,
        company_type=req.company_type.value if req.company_type else None,
    )
    return _profile(p)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    principal = authenticate(db, req.email, req.password)
    if not principal:
        raise Unauthenticated("Invalid credentials.")

    token = create_access_token(
        subject=principal.user_id,
        claims={"email": principal.email},
    )
    return TokenResponse(access_token=token)


@router.get("/me", response_model=ProfileResponse)
def get_me(principal=Depends(get_current_principal), db: Session = Depends(get_db)):
    return _profile(db.get(Profile, uuid.UUID(principal.user_id)))
