# quotebroker/api/v1/admin/registered_emails.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quotebroker.core.auth_deps import get_current_principal
from quotebroker.db.session import get_db
from quotebroker.policies.rbac import Principal
from quotebroker.schemas.registered_emails import (
    RegisteredEmailCreateRequest,
    RegisteredEmailListResponse,
    RegisteredEmailResponse,
)
from quotebroker.services.registered_emails_service import RegisteredEmailsService

router = APIRouter(prefix="/admin/registered-emails", tags=["admin"])


def _resp(r) -> dict:
    return {
        "id": str(r.id),
        "email": r.email,
        "city": r.city,
        "company_type": r.company_type,
        "contractor_type": r.contractor_type,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


@router.post("", response_model=RegisteredEmailResponse, status_code=201)
def register_email(
    body: RegisteredEmailCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    row = RegisteredEmailsService().create(
        db,
        caller=principal,
        email=body.email,
        city=body.city,
        company_type=body.company_type.value,
        contractor_type=body.contractor_type,
    )
    return _resp(row)


@router.get("", response_model=RegisteredEmailListResponse)
def list_registered_emails(
    city: Optional[str] = Query(default=None),
    company_type: Optional[str] = Query(default=None),
    contractor_type: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = RegisteredEmailsService().list(
        db,
        caller=principal,
        city=city,
        company_type=company_type,
        contractor_type=contractor_type,
    )
    return {"items": [_resp(r) for r in rows]}
