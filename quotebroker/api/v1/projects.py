# quotebroker/api/v1/projects.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from quotebroker.core.auth_deps import get_current_principal
from quotebroker.core.config import Settings, get_settings
from quotebroker.db.session import get_db
from quotebroker.policies.rbac import Principal
from quotebroker.policies.visibility import QuoteVisibility
from quotebroker.schemas.projects import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from quotebroker.schemas.quotes import QuoteListResponse, QuoteUploadResponse
from quotebroker.services.projects_service import DETAIL_FIELDS, ProjectsService
from quotebroker.services.quotes_service import QuotesService
from quotebroker.services.storage_service import LocalQuoteStorage, get_storage

router = APIRouter(prefix="/projects")


def _iso(dt):
    return dt.isoformat() if dt else None


def _resp(p) -> dict:
    out = {
        "id": str(p.id),
        "title": p.title,
        "status": p.status,
        "created_by": str(p.created_by) if p.created_by else None,
        "created_at": _iso(p.created_at),
        "updated_at": _iso(p.updated_at),
    }
    for field in DETAIL_FIELDS:
        value = getattr(p, field)
        out[field] = _iso(value) if field.endswith("_date") else value
    return out


def _quote_item(q, vis: QuoteVisibility) -> dict:
    if not vis.is_full:
        return {
            "view": "restricted",
            "id": str(q.id),
            "contractor_type": q.contractor_type,
            "created_at": _iso(q.created_at),
            "access": vis.request_action.value,
        }

    if vis.is_owner:
        uploader_email = "me"
    else:
        uploader_email = q.uploader.email if q.uploader else None

    return {
        "view": "full",
        "id": str(q.id),
        "contractor_type": q.contractor_type,
        "amount": str(q.amount),
        "uploader_email": uploader_email,
        "file_name": q.file_name,
        "company_name": q.company_name,
        "phone_number": q.phone_number,
        "email": q.email,
        "created_at": _iso(q.created_at),
        "can_download": vis.can_download,
        "can_delete": vis.can_delete,
        "pending_requests": [
            {
                "id": str(r.id),
                "requester_user_id": str(r.requester_user_id),
                "requester_email": r.requester.email if r.requester else None,
                "created_at": _iso(r.created_at),
            }
            for r in vis.pending_requests
        ],
    }


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    body: ProjectCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    details = body.model_dump(exclude={"title"}, exclude_none=True)
    p = ProjectsService().create(db, owner=principal, title=body.title, **details)
    return _resp(p)


@router.get("", response_model=ProjectListResponse)
def list_projects(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    items = ProjectsService().list(db)
    return {"items": [_resp(p) for p in items]}


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return _resp(ProjectsService().get(db, project_id=project_id))


@router.patch("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    body: ProjectUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    changes = body.model_dump(exclude_unset=True)
    p = ProjectsService().update(db, project_id=project_id, caller=principal, changes=changes)
    return _resp(p)


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: LocalQuoteStorage = Depends(get_storage),
):
    ProjectsService().delete(db, project_id=project_id, caller=principal, storage=storage)
    return {"success": True}


# ---------------------------
# QUOTES UNDER A PROJECT
# ---------------------------


@router.post("/{project_id}/quotes", response_model=QuoteUploadResponse, status_code=201)
def upload_quote(
    project_id: str,
    contractor_type: str = Form(...),
    amount: Decimal = Form(...),
    company_name: Optional[str] = Form(default=None),
    phone_number: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: LocalQuoteStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    data = file.file.read()

    q = QuotesService(storage, settings.max_quote_file_bytes).upload(
        db,
        project_id=project_id,
        uploader=principal,
        contractor_type=contractor_type,
        amount=amount,
        file_name=file.filename or "",
        content_type=file.content_type,
        data=data,
        company_name=company_name,
        phone_number=phone_number,
        email=email,
    )
    return {
        "id": str(q.id),
        "project_id": str(q.project_id),
        "contractor_type": q.contractor_type,
        "amount": str(q.amount),
        "file_name": q.file_name,
        "created_at": _iso(q.created_at),
    }


@router.get("/{project_id}/quotes", response_model=QuoteListResponse)
def list_project_quotes(
    project_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: LocalQuoteStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    rows = QuotesService(storage, settings.max_quote_file_bytes).list_for_viewer(
        db, project_id=project_id, viewer=principal
    )
    return {"items": [_quote_item(q, vis) for q, vis in rows]}
