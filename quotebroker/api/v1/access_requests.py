#quotebroker/api/v1/access_requests.py
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from quotebroker.core.auth_deps import (
    get_current_principal,
    resolve_optional_principal,
    resolve_principal,
)
from quotebroker.core.config import Settings, get_settings
from quotebroker.core.deps import configured_body, require_service_config
from quotebroker.core.errors import InvalidInput
from quotebroker.db.session import get_db
from quotebroker.models.enums import AccessRequestStatus
from quotebroker.policies.rbac import Principal
from quotebroker.schemas.access_requests import (
    AccessRequestResponse,
    CreateAccessRequestBody,
    GrantAccessRequestBody,
)
from quotebroker.services.access_requests_service import MSG_GRANTED, AccessRequestsService
from quotebroker.services.notification_service import EmailNotifier, get_notifier

logger = logging.getLogger(__name__)

router = APIRouter()


def _iso(dt):
    return dt.isoformat() if dt else None


def _parse_body(model: type[BaseModel], raw: bytes):
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        logger.info("invalid request body", extra={"errors": str(exc.errors())})
        raise InvalidInput("Invalid request body.")


def _resp(r) -> dict:
    requester = getattr(r, "requester", None)
    return {
        "id": str(r.id),
        "quote_id": str(r.quote_id),
        "requester_user_id": str(r.requester_user_id),
        "uploader_user_id": str(r.uploader_user_id),
        "status": r.status,
        "created_at": _iso(r.created_at),
        "requester_email": requester.email if requester else None,
    }


@router.post("/request-quote-access", dependencies=[Depends(require_service_config)])
def request_quote_access(
    raw_body: bytes = Depends(configured_body),
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    body = _parse_body(CreateAccessRequestBody, raw_body)
    if not body.quoteId:
        raise InvalidInput("Missing quoteId in request body.")

    # body first, then the caller
    requester = resolve_principal(db, authorization)

    svc = AccessRequestsService(notifier, settings.app_base_url)
    result = svc.request_access(db, quote_id=body.quoteId, requester=requester)

    if result.created:
        return JSONResponse(status_code=201, content={"success": True, "message": result.message})
    return JSONResponse(status_code=200, content={"message": result.message})


@router.post("/grant-quote-access", dependencies=[Depends(require_service_config)])
def grant_quote_access(
    raw_body: bytes = Depends(configured_body),
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    body = _parse_body(GrantAccessRequestBody, raw_body)
    if not body.requestId:
        raise InvalidInput("Missing requestId in request body.")

    # an unresolvable caller is neither uploader nor admin: 403 after the 404 check
    caller = resolve_optional_principal(db, authorization)

    svc = AccessRequestsService(notifier, settings.app_base_url)
    svc.grant(db, request_id=body.requestId, caller=caller)

    return JSONResponse(status_code=200, content={"success": True, "message": MSG_GRANTED})


@router.get("/access-requests/mine", response_model=list[AccessRequestResponse])
def my_access_requests(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    svc = AccessRequestsService()
    rows = svc.list_for_requester(db, requester_id=uuid.UUID(principal.user_id))
    return [_resp(r) for r in rows]


@router.get("/access-requests/incoming", response_model=list[AccessRequestResponse])
def incoming_access_requests(
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if status is not None:
        try:
            status = AccessRequestStatus(status).value
        except ValueError:
            raise InvalidInput("Invalid status filter.")

    svc = AccessRequestsService()
    rows = svc.list_for_uploader(db, uploader_id=uuid.UUID(principal.user_id), status=status)
    return [_resp(r) for r in rows]
