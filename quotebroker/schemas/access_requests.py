#quotebroker/schemas/access_requests.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CreateAccessRequestBody(BaseModel):
    # presence is checked by the endpoint so the exact message can be returned
    model_config = ConfigDict(extra="ignore")

    quoteId: Optional[str] = None


class GrantAccessRequestBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    requestId: Optional[str] = None


class AccessRequestResponse(BaseModel):
    id: str
    quote_id: str
    requester_user_id: str
    uploader_user_id: str
    status: str
    created_at: Optional[str] = None
    requester_email: Optional[str] = None
