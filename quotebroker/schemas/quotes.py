#quotebroker/schemas/quotes.py
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel


class PendingRequestItem(BaseModel):
    id: str
    requester_user_id: str
    requester_email: Optional[str] = None
    created_at: Optional[str] = None


class QuoteFullView(BaseModel):
    view: Literal["full"] = "full"
    id: str
    contractor_type: str
    amount: str
    # "me" when the viewer uploaded the quote
    uploader_email: Optional[str] = None
    file_name: str
    company_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None
    can_download: bool
    can_delete: bool
    pending_requests: List[PendingRequestItem] = []


class QuoteRestrictedView(BaseModel):
    view: Literal["restricted"] = "restricted"
    id: str
    contractor_type: str
    created_at: Optional[str] = None
    access: Literal["request", "requested"]


class QuoteListResponse(BaseModel):
    items: List[Union[QuoteFullView, QuoteRestrictedView]]


class QuoteUploadResponse(BaseModel):
    id: str
    project_id: str
    contractor_type: str
    amount: str
    file_name: str
    created_at: Optional[str] = None
