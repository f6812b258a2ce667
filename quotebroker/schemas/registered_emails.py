#quotebroker/schemas/registered_emails.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quotebroker.models.enums import CONTRACTOR_TYPES, CompanyType


class RegisteredEmailCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(..., max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    city: Optional[str] = Field(default=None, max_length=128)
    company_type: CompanyType
    contractor_type: str

    @field_validator("contractor_type")
    @classmethod
    def known_contractor_type(cls, v: str) -> str:
        if v not in CONTRACTOR_TYPES:
            raise ValueError("unknown contractor type")
        return v


class RegisteredEmailResponse(BaseModel):
    id: str
    email: str
    city: Optional[str] = None
    company_type: str
    contractor_type: str
    created_at: Optional[str] = None


class RegisteredEmailListResponse(BaseModel):
    items: List[RegisteredEmailResponse]
