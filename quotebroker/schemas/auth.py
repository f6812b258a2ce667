from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from quotebroker.models.enums import CompanyType


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6)
    company_name: Optional[str] = Field(default=None, max_length=256)
    company_type: Optional[CompanyType] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    is_admin: bool = False
    company_name: Optional[str] = None
    company_type: Optional[str] = None
