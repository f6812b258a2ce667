#quotebroker/schemas/projects.py
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectDetails(BaseModel):
    """Optional descriptive fields shared by create and edit."""

    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=128)
    area: Optional[str] = Field(default=None, max_length=256)
    project_type: Optional[str] = Field(default=None, max_length=128)
    client_name: Optional[str] = Field(default=None, max_length=256)
    client_type: Optional[str] = Field(default=None, max_length=128)
    client_category: Optional[str] = Field(default=None, max_length=128)
    main_contractor: Optional[str] = Field(default=None, max_length=256)
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    environmental_class: Optional[str] = Field(default=None, max_length=128)
    gross_floor_area: Optional[float] = Field(default=None, ge=0)
    building_area: Optional[float] = Field(default=None, ge=0)
    num_buildings: Optional[int] = Field(default=None, ge=0)
    num_floors: Optional[int] = Field(default=None, ge=0)
    num_apartments: Optional[int] = Field(default=None, ge=0)
    tender_document_url: Optional[str] = Field(default=None, max_length=1024)
    supplementary_tender_document_url: Optional[str] = Field(default=None, max_length=1024)
    other_project_info: Optional[str] = None


class ProjectCreateRequest(ProjectDetails):
    title: str = Field(..., min_length=1, max_length=256)


class ProjectUpdateRequest(ProjectDetails):
    # only the fields present in the body are changed
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    status: Optional[str] = Field(default=None, min_length=1, max_length=64)


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    status: str
    area: Optional[str] = None
    project_type: Optional[str] = None
    client_name: Optional[str] = None
    client_type: Optional[str] = None
    client_category: Optional[str] = None
    main_contractor: Optional[str] = None
    start_date: Optional[str] = None
    completion_date: Optional[str] = None
    environmental_class: Optional[str] = None
    gross_floor_area: Optional[float] = None
    building_area: Optional[float] = None
    num_buildings: Optional[int] = None
    num_floors: Optional[int] = None
    num_apartments: Optional[int] = None
    tender_document_url: Optional[str] = None
    supplementary_tender_document_url: Optional[str] = None
    other_project_info: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProjectListResponse(BaseModel):
    items: List[ProjectResponse]
