"""
Pydantic schemas for Venue API requests/responses.
"""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class VenueBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=300)
    capacity: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None


class VenueCreate(VenueBase):
    slug: str = Field(..., min_length=2, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=300)
    capacity: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None


class VenueResponse(VenueBase):
    id: UUID
    slug: str
    owner_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VenueDashboard(BaseModel):
    """Headline counts for a venue's dashboard."""
    venue_id: UUID
    staff_total: int
    staff_active: int
    open_job_postings: int
    pending_applications: int
    upcoming_shifts: int
    open_shifts: int
    pending_swaps: int
    pending_requests: int
    applications_by_status: Dict[str, int]
