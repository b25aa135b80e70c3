"""
Pydantic schemas for job applications and screening.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, EmailStr, HttpUrl
from app.models.job_application import ApplicationStatus


class DateRangeFilter(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class ApplicationSubmit(BaseModel):
    """Public submission against a published posting."""
    applicant_name: str = Field(..., min_length=1, max_length=200)
    applicant_email: EmailStr
    applicant_phone: Optional[str] = Field(None, max_length=50)
    form_responses: Dict[str, Any] = {}
    resume_url: Optional[HttpUrl] = None
    cover_letter: Optional[str] = Field(None, max_length=10000)


class ApplicationReviewUpdate(BaseModel):
    status: Optional[ApplicationStatus] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    feedback: Optional[str] = None


class BulkStatusUpdate(BaseModel):
    application_ids: List[UUID] = Field(..., min_length=1)
    status: ApplicationStatus
    feedback: Optional[str] = None


class BulkStatusResult(BaseModel):
    updated: int
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    id: UUID
    venue_id: UUID
    job_posting_id: UUID
    applicant_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    status: ApplicationStatus
    form_responses: Dict[str, Any]
    resume_url: Optional[str] = None
    cover_letter: Optional[str] = None
    rating: Optional[int] = None
    feedback: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    screening_passed: Optional[bool] = None
    screening_issues: List[str] = []
    screening_recommendations: List[str] = []
    screened_at: Optional[datetime] = None
    applied_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationSubmitResponse(BaseModel):
    application_id: UUID
    status: ApplicationStatus
    message: str


class ScreeningResultResponse(BaseModel):
    application_id: UUID
    passed: bool
    issues: List[str]
    recommendations: List[str]


class ScreeningRunResponse(BaseModel):
    screened: int
    passed: int
    results: List[ScreeningResultResponse]
