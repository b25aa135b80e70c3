"""
Pydantic schemas for job postings, including the public job board views.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, model_validator
from app.models.job_posting import JobPostingStatus, ExperienceLevel, SalaryType
from app.models.staff import EmploymentType


class JobPostingBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    department: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    location: Optional[str] = Field(None, max_length=300)
    number_of_positions: int = Field(1, ge=1)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    salary_type: Optional[SalaryType] = None
    requirements: List[str] = []
    responsibilities: List[str] = []
    benefits: List[str] = []
    skills: List[str] = []
    experience_level: ExperienceLevel = ExperienceLevel.ENTRY
    remote: bool = False
    urgent: bool = False
    required_certifications: List[str] = []
    role_type: Optional[str] = None
    age_requirement: Optional[int] = Field(None, ge=14, le=100)
    background_check_required: bool = False
    drug_test_required: bool = False
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min cannot be greater than salary_max")
        return self


class JobPostingCreate(JobPostingBase):
    status: JobPostingStatus = JobPostingStatus.DRAFT


class JobPostingUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    employment_type: Optional[EmploymentType] = None
    location: Optional[str] = Field(None, max_length=300)
    number_of_positions: Optional[int] = Field(None, ge=1)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    salary_type: Optional[SalaryType] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    experience_level: Optional[ExperienceLevel] = None
    remote: Optional[bool] = None
    urgent: Optional[bool] = None
    status: Optional[JobPostingStatus] = None
    required_certifications: Optional[List[str]] = None
    role_type: Optional[str] = None
    age_requirement: Optional[int] = Field(None, ge=14, le=100)
    background_check_required: Optional[bool] = None
    drug_test_required: Optional[bool] = None
    expires_at: Optional[datetime] = None


class JobPostingResponse(JobPostingBase):
    id: UUID
    venue_id: UUID
    status: JobPostingStatus
    applications_count: int
    views_count: int
    created_by: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicJobPostingResponse(BaseModel):
    """What applicants see on the public board. No screening internals."""
    id: UUID
    venue_id: UUID
    title: str
    description: str
    department: str
    position: str
    employment_type: EmploymentType
    location: Optional[str] = None
    number_of_positions: int
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_type: Optional[SalaryType] = None
    requirements: List[str]
    responsibilities: List[str]
    benefits: List[str]
    skills: List[str]
    experience_level: ExperienceLevel
    remote: bool
    urgent: bool
    required_certifications: List[str]
    expires_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
