from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, EmailStr
from app.models.staff import EmploymentType, StaffStatus


class StaffMemberBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    role: str = Field(..., min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    performance_rating: Optional[float] = Field(None, ge=0, le=5)
    is_available: bool = True
    notes: Optional[str] = None


class StaffMemberCreate(StaffMemberBase):
    user_id: Optional[UUID] = Field(None, description="Auth account of the staff member, if they have one")
    status: StaffStatus = StaffStatus.ACTIVE


class StaffMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = Field(None, min_length=1, max_length=100)
    department: Optional[str] = Field(None, max_length=100)
    employment_type: Optional[EmploymentType] = None
    status: Optional[StaffStatus] = None
    hire_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    performance_rating: Optional[float] = Field(None, ge=0, le=5)
    is_available: Optional[bool] = None
    notes: Optional[str] = None
    user_id: Optional[UUID] = None


class StaffMemberResponse(StaffMemberBase):
    id: UUID
    venue_id: UUID
    user_id: Optional[UUID] = None
    email: str
    status: StaffStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
