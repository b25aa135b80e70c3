"""
Pydantic schemas for shifts, assignments, swaps and drop/pickup requests.
"""

from datetime import date, datetime, time
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from app.models.shift import (
    ShiftStatus, ShiftPriority, AssignmentStatus, RequestStatus, RequestType
)
from app.services.calendar import CalendarView


class ShiftBase(BaseModel):
    shift_title: str = Field(..., min_length=1, max_length=200)
    shift_description: Optional[str] = None
    shift_date: date
    start_time: time
    end_time: time = Field(..., description="An end time at or before start_time means the shift runs past midnight")
    location: Optional[str] = Field(None, max_length=200)
    department: Optional[str] = Field(None, max_length=100)
    role_required: Optional[str] = Field(None, max_length=100)
    staff_needed: int = Field(1, ge=1, le=500)
    hourly_rate: Optional[float] = Field(None, ge=0)
    flat_rate: Optional[float] = Field(None, ge=0)
    priority: ShiftPriority = ShiftPriority.NORMAL
    dress_code: Optional[str] = None
    special_requirements: Optional[str] = None
    notes: Optional[str] = None
    event_id: Optional[UUID] = None


class ShiftCreate(ShiftBase):
    pass


class ShiftUpdate(BaseModel):
    shift_title: Optional[str] = Field(None, min_length=1, max_length=200)
    shift_description: Optional[str] = None
    shift_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = Field(None, max_length=200)
    department: Optional[str] = Field(None, max_length=100)
    role_required: Optional[str] = Field(None, max_length=100)
    staff_needed: Optional[int] = Field(None, ge=1, le=500)
    hourly_rate: Optional[float] = Field(None, ge=0)
    flat_rate: Optional[float] = Field(None, ge=0)
    shift_status: Optional[ShiftStatus] = None
    priority: Optional[ShiftPriority] = None
    dress_code: Optional[str] = None
    special_requirements: Optional[str] = None
    notes: Optional[str] = None


class ShiftResponse(ShiftBase):
    id: UUID
    venue_id: UUID
    staff_assigned: int
    shift_status: ShiftStatus
    created_by: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShiftClone(BaseModel):
    new_date: date


class AssignmentCreate(BaseModel):
    staff_member_id: UUID
    notes: Optional[str] = None


class AssignmentUpdate(BaseModel):
    assignment_status: AssignmentStatus
    decline_reason: Optional[str] = None
    notes: Optional[str] = None


class AssignmentResponse(BaseModel):
    id: UUID
    shift_id: UUID
    staff_member_id: UUID
    assignment_status: AssignmentStatus
    assigned_by: UUID
    assigned_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None
    decline_reason: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ShiftDetailResponse(ShiftResponse):
    assignments: List[AssignmentResponse] = []


class ConflictResponse(BaseModel):
    shift_id: UUID
    staff_member_id: UUID
    conflict_type: str
    conflict_details: str
    suggested_resolution: str
    conflicting_shift_ids: List[UUID] = []


class SwapCreate(BaseModel):
    original_shift_id: UUID
    original_staff_id: UUID
    requested_staff_id: UUID
    swap_reason: Optional[str] = None


class ShiftRequestCreate(BaseModel):
    shift_id: UUID
    staff_member_id: UUID
    request_type: RequestType
    request_reason: Optional[str] = None


class DenyRequest(BaseModel):
    denial_reason: Optional[str] = None


class SwapResponse(BaseModel):
    id: UUID
    venue_id: UUID
    original_shift_id: UUID
    original_staff_id: UUID
    requested_staff_id: UUID
    swap_reason: Optional[str] = None
    request_status: RequestStatus
    requested_by: UUID
    requested_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    denied_by: Optional[UUID] = None
    denied_at: Optional[datetime] = None
    denial_reason: Optional[str] = None

    class Config:
        from_attributes = True


class ShiftRequestResponse(BaseModel):
    id: UUID
    venue_id: UUID
    shift_id: UUID
    staff_member_id: UUID
    request_type: RequestType
    request_reason: Optional[str] = None
    request_status: RequestStatus
    requested_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    denied_by: Optional[UUID] = None
    denied_at: Optional[datetime] = None
    denial_reason: Optional[str] = None

    class Config:
        from_attributes = True


class AutoScheduleRequest(BaseModel):
    shift_ids: List[UUID] = Field(..., min_length=1)


class AutoScheduleResponse(BaseModel):
    assignments_created: int
    assignments: List[AssignmentResponse]


class DepartmentStats(BaseModel):
    shifts: int
    hours: float
    cost: float


class ShiftAnalyticsResponse(BaseModel):
    start_date: date
    end_date: date
    total_shifts: int
    total_hours: float
    total_cost: float
    average_attendance: float
    completion_rate: float
    status_counts: Dict[str, int]
    department_stats: Dict[str, DepartmentStats]


class CalendarDay(BaseModel):
    date: date
    is_today: bool
    is_current_month: bool
    shifts: List[ShiftResponse]


class CalendarResponse(BaseModel):
    view: CalendarView
    anchor: date
    start_date: date
    end_date: date
    previous_anchor: date
    next_anchor: date
    days: List[CalendarDay]
