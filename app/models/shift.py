"""
Shift scheduling models.

A VenueShift is a block of work on a date with a time range and headcount.
ShiftAssignment links a staff member to a shift. ShiftSwap and ShiftRequest
are staff-initiated changes that a manager approves or denies.
"""

import enum
import uuid
from sqlalchemy import (
    Column, Integer, String, Float, Date, Time, Text, DateTime, Enum, ForeignKey, Uuid, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base


class ShiftStatus(str, enum.Enum):
    OPEN = "open"
    FILLED = "filled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShiftPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class AssignmentStatus(str, enum.Enum):
    ASSIGNED = "assigned"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class RequestStatus(str, enum.Enum):
    """Shared by swaps and drop/pickup requests. Only PENDING can change."""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CANCELLED = "cancelled"


class RequestType(str, enum.Enum):
    DROP = "drop"
    PICKUP = "pickup"


ACTIVE_ASSIGNMENT_STATUSES = (AssignmentStatus.ASSIGNED, AssignmentStatus.CONFIRMED)


class VenueShift(Base):
    __tablename__ = "venue_shifts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Uuid, nullable=True)

    shift_title = Column(String, nullable=False)
    shift_description = Column(Text, nullable=True)
    shift_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    location = Column(String, nullable=True)
    department = Column(String, nullable=True, index=True)
    role_required = Column(String, nullable=True)

    staff_needed = Column(Integer, default=1, nullable=False)
    staff_assigned = Column(Integer, default=0, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    flat_rate = Column(Float, nullable=True)

    shift_status = Column(Enum(ShiftStatus), default=ShiftStatus.OPEN, nullable=False, index=True)
    priority = Column(Enum(ShiftPriority), default=ShiftPriority.NORMAL, nullable=False)
    dress_code = Column(String, nullable=True)
    special_requirements = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Uuid, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="shifts")
    assignments = relationship("ShiftAssignment", back_populates="shift", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<VenueShift(id={self.id}, title='{self.shift_title}', date={self.shift_date})>"


class ShiftAssignment(Base):
    __tablename__ = "shift_assignments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    shift_id = Column(Uuid, ForeignKey("venue_shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_member_id = Column(Uuid, ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True)

    assignment_status = Column(Enum(AssignmentStatus), default=AssignmentStatus.ASSIGNED, nullable=False)
    assigned_by = Column(Uuid, nullable=False)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    declined_at = Column(DateTime(timezone=True), nullable=True)
    decline_reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    shift = relationship("VenueShift", back_populates="assignments")
    staff_member = relationship("StaffMember", back_populates="assignments")

    def __repr__(self):
        return f"<ShiftAssignment(id={self.id}, shift_id={self.shift_id}, status={self.assignment_status.value})>"


class ShiftSwap(Base):
    """Request to hand a shift from original_staff_id to requested_staff_id."""
    __tablename__ = "shift_swaps"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    original_shift_id = Column(Uuid, ForeignKey("venue_shifts.id", ondelete="CASCADE"), nullable=False)
    original_staff_id = Column(Uuid, ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False)
    requested_staff_id = Column(Uuid, ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False)

    swap_reason = Column(Text, nullable=True)
    request_status = Column(Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False, index=True)
    requested_by = Column(Uuid, nullable=False)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())

    approved_by = Column(Uuid, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    denied_by = Column(Uuid, nullable=True)
    denied_at = Column(DateTime(timezone=True), nullable=True)
    denial_reason = Column(Text, nullable=True)

    original_shift = relationship("VenueShift")

    def __repr__(self):
        return f"<ShiftSwap(id={self.id}, status={self.request_status.value})>"


class ShiftRequest(Base):
    """Staff-initiated drop of an assigned shift or pickup of an open one."""
    __tablename__ = "shift_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    shift_id = Column(Uuid, ForeignKey("venue_shifts.id", ondelete="CASCADE"), nullable=False)
    staff_member_id = Column(Uuid, ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False)

    request_type = Column(Enum(RequestType), nullable=False)
    request_reason = Column(Text, nullable=True)
    request_status = Column(Enum(RequestStatus), default=RequestStatus.PENDING, nullable=False, index=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())

    approved_by = Column(Uuid, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    denied_by = Column(Uuid, nullable=True)
    denied_at = Column(DateTime(timezone=True), nullable=True)
    denial_reason = Column(Text, nullable=True)

    shift = relationship("VenueShift")

    def __repr__(self):
        return f"<ShiftRequest(id={self.id}, type={self.request_type.value}, status={self.request_status.value})>"
