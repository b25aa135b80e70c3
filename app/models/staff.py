import enum
import uuid
from sqlalchemy import Column, String, Boolean, Float, Date, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class EmploymentType(str, enum.Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACTOR = "contractor"
    VOLUNTEER = "volunteer"
    INTERN = "intern"


class StaffStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class StaffMember(Base):
    """
    A person on a venue's team.

    user_id links the record to an auth account when the staff member has
    one; crew without an account are still schedulable.
    """
    __tablename__ = "staff_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=True, index=True)

    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False)
    department = Column(String, nullable=True, index=True)

    employment_type = Column(Enum(EmploymentType), default=EmploymentType.FULL_TIME, nullable=False)
    status = Column(Enum(StaffStatus), default=StaffStatus.ACTIVE, nullable=False, index=True)
    hire_date = Column(Date, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    performance_rating = Column(Float, nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="staff_members")
    assignments = relationship("ShiftAssignment", back_populates="staff_member", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<StaffMember(id={self.id}, name='{self.name}', role='{self.role}')>"
