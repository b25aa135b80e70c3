import enum
import uuid
from sqlalchemy import Column, Integer, String, Boolean, Float, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType
from app.models.staff import EmploymentType


class JobPostingStatus(str, enum.Enum):
    """
    Posting lifecycle.

    - DRAFT: being written, invisible on the public board
    - PUBLISHED: visible and accepting applications
    - PAUSED: hidden, keeps its applications
    - CLOSED: filled or withdrawn
    """
    DRAFT = "draft"
    PUBLISHED = "published"
    PAUSED = "paused"
    CLOSED = "closed"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class SalaryType(str, enum.Enum):
    HOURLY = "hourly"
    SALARY = "salary"
    DAILY = "daily"


class JobPosting(Base):
    """
    A role a venue is recruiting for.

    Screening-related fields (required_certifications, age_requirement,
    experience_level) drive the rule-based application screening.
    """
    __tablename__ = "job_postings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    department = Column(String, nullable=False, index=True)
    position = Column(String, nullable=False)
    employment_type = Column(Enum(EmploymentType), default=EmploymentType.FULL_TIME, nullable=False)
    location = Column(String, nullable=True)
    number_of_positions = Column(Integer, default=1, nullable=False)

    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_type = Column(Enum(SalaryType), nullable=True)

    requirements = Column(JSONType, default=list, nullable=False)
    responsibilities = Column(JSONType, default=list, nullable=False)
    benefits = Column(JSONType, default=list, nullable=False)
    skills = Column(JSONType, default=list, nullable=False)

    experience_level = Column(Enum(ExperienceLevel), default=ExperienceLevel.ENTRY, nullable=False)
    remote = Column(Boolean, default=False, nullable=False)
    urgent = Column(Boolean, default=False, nullable=False)
    status = Column(Enum(JobPostingStatus), default=JobPostingStatus.DRAFT, nullable=False, index=True)

    # Screening inputs
    required_certifications = Column(JSONType, default=list, nullable=False)
    role_type = Column(String, nullable=True)
    age_requirement = Column(Integer, nullable=True)
    background_check_required = Column(Boolean, default=False, nullable=False)
    drug_test_required = Column(Boolean, default=False, nullable=False)

    # Counters
    applications_count = Column(Integer, default=0, nullable=False)
    views_count = Column(Integer, default=0, nullable=False)

    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Uuid, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="job_postings")
    applications = relationship("JobApplication", back_populates="job_posting", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<JobPosting(id={self.id}, title='{self.title}', status={self.status.value})>"
