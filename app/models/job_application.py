"""
Job application database model.

An applicant's submission against a job posting. Screening results are
written back onto the application by the screening task.
"""

import enum
import uuid
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType


class ApplicationStatus(str, enum.Enum):
    """
    Review lifecycle:

    PENDING -> REVIEWED -> SHORTLISTED -> APPROVED
                   |             |
                   +-> REJECTED <+
    WITHDRAWN can happen at any point (applicant side).
    """
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    job_posting_id = Column(Uuid, ForeignKey("job_postings.id", ondelete="CASCADE"), nullable=False, index=True)

    applicant_name = Column(String, nullable=False)
    applicant_email = Column(String, nullable=False, index=True)
    applicant_phone = Column(String, nullable=True)

    status = Column(Enum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False, index=True)
    form_responses = Column(JSONType, default=dict, nullable=False)
    resume_url = Column(String, nullable=True)
    cover_letter = Column(Text, nullable=True)

    # Review
    rating = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    reviewed_by = Column(Uuid, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    # Screening (null until screened)
    screening_passed = Column(Boolean, nullable=True)
    screening_issues = Column(JSONType, default=list, nullable=False)
    screening_recommendations = Column(JSONType, default=list, nullable=False)
    screened_at = Column(DateTime(timezone=True), nullable=True)

    applied_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    job_posting = relationship("JobPosting", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(id={self.id}, applicant='{self.applicant_email}', status={self.status.value})>"
