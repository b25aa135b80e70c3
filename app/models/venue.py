"""
Venue model: the tenant boundary.

Every tenant-owned table carries a venue_id, and every query filters on it to
prevent cross-venue data access.
"""

import uuid
from sqlalchemy import Column, String, Integer, Text, DateTime, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Venue(Base):
    """
    A tenant organization (concert hall, club, arena).

    The owner_id is the auth user id of the account that created the venue;
    the owner holds every permission at the venue.
    """
    __tablename__ = "venues"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    owner_id = Column(Uuid, nullable=False, index=True)

    location = Column(String, nullable=True)
    capacity = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    staff_members = relationship("StaffMember", back_populates="venue", cascade="all, delete-orphan")
    job_postings = relationship("JobPosting", back_populates="venue", cascade="all, delete-orphan")
    shifts = relationship("VenueShift", back_populates="venue", cascade="all, delete-orphan")
    onboarding_templates = relationship("OnboardingTemplate", back_populates="venue", cascade="all, delete-orphan")
    roles = relationship("VenueRole", back_populates="venue", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Venue(id={self.id}, slug='{self.slug}')>"
