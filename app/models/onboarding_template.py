import enum
import uuid
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType
from app.models.staff import EmploymentType


class RoleCategory(str, enum.Enum):
    """Field catalog a template was built from."""
    GENERAL = "general"
    SECURITY = "security"
    BAR = "bar"
    TECHNICAL = "technical"
    MANAGEMENT = "management"


class OnboardingTemplate(Base):
    """
    A named, versioned list of form-field definitions for new-hire intake.

    fields holds a list of field dicts (see OnboardingField in
    app/schemas/onboarding.py). version is bumped whenever fields change.
    """
    __tablename__ = "onboarding_templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    department = Column(String, nullable=False)
    position = Column(String, nullable=False)
    employment_type = Column(Enum(EmploymentType), default=EmploymentType.FULL_TIME, nullable=False)
    role_category = Column(Enum(RoleCategory), default=RoleCategory.GENERAL, nullable=False)

    fields = Column(JSONType, default=list, nullable=False)
    version = Column(Integer, default=1, nullable=False)
    estimated_days = Column(Integer, default=3, nullable=False)
    required_documents = Column(JSONType, default=list, nullable=False)
    tags = Column(JSONType, default=list, nullable=False)

    is_default = Column(Boolean, default=False, nullable=False)
    use_count = Column(Integer, default=0, nullable=False)

    created_by = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    venue = relationship("Venue", back_populates="onboarding_templates")

    def __repr__(self):
        return f"<OnboardingTemplate(id={self.id}, name='{self.name}', version={self.version})>"
