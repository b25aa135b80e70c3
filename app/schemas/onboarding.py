"""
Pydantic schemas for onboarding templates and their form fields.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from app.models.onboarding_template import RoleCategory
from app.models.staff import EmploymentType


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    SELECT = "select"
    MULTISELECT = "multiselect"
    TEXTAREA = "textarea"
    FILE = "file"
    CHECKBOX = "checkbox"
    NUMBER = "number"
    ADDRESS = "address"
    EMERGENCY_CONTACT = "emergency_contact"
    BANK_INFO = "bank_info"
    TAX_INFO = "tax_info"
    ID_DOCUMENT = "id_document"


class FieldValidation(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    custom: Optional[str] = None


class OnboardingField(BaseModel):
    """One input on an onboarding form."""
    id: str = Field(..., min_length=1)
    type: FieldType
    label: str = Field(..., min_length=1)
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[List[str]] = None
    validation: Optional[FieldValidation] = None
    help_text: Optional[str] = None
    order: int
    section: str


class OnboardingTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    department: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    role_category: RoleCategory = RoleCategory.GENERAL
    estimated_days: int = Field(3, ge=1, le=365)
    required_documents: List[str] = []
    tags: List[str] = []


class OnboardingTemplateCreate(OnboardingTemplateBase):
    """
    Create a template.

    When fields is omitted the template starts from the field catalog of its
    role_category.
    """
    fields: Optional[List[OnboardingField]] = None
    is_default: bool = False


class OnboardingTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    fields: Optional[List[OnboardingField]] = None
    estimated_days: Optional[int] = Field(None, ge=1, le=365)
    required_documents: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    is_default: Optional[bool] = None


class OnboardingTemplateResponse(OnboardingTemplateBase):
    id: UUID
    venue_id: UUID
    fields: List[OnboardingField]
    version: int
    is_default: bool
    use_count: int
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ResponseValidationRequest(BaseModel):
    responses: Dict[str, Any]


class ResponseValidationResult(BaseModel):
    valid: bool
    errors: Dict[str, str]
