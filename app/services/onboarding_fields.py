"""
Onboarding form field catalog.

Each role category is the general new-hire field set plus a role-specific
extension. get_fields returns freshly built models on every call, so callers
may edit the result without touching the catalog.
"""

import logging
import re
from typing import Any, Dict, List
from uuid import UUID

from email_validator import EmailNotValidError, validate_email

from app.models.onboarding_template import RoleCategory
from app.models.staff import EmploymentType
from app.schemas.onboarding import FieldType, OnboardingField

logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

GENERAL_FIELDS: List[Dict[str, Any]] = [
    # Personal Information
    {"id": "personal_info", "type": "text", "label": "Full Legal Name", "required": True,
     "placeholder": "Enter your full legal name as it appears on your ID",
     "order": 1, "section": "Personal Information"},
    {"id": "email", "type": "email", "label": "Email Address", "required": True,
     "placeholder": "your.email@example.com", "order": 2, "section": "Personal Information"},
    {"id": "phone", "type": "phone", "label": "Phone Number", "required": True,
     "placeholder": "(555) 123-4567", "order": 3, "section": "Personal Information"},
    {"id": "date_of_birth", "type": "date", "label": "Date of Birth", "required": True,
     "order": 4, "section": "Personal Information"},
    {"id": "address", "type": "address", "label": "Current Address", "required": True,
     "placeholder": "Enter your full address", "order": 5, "section": "Personal Information"},
    {"id": "ssn", "type": "text", "label": "Social Security Number", "required": True,
     "placeholder": "XXX-XX-XXXX", "validation": {"pattern": r"^\d{3}-\d{2}-\d{4}$"},
     "help_text": "Required for tax purposes", "order": 6, "section": "Personal Information"},
    # Emergency Contact
    {"id": "emergency_contact", "type": "emergency_contact", "label": "Emergency Contact Information",
     "required": True, "order": 7, "section": "Emergency Contact"},
    # Employment Information
    {"id": "start_date", "type": "date", "label": "Expected Start Date", "required": True,
     "order": 8, "section": "Employment Information"},
    {"id": "availability", "type": "multiselect", "label": "Available Work Days", "required": True,
     "options": WEEKDAYS, "order": 9, "section": "Employment Information"},
    {"id": "shift_preference", "type": "select", "label": "Preferred Shift", "required": False,
     "options": ["Morning", "Afternoon", "Evening", "Night", "Flexible"],
     "order": 10, "section": "Employment Information"},
    # Banking Information
    {"id": "bank_info", "type": "bank_info", "label": "Direct Deposit Information", "required": True,
     "help_text": "Required for payroll processing", "order": 11, "section": "Banking Information"},
    # Documents
    {"id": "government_id", "type": "file", "label": "Government-Issued ID", "required": True,
     "help_text": "Upload a clear photo of your driver's license, passport, or state ID",
     "order": 12, "section": "Required Documents"},
    {"id": "ssn_card", "type": "file", "label": "Social Security Card", "required": True,
     "help_text": "Upload a clear photo of your Social Security card",
     "order": 13, "section": "Required Documents"},
    {"id": "direct_deposit_form", "type": "file", "label": "Direct Deposit Authorization Form",
     "required": True, "help_text": "Download, complete, and upload the direct deposit form",
     "order": 14, "section": "Required Documents"},
    # Agreements
    {"id": "handbook_acknowledgment", "type": "checkbox",
     "label": "I have read and agree to the Employee Handbook", "required": True,
     "order": 15, "section": "Agreements"},
    {"id": "background_check_consent", "type": "checkbox",
     "label": "I consent to a background check as part of the hiring process", "required": True,
     "order": 16, "section": "Agreements"},
]

SECURITY_FIELDS: List[Dict[str, Any]] = [
    {"id": "security_license", "type": "text", "label": "Security License Number", "required": True,
     "placeholder": "Enter your security license number", "order": 17, "section": "Security Information"},
    {"id": "security_license_expiry", "type": "date", "label": "Security License Expiry Date",
     "required": True, "order": 18, "section": "Security Information"},
    {"id": "security_license_file", "type": "file", "label": "Security License", "required": True,
     "help_text": "Upload a copy of your current security license",
     "order": 19, "section": "Required Documents"},
    {"id": "firearm_permit", "type": "text", "label": "Firearm Permit Number (if applicable)",
     "required": False, "placeholder": "Enter firearm permit number if you have one",
     "order": 20, "section": "Security Information"},
    {"id": "firearm_permit_file", "type": "file", "label": "Firearm Permit (if applicable)",
     "required": False, "help_text": "Upload firearm permit if you have one",
     "order": 21, "section": "Required Documents"},
    {"id": "cpr_certification", "type": "text", "label": "CPR Certification Number", "required": True,
     "placeholder": "Enter your CPR certification number", "order": 22, "section": "Security Information"},
    {"id": "cpr_certification_expiry", "type": "date", "label": "CPR Certification Expiry Date",
     "required": True, "order": 23, "section": "Security Information"},
    {"id": "cpr_certification_file", "type": "file", "label": "CPR Certification", "required": True,
     "help_text": "Upload a copy of your current CPR certification",
     "order": 24, "section": "Required Documents"},
    {"id": "previous_security_experience", "type": "textarea", "label": "Previous Security Experience",
     "required": True, "placeholder": "Describe your previous security experience",
     "order": 25, "section": "Security Information"},
    {"id": "conflict_resolution_training", "type": "checkbox",
     "label": "I have completed conflict resolution training", "required": True,
     "order": 26, "section": "Security Information"},
]

BAR_FIELDS: List[Dict[str, Any]] = [
    {"id": "alcohol_server_certification", "type": "text", "label": "Alcohol Server Certification Number",
     "required": True, "placeholder": "Enter your alcohol server certification number",
     "order": 17, "section": "Bar Information"},
    {"id": "alcohol_cert_expiry", "type": "date", "label": "Alcohol Server Certification Expiry Date",
     "required": True, "order": 18, "section": "Bar Information"},
    {"id": "alcohol_cert_file", "type": "file", "label": "Alcohol Server Certification", "required": True,
     "help_text": "Upload a copy of your current alcohol server certification",
     "order": 19, "section": "Required Documents"},
    {"id": "food_handler_certification", "type": "text", "label": "Food Handler Certification Number",
     "required": True, "placeholder": "Enter your food handler certification number",
     "order": 20, "section": "Bar Information"},
    {"id": "food_cert_expiry", "type": "date", "label": "Food Handler Certification Expiry Date",
     "required": True, "order": 21, "section": "Bar Information"},
    {"id": "food_cert_file", "type": "file", "label": "Food Handler Certification", "required": True,
     "help_text": "Upload a copy of your current food handler certification",
     "order": 22, "section": "Required Documents"},
    {"id": "bartending_experience", "type": "textarea", "label": "Bartending Experience", "required": True,
     "placeholder": "Describe your bartending experience and skills", "order": 23, "section": "Bar Information"},
    {"id": "wine_knowledge", "type": "select", "label": "Wine Knowledge Level", "required": False,
     "options": ["Beginner", "Intermediate", "Advanced", "Expert"], "order": 24, "section": "Bar Information"},
    {"id": "cocktail_specialties", "type": "textarea", "label": "Cocktail Specialties", "required": False,
     "placeholder": "List any cocktail specialties or signature drinks you can make",
     "order": 25, "section": "Bar Information"},
]

TECHNICAL_FIELDS: List[Dict[str, Any]] = [
    {"id": "technical_specialties", "type": "multiselect", "label": "Technical Specialties", "required": True,
     "options": ["Sound Engineering", "Lighting Design", "Video Production", "Stage Management",
                 "Rigging", "Audio Visual", "Broadcast", "Live Streaming"],
     "order": 17, "section": "Technical Information"},
    {"id": "certifications", "type": "textarea", "label": "Technical Certifications", "required": False,
     "placeholder": "List any technical certifications you hold", "order": 18, "section": "Technical Information"},
    {"id": "certification_files", "type": "file", "label": "Certification Documents", "required": False,
     "help_text": "Upload copies of your technical certifications", "order": 19, "section": "Required Documents"},
    {"id": "equipment_experience", "type": "textarea", "label": "Equipment Experience", "required": True,
     "placeholder": "Describe your experience with specific equipment and systems",
     "order": 20, "section": "Technical Information"},
    {"id": "software_proficiency", "type": "multiselect", "label": "Software Proficiency", "required": False,
     "options": ["Pro Tools", "Logic Pro", "Ableton Live", "QLab", "GrandMA", "Hog4", "Vectorworks",
                 "AutoCAD", "Adobe Creative Suite", "DaVinci Resolve", "OBS Studio"],
     "order": 21, "section": "Technical Information"},
    {"id": "safety_training", "type": "checkbox", "label": "I have completed workplace safety training",
     "required": True, "order": 22, "section": "Technical Information"},
    {"id": "height_certification", "type": "checkbox", "label": "I am certified to work at heights",
     "required": False, "order": 23, "section": "Technical Information"},
    {"id": "forklift_certification", "type": "checkbox", "label": "I am certified to operate forklifts",
     "required": False, "order": 24, "section": "Technical Information"},
]

MANAGEMENT_FIELDS: List[Dict[str, Any]] = [
    {"id": "resume", "type": "file", "label": "Resume/CV", "required": True,
     "help_text": "Upload your current resume or CV", "order": 17, "section": "Management Information"},
    {"id": "management_experience", "type": "textarea", "label": "Management Experience", "required": True,
     "placeholder": "Describe your management experience and leadership style",
     "order": 18, "section": "Management Information"},
    {"id": "team_size_managed", "type": "number", "label": "Largest Team Size Managed", "required": False,
     "placeholder": "Number of direct reports", "order": 19, "section": "Management Information"},
    {"id": "budget_experience", "type": "select", "label": "Budget Management Experience", "required": False,
     "options": ["None", "Under $10K", "$10K-$50K", "$50K-$100K", "$100K-$500K", "Over $500K"],
     "order": 20, "section": "Management Information"},
    {"id": "project_management", "type": "checkbox", "label": "I have project management experience",
     "required": False, "order": 21, "section": "Management Information"},
    {"id": "conflict_resolution", "type": "textarea", "label": "Conflict Resolution Experience",
     "required": True, "placeholder": "Describe your experience handling workplace conflicts",
     "order": 22, "section": "Management Information"},
    {"id": "references", "type": "file", "label": "Professional References", "required": True,
     "help_text": "Upload letters of recommendation or reference contact information",
     "order": 23, "section": "Required Documents"},
    {"id": "nda_agreement", "type": "checkbox", "label": "I agree to sign a Non-Disclosure Agreement",
     "required": True, "order": 24, "section": "Agreements"},
    {"id": "leadership_philosophy", "type": "textarea", "label": "Leadership Philosophy", "required": True,
     "placeholder": "Describe your leadership philosophy and management approach",
     "order": 25, "section": "Management Information"},
]

ROLE_EXTENSIONS: Dict[RoleCategory, List[Dict[str, Any]]] = {
    RoleCategory.GENERAL: [],
    RoleCategory.SECURITY: SECURITY_FIELDS,
    RoleCategory.BAR: BAR_FIELDS,
    RoleCategory.TECHNICAL: TECHNICAL_FIELDS,
    RoleCategory.MANAGEMENT: MANAGEMENT_FIELDS,
}


def get_fields(role_category) -> List[OnboardingField]:
    """
    Field definitions for a role category: the general set plus the role's extension.

    Raises:
        ValueError: Unknown role category
    """
    category = RoleCategory(role_category)
    return [OnboardingField.model_validate(f) for f in GENERAL_FIELDS + ROLE_EXTENSIONS[category]]


def get_default_templates(venue_id: UUID) -> List[Dict[str, Any]]:
    """The five starter templates seeded for every new venue."""
    def _template(name, description, department, position, employment_type, category,
                  estimated_days, required_documents, tags, is_default=False):
        return {
            "venue_id": venue_id,
            "name": name,
            "description": description,
            "department": department,
            "position": position,
            "employment_type": EmploymentType(employment_type),
            "role_category": category,
            "fields": [f.model_dump(mode="json", exclude_none=True) for f in get_fields(category)],
            "estimated_days": estimated_days,
            "required_documents": required_documents,
            "tags": tags,
            "is_default": is_default,
            "use_count": 0,
        }

    return [
        _template(
            "General Staff Onboarding", "Standard onboarding for general staff positions",
            "General", "Staff Member", "full_time", RoleCategory.GENERAL, 3,
            ["Government-issued ID", "Social Security Card", "Direct Deposit Form", "W-4 Form",
             "Emergency Contact Form", "Employee Handbook Acknowledgment"],
            ["general", "staff", "standard"],
            is_default=True,
        ),
        _template(
            "Security Staff Onboarding", "Comprehensive onboarding for security personnel",
            "Security", "Security Officer", "full_time", RoleCategory.SECURITY, 5,
            ["Government-issued ID", "Social Security Card", "Security License/Certification",
             "Background Check Authorization", "Direct Deposit Form", "W-4 Form",
             "Emergency Contact Form", "Security Training Certificate", "Employee Handbook Acknowledgment"],
            ["security", "licensed", "background-check"],
        ),
        _template(
            "Bar Staff Onboarding", "Onboarding for bartenders and bar staff",
            "Food & Beverage", "Bartender", "part_time", RoleCategory.BAR, 4,
            ["Government-issued ID", "Social Security Card", "Alcohol Server Certification",
             "Food Handler Certification", "Direct Deposit Form", "W-4 Form",
             "Emergency Contact Form", "Employee Handbook Acknowledgment"],
            ["food-beverage", "bartender", "certified"],
        ),
        _template(
            "Technical Staff Onboarding", "Onboarding for sound, lighting, and technical staff",
            "Technical", "Technical Staff", "contractor", RoleCategory.TECHNICAL, 3,
            ["Government-issued ID", "Social Security Card", "Technical Certifications",
             "Direct Deposit Form", "W-9 Form", "Emergency Contact Form",
             "Equipment Training Certificate", "Safety Training Certificate"],
            ["technical", "contractor", "certified"],
        ),
        _template(
            "Management Onboarding", "Comprehensive onboarding for management positions",
            "Management", "Manager", "full_time", RoleCategory.MANAGEMENT, 7,
            ["Government-issued ID", "Social Security Card", "Resume/CV", "Reference Letters",
             "Direct Deposit Form", "W-4 Form", "Emergency Contact Form",
             "Management Training Certificate", "Employee Handbook Acknowledgment",
             "Non-Disclosure Agreement"],
            ["management", "leadership", "full-time"],
        ),
    ]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def validate_responses(fields: List[OnboardingField], responses: Dict[str, Any]) -> Dict[str, str]:
    """
    Check submitted answers against field definitions.

    Returns:
        field id -> error message; empty when every answer is acceptable
    """
    errors: Dict[str, str] = {}

    for f in fields:
        value = responses.get(f.id)

        if f.type == FieldType.CHECKBOX:
            if f.required and value is not True:
                errors[f.id] = f"{f.label} must be checked"
            continue

        if _is_blank(value):
            if f.required:
                errors[f.id] = f"{f.label} is required"
            continue

        if f.type == FieldType.EMAIL:
            try:
                validate_email(str(value), check_deliverability=False)
            except EmailNotValidError:
                errors[f.id] = f"{f.label} must be a valid email address"
                continue

        if f.type == FieldType.SELECT and f.options and value not in f.options:
            errors[f.id] = f"{f.label} must be one of: {', '.join(f.options)}"
            continue

        if f.type == FieldType.MULTISELECT and f.options:
            chosen = value if isinstance(value, (list, tuple)) else [value]
            invalid = [v for v in chosen if v not in f.options]
            if invalid:
                errors[f.id] = f"{f.label} has invalid options: {', '.join(map(str, invalid))}"
                continue

        number = None
        if f.type == FieldType.NUMBER:
            try:
                number = float(value)
            except (TypeError, ValueError):
                errors[f.id] = f"{f.label} must be a number"
                continue

        rules = f.validation
        if rules is None:
            continue

        if rules.pattern and isinstance(value, str):
            try:
                if not re.search(rules.pattern, value):
                    errors[f.id] = f"{f.label} has an invalid format"
                    continue
            except re.error:
                logger.warning(f"Invalid validation pattern on field {f.id}: {rules.pattern}")

        if number is not None:
            if rules.min is not None and number < rules.min:
                errors[f.id] = f"{f.label} must be at least {rules.min:g}"
            elif rules.max is not None and number > rules.max:
                errors[f.id] = f"{f.label} must be at most {rules.max:g}"

    return errors
