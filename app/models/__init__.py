"""
Database models package.
"""

from app.models.venue import Venue
from app.models.staff import StaffMember, EmploymentType, StaffStatus
from app.models.job_posting import JobPosting, JobPostingStatus, ExperienceLevel, SalaryType
from app.models.job_application import JobApplication, ApplicationStatus
from app.models.onboarding_template import OnboardingTemplate, RoleCategory
from app.models.shift import (
    VenueShift, ShiftAssignment, ShiftSwap, ShiftRequest,
    ShiftStatus, ShiftPriority, AssignmentStatus, RequestStatus, RequestType,
)
from app.models.permission import (
    VenuePermission, VenueRole, VenueRolePermission, VenueUserRole,
    VenueUserPermissionOverride, PermissionAuditLog, PermissionCategory, AuditActionType,
)

__all__ = [
    "Venue",
    "StaffMember", "EmploymentType", "StaffStatus",
    "JobPosting", "JobPostingStatus", "ExperienceLevel", "SalaryType",
    "JobApplication", "ApplicationStatus",
    "OnboardingTemplate", "RoleCategory",
    "VenueShift", "ShiftAssignment", "ShiftSwap", "ShiftRequest",
    "ShiftStatus", "ShiftPriority", "AssignmentStatus", "RequestStatus", "RequestType",
    "VenuePermission", "VenueRole", "VenueRolePermission", "VenueUserRole",
    "VenueUserPermissionOverride", "PermissionAuditLog", "PermissionCategory", "AuditActionType",
]
