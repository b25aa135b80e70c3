"""
Pydantic schemas for roles, permissions, overrides and the audit log.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from app.models.permission import AuditActionType, PermissionCategory


class PermissionResponse(BaseModel):
    id: UUID
    permission_name: str
    permission_description: Optional[str] = None
    permission_category: PermissionCategory

    class Config:
        from_attributes = True


class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=100)
    role_description: Optional[str] = None
    role_level: int = Field(1, ge=1, le=5)
    permissions: List[str] = []


class RoleUpdate(BaseModel):
    role_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role_description: Optional[str] = None
    role_level: Optional[int] = Field(None, ge=1, le=5)
    is_active: Optional[bool] = None


class RolePermissionsUpdate(BaseModel):
    permissions: List[str]


class RoleResponse(BaseModel):
    id: UUID
    venue_id: UUID
    role_name: str
    role_description: Optional[str] = None
    role_level: int
    is_system_role: bool
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PermissionMatrixResponse(BaseModel):
    roles: List[RoleResponse]
    permissions: List[PermissionResponse]
    matrix: Dict[str, Dict[str, bool]]


class MyPermissionsResponse(BaseModel):
    venue_id: UUID
    user_id: UUID
    is_owner: bool
    roles: List[str]
    permissions: List[str]


class UserRoleAssign(BaseModel):
    role_id: UUID
    expires_at: Optional[datetime] = None
    notes: Optional[str] = None


class UserRoleResponse(BaseModel):
    id: UUID
    venue_id: UUID
    user_id: UUID
    role_id: UUID
    assigned_by: Optional[UUID] = None
    assigned_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_active: bool
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class OverrideCreate(BaseModel):
    permission_name: str
    is_granted: bool
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None


class OverrideResponse(BaseModel):
    id: UUID
    venue_id: UUID
    user_id: UUID
    permission_id: UUID
    is_granted: bool
    granted_by: Optional[UUID] = None
    granted_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None

    class Config:
        from_attributes = True


class AuditLogResponse(BaseModel):
    id: UUID
    venue_id: UUID
    action_type: AuditActionType
    target_user_id: Optional[UUID] = None
    role_id: Optional[UUID] = None
    permission_id: Optional[UUID] = None
    performed_by: Optional[UUID] = None
    performed_at: Optional[datetime] = None
    details: Dict[str, Any] = {}

    class Config:
        from_attributes = True
