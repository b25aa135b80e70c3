"""
API endpoints for venue roles, permissions and per-user overrides.

Every change to a role's permissions, a user's roles or a user's overrides
is written to the permission audit log in the same transaction.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, get_venue, require_permission
from app.core.security import CurrentUser
from app.crud import role as role_crud
from app.models.permission import VenueRole
from app.models.venue import Venue
from app.schemas.permission import (
    AuditLogResponse,
    MyPermissionsResponse,
    OverrideCreate,
    OverrideResponse,
    PermissionMatrixResponse,
    PermissionResponse,
    RoleCreate,
    RolePermissionsUpdate,
    RoleResponse,
    RoleUpdate,
    UserRoleAssign,
    UserRoleResponse,
)
from app.services import permissions as permission_service
from app.services.permissions import PermissionName, PrivilegeEscalationError

router = APIRouter(prefix="/venues/{venue_id}", tags=["Permissions"])
catalog_router = APIRouter(prefix="/permissions", tags=["Permissions"])
logger = logging.getLogger(__name__)


def _get_role_or_404(db: Session, venue: Venue, role_id: UUID) -> VenueRole:
    role = role_crud.get_by_id(db, venue.id, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


def _db_error(action: str, e: SQLAlchemyError) -> HTTPException:
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def _forbidden(e: PrivilegeEscalationError) -> HTTPException:
    logger.info(f"Permission change rejected: {e}")
    return HTTPException(status_code=403, detail=str(e))


@catalog_router.get("", response_model=List[PermissionResponse])
def list_permissions(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The permission catalog, grouped by category."""
    return role_crud.get_permissions(db)


@router.get("/roles", response_model=List[RoleResponse])
def list_roles(
    venue: Venue = Depends(get_venue),
    db: Session = Depends(get_db),
):
    return role_crud.get_all(db, venue.id)


@router.post("/roles", status_code=201, response_model=RoleResponse)
def create_role(
    role_data: RoleCreate,
    venue: Venue = Depends(require_permission(PermissionName.ADMIN_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a custom role, optionally with its initial permissions.

    Raises:
        HTTPException 400: Unknown permission name
        HTTPException 409: A role with this name already exists at the venue
    """
    if role_crud.get_by_name(db, venue.id, role_data.role_name):
        raise HTTPException(status_code=409, detail=f"Role '{role_data.role_name}' already exists")

    try:
        role = role_crud.create(db, venue.id, role_data, created_by=user.id)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=f"Role '{role_data.role_name}' already exists")
    except SQLAlchemyError as e:
        raise _db_error("create role", e)

    if role_data.permissions:
        try:
            role = permission_service.set_role_permissions(db, role, role_data.permissions, granted_by=user.id)
        except ValueError as e:
            role_crud.delete(db, role)
            raise HTTPException(status_code=400, detail=str(e))
        except SQLAlchemyError as e:
            raise _db_error("set role permissions", e)

    logger.info(f"Created role {role.id} ({role.role_name}) at venue {venue.id}")
    return role


@router.patch("/roles/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: UUID,
    role_data: RoleUpdate,
    venue: Venue = Depends(require_permission(PermissionName.ADMIN_MANAGE_ROLES)),
    db: Session = Depends(get_db),
):
    """Rename, re-level or (de)activate a role. System roles cannot be renamed."""
    role = _get_role_or_404(db, venue, role_id)
    changes = role_data.model_dump(exclude_unset=True)
    if role.is_system_role and "role_name" in changes and changes["role_name"] != role.role_name:
        raise HTTPException(status_code=400, detail="System roles cannot be renamed")
    if "role_name" in changes:
        existing = role_crud.get_by_name(db, venue.id, changes["role_name"])
        if existing and existing.id != role.id:
            raise HTTPException(status_code=409, detail=f"Role '{changes['role_name']}' already exists")
    try:
        return role_crud.update(db, role, role_data)
    except SQLAlchemyError as e:
        raise _db_error("update role", e)


@router.delete("/roles/{role_id}", status_code=204)
def delete_role(
    role_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.ADMIN_MANAGE_ROLES)),
    db: Session = Depends(get_db),
):
    """Delete a custom role. Its user assignments go with it."""
    role = _get_role_or_404(db, venue, role_id)
    if role.is_system_role:
        raise HTTPException(status_code=400, detail="System roles cannot be deleted")
    try:
        role_crud.delete(db, role)
    except SQLAlchemyError as e:
        raise _db_error("delete role", e)
    logger.info(f"Deleted role {role_id} at venue {venue.id}")
    return None


@router.put("/roles/{role_id}/permissions", response_model=RoleResponse)
def set_role_permissions(
    role_id: UUID,
    update: RolePermissionsUpdate,
    venue: Venue = Depends(require_permission(PermissionName.ADMIN_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the role's permission set with exactly the given names."""
    role = _get_role_or_404(db, venue, role_id)
    try:
        return permission_service.set_role_permissions(db, role, update.permissions, granted_by=user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise _db_error("set role permissions", e)


@router.get("/permissions/matrix", response_model=PermissionMatrixResponse)
def get_permission_matrix(
    venue: Venue = Depends(require_permission(PermissionName.STAFF_MANAGE_ROLES)),
    db: Session = Depends(get_db),
):
    """Role x permission grid read from the role grants. Keys are role ids."""
    return permission_service.permission_matrix(db, venue.id)


@router.get("/permissions/me", response_model=MyPermissionsResponse)
def get_my_permissions(
    venue: Venue = Depends(get_venue),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's roles and effective permissions at this venue."""
    user_roles = permission_service.active_user_roles(db, venue.id, user.id)
    return MyPermissionsResponse(
        venue_id=venue.id,
        user_id=user.id,
        is_owner=venue.owner_id == user.id,
        roles=sorted(ur.role.role_name for ur in user_roles),
        permissions=sorted(permission_service.effective_permissions(db, venue, user.id)),
    )


@router.get("/permissions/audit-log", response_model=List[AuditLogResponse])
def get_audit_log(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    venue: Venue = Depends(require_permission(PermissionName.ADMIN_VIEW_AUDIT_LOGS)),
    db: Session = Depends(get_db),
):
    """Permission changes at this venue, newest first."""
    return role_crud.get_audit_log(db, venue.id, skip=skip, limit=limit)


@router.post("/users/{user_id}/roles", status_code=201, response_model=UserRoleResponse)
def assign_user_role(
    user_id: UUID,
    assignment: UserRoleAssign,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Give a user a role at this venue. Assigning a role they held before reactivates it.

    Raises:
        HTTPException 403: Non-owner assigning a role above their own level or
            with permissions they do not hold
    """
    role = _get_role_or_404(db, venue, assignment.role_id)
    if not role.is_active:
        raise HTTPException(status_code=400, detail="Cannot assign an inactive role")
    try:
        permission_service.ensure_can_manage_role(db, venue, user.id, role)
    except PrivilegeEscalationError as e:
        raise _forbidden(e)
    try:
        user_role = permission_service.assign_role(
            db, venue.id, user_id, role, assigned_by=user.id,
            expires_at=assignment.expires_at, notes=assignment.notes,
        )
    except SQLAlchemyError as e:
        raise _db_error("assign role", e)
    logger.info(f"User {user.id} assigned role {role.role_name} to {user_id} at venue {venue.id}")
    return user_role


@router.delete("/users/{user_id}/roles/{role_id}", status_code=204)
def remove_user_role(
    user_id: UUID,
    role_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    role = _get_role_or_404(db, venue, role_id)
    try:
        permission_service.ensure_can_manage_role(db, venue, user.id, role)
    except PrivilegeEscalationError as e:
        raise _forbidden(e)
    try:
        removed = permission_service.remove_role(db, venue.id, user_id, role, removed_by=user.id)
    except SQLAlchemyError as e:
        raise _db_error("remove role", e)
    if not removed:
        raise HTTPException(status_code=404, detail="User does not hold this role")
    return None


@router.post("/users/{user_id}/overrides", status_code=201, response_model=OverrideResponse)
def set_user_override(
    user_id: UUID,
    override: OverrideCreate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Grant or deny one permission to one user. Non-owners may only override permissions they hold."""
    permission = permission_service.get_permission_by_name(db, override.permission_name)
    if not permission:
        raise HTTPException(status_code=400, detail=f"Unknown permission: {override.permission_name}")
    try:
        permission_service.ensure_can_override(db, venue, user.id, permission.permission_name)
    except PrivilegeEscalationError as e:
        raise _forbidden(e)
    try:
        return permission_service.set_override(
            db, venue.id, user_id, permission, override.is_granted, granted_by=user.id,
            expires_at=override.expires_at, reason=override.reason,
        )
    except SQLAlchemyError as e:
        raise _db_error("set permission override", e)


@router.delete("/users/{user_id}/overrides/{permission_name}", status_code=204)
def remove_user_override(
    user_id: UUID,
    permission_name: str,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_MANAGE_ROLES)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    permission = permission_service.get_permission_by_name(db, permission_name)
    if not permission:
        raise HTTPException(status_code=404, detail="Override not found")
    try:
        permission_service.ensure_can_override(db, venue, user.id, permission.permission_name)
    except PrivilegeEscalationError as e:
        raise _forbidden(e)
    try:
        removed = permission_service.remove_override(db, venue.id, user_id, permission, removed_by=user.id)
    except SQLAlchemyError as e:
        raise _db_error("remove permission override", e)
    if not removed:
        raise HTTPException(status_code=404, detail="Override not found")
    return None
