"""
CRUD operations for venue roles and the permission audit log.

Role membership, overrides and permission sets go through
app.services.permissions so that every change is audited.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.permission import PermissionAuditLog, VenueRole, VenuePermission
from app.schemas.permission import RoleCreate, RoleUpdate


def get_by_id(db: Session, venue_id: UUID, role_id: UUID) -> Optional[VenueRole]:
    return db.query(VenueRole).filter(VenueRole.id == role_id, VenueRole.venue_id == venue_id).first()


def get_by_name(db: Session, venue_id: UUID, role_name: str) -> Optional[VenueRole]:
    return (
        db.query(VenueRole)
        .filter(VenueRole.venue_id == venue_id, VenueRole.role_name == role_name)
        .first()
    )


def get_all(db: Session, venue_id: UUID) -> List[VenueRole]:
    return (
        db.query(VenueRole)
        .filter(VenueRole.venue_id == venue_id)
        .order_by(VenueRole.role_level.desc(), VenueRole.role_name)
        .all()
    )


def get_permissions(db: Session) -> List[VenuePermission]:
    return (
        db.query(VenuePermission)
        .order_by(VenuePermission.permission_category, VenuePermission.permission_name)
        .all()
    )


def create(db: Session, venue_id: UUID, data: RoleCreate, created_by: UUID) -> VenueRole:
    """Create a custom (non-system) role without permissions; see set_role_permissions."""
    role = VenueRole(
        venue_id=venue_id,
        role_name=data.role_name,
        role_description=data.role_description,
        role_level=data.role_level,
        is_system_role=False,
        is_active=True,
        created_by=created_by,
    )
    try:
        db.add(role)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(role)
    return role


def update(db: Session, role: VenueRole, data: RoleUpdate) -> VenueRole:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(role, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(role)
    return role


def delete(db: Session, role: VenueRole) -> None:
    try:
        db.delete(role)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def get_audit_log(db: Session, venue_id: UUID, skip: int = 0, limit: int = 100) -> List[PermissionAuditLog]:
    return (
        db.query(PermissionAuditLog)
        .filter(PermissionAuditLog.venue_id == venue_id)
        .order_by(PermissionAuditLog.performed_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
