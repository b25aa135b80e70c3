"""
Role-based access control models.

Permissions are a global catalog. Roles are per venue and carry a set of
permissions through venue_role_permissions. Users hold roles at a venue via
venue_user_roles and may carry per-permission grant/deny overrides.
"""

import enum
import uuid
from sqlalchemy import (
    Column, Integer, String, Boolean, Text, DateTime, Enum, ForeignKey, Uuid, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType


class PermissionCategory(str, enum.Enum):
    STAFF = "staff"
    EVENTS = "events"
    BOOKINGS = "bookings"
    ANALYTICS = "analytics"
    SETTINGS = "settings"
    DOCUMENTS = "documents"
    PAYROLL = "payroll"
    COMMUNICATIONS = "communications"
    ADMIN = "admin"


class AuditActionType(str, enum.Enum):
    ROLE_ASSIGNED = "role_assigned"
    ROLE_REMOVED = "role_removed"
    OVERRIDE_ADDED = "override_added"
    OVERRIDE_REMOVED = "override_removed"
    ROLE_PERMISSIONS_UPDATED = "role_permissions_updated"


class VenuePermission(Base):
    __tablename__ = "venue_permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    permission_name = Column(String, unique=True, nullable=False, index=True)
    permission_description = Column(Text, nullable=True)
    permission_category = Column(Enum(PermissionCategory), nullable=False)

    def __repr__(self):
        return f"<VenuePermission(name='{self.permission_name}')>"


class VenueRole(Base):
    __tablename__ = "venue_roles"
    __table_args__ = (UniqueConstraint("venue_id", "role_name", name="uq_venue_role_name"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    role_name = Column(String, nullable=False)
    role_description = Column(Text, nullable=True)
    role_level = Column(Integer, default=1, nullable=False)
    is_system_role = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_by = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="roles")
    role_permissions = relationship("VenueRolePermission", back_populates="role", cascade="all, delete-orphan")
    user_roles = relationship("VenueUserRole", back_populates="role", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<VenueRole(id={self.id}, name='{self.role_name}', level={self.role_level})>"


class VenueRolePermission(Base):
    __tablename__ = "venue_role_permissions"

    role_id = Column(Uuid, ForeignKey("venue_roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = Column(Uuid, ForeignKey("venue_permissions.id", ondelete="CASCADE"), primary_key=True)
    granted_by = Column(Uuid, nullable=True)
    granted_at = Column(DateTime(timezone=True), server_default=func.now())

    role = relationship("VenueRole", back_populates="role_permissions")
    permission = relationship("VenuePermission")


class VenueUserRole(Base):
    """A user's membership at a venue through one role."""
    __tablename__ = "venue_user_roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    role_id = Column(Uuid, ForeignKey("venue_roles.id", ondelete="CASCADE"), nullable=False)

    assigned_by = Column(Uuid, nullable=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)

    role = relationship("VenueRole", back_populates="user_roles")

    def __repr__(self):
        return f"<VenueUserRole(user_id={self.user_id}, role_id={self.role_id}, active={self.is_active})>"


class VenueUserPermissionOverride(Base):
    """Per-user grant (is_granted=True) or deny of one permission at one venue."""
    __tablename__ = "venue_user_permission_overrides"
    __table_args__ = (
        UniqueConstraint("venue_id", "user_id", "permission_id", name="uq_venue_user_permission_override"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    permission_id = Column(Uuid, ForeignKey("venue_permissions.id", ondelete="CASCADE"), nullable=False)

    is_granted = Column(Boolean, nullable=False)
    granted_by = Column(Uuid, nullable=True)
    granted_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)
    reason = Column(Text, nullable=True)

    permission = relationship("VenuePermission")


class PermissionAuditLog(Base):
    __tablename__ = "permission_audit_log"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    venue_id = Column(Uuid, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    action_type = Column(Enum(AuditActionType), nullable=False)
    target_user_id = Column(Uuid, nullable=True)
    role_id = Column(Uuid, nullable=True)
    permission_id = Column(Uuid, nullable=True)
    performed_by = Column(Uuid, nullable=True)
    performed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    details = Column(JSONType, default=dict, nullable=False)

    def __repr__(self):
        return f"<PermissionAuditLog(action={self.action_type.value}, target={self.target_user_id})>"
