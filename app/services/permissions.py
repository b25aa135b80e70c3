"""
Venue role-based access control.

Permission resolution for a user at a venue:

1. The venue owner holds every permission.
2. Otherwise start from the union of permissions of the user's active,
   unexpired roles (role must be active too).
3. Unexpired overrides then apply: a deny removes the permission, a grant
   adds it.

The permissions matrix is read from venue_role_permissions; every protected
endpoint goes through has_permission.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.permission import (
    AuditActionType,
    PermissionAuditLog,
    PermissionCategory,
    VenuePermission,
    VenueRole,
    VenueRolePermission,
    VenueUserPermissionOverride,
    VenueUserRole,
)
from app.models.venue import Venue

logger = logging.getLogger(__name__)


class PermissionName(str, enum.Enum):
    # Staff management
    STAFF_VIEW = "staff.view"
    STAFF_CREATE = "staff.create"
    STAFF_EDIT = "staff.edit"
    STAFF_DELETE = "staff.delete"
    STAFF_MANAGE_ROLES = "staff.manage_roles"
    STAFF_VIEW_SENSITIVE = "staff.view_sensitive"
    STAFF_MANAGE_PERFORMANCE = "staff.manage_performance"
    STAFF_MANAGE_CERTIFICATIONS = "staff.manage_certifications"
    # Events
    EVENTS_VIEW = "events.view"
    EVENTS_CREATE = "events.create"
    EVENTS_EDIT = "events.edit"
    EVENTS_DELETE = "events.delete"
    EVENTS_MANAGE_STAFF = "events.manage_staff"
    EVENTS_MANAGE_SCHEDULE = "events.manage_schedule"
    EVENTS_VIEW_FINANCIAL = "events.view_financial"
    EVENTS_MANAGE_FINANCIAL = "events.manage_financial"
    # Bookings
    BOOKINGS_VIEW = "bookings.view"
    BOOKINGS_CREATE = "bookings.create"
    BOOKINGS_EDIT = "bookings.edit"
    BOOKINGS_DELETE = "bookings.delete"
    BOOKINGS_APPROVE = "bookings.approve"
    BOOKINGS_MANAGE_CONTRACTS = "bookings.manage_contracts"
    # Analytics
    ANALYTICS_VIEW = "analytics.view"
    ANALYTICS_VIEW_FINANCIAL = "analytics.view_financial"
    ANALYTICS_VIEW_STAFF = "analytics.view_staff"
    ANALYTICS_EXPORT = "analytics.export"
    ANALYTICS_MANAGE_DASHBOARDS = "analytics.manage_dashboards"
    # Settings
    SETTINGS_VIEW = "settings.view"
    SETTINGS_EDIT_BASIC = "settings.edit_basic"
    SETTINGS_EDIT_ADVANCED = "settings.edit_advanced"
    SETTINGS_MANAGE_INTEGRATIONS = "settings.manage_integrations"
    SETTINGS_MANAGE_BILLING = "settings.manage_billing"
    # Documents
    DOCUMENTS_VIEW = "documents.view"
    DOCUMENTS_UPLOAD = "documents.upload"
    DOCUMENTS_EDIT = "documents.edit"
    DOCUMENTS_DELETE = "documents.delete"
    DOCUMENTS_MANAGE_CATEGORIES = "documents.manage_categories"
    # Payroll
    PAYROLL_VIEW = "payroll.view"
    PAYROLL_EDIT = "payroll.edit"
    PAYROLL_PROCESS = "payroll.process"
    PAYROLL_VIEW_TAX_INFO = "payroll.view_tax_info"
    PAYROLL_MANAGE_RATES = "payroll.manage_rates"
    # Communications
    COMMUNICATIONS_VIEW = "communications.view"
    COMMUNICATIONS_SEND = "communications.send"
    COMMUNICATIONS_BROADCAST = "communications.broadcast"
    COMMUNICATIONS_MANAGE_TEMPLATES = "communications.manage_templates"
    COMMUNICATIONS_VIEW_PRIVATE = "communications.view_private"
    # Administration
    ADMIN_MANAGE_ROLES = "admin.manage_roles"
    ADMIN_MANAGE_USERS = "admin.manage_users"
    ADMIN_VIEW_AUDIT_LOGS = "admin.view_audit_logs"
    ADMIN_SYSTEM_SETTINGS = "admin.system_settings"
    ADMIN_DATA_EXPORT = "admin.data_export"

    @property
    def category(self) -> PermissionCategory:
        return PermissionCategory(self.value.split(".", 1)[0])

    @property
    def description(self) -> str:
        area, action = self.value.split(".", 1)
        return f"{action.replace('_', ' ').capitalize()} ({area})"


class SystemRoleName(str, enum.Enum):
    VENUE_OWNER = "Venue Owner"
    VENUE_MANAGER = "Venue Manager"
    EVENT_COORDINATOR = "Event Coordinator"
    STAFF_SUPERVISOR = "Staff Supervisor"
    FOH_MANAGER = "FOH Manager"
    TECHNICAL_MANAGER = "Technical Manager"
    SECURITY_MANAGER = "Security Manager"
    BAR_MANAGER = "Bar Manager"
    KITCHEN_MANAGER = "Kitchen Manager"
    SENIOR_STAFF = "Senior Staff"
    STAFF_MEMBER = "Staff Member"
    TEMPORARY_STAFF = "Temporary Staff"
    VIEWER = "Viewer"


P = PermissionName

_SUPERVISOR_SET = [
    P.STAFF_VIEW, P.STAFF_EDIT, P.STAFF_MANAGE_PERFORMANCE,
    P.EVENTS_VIEW, P.EVENTS_MANAGE_STAFF,
    P.ANALYTICS_VIEW, P.ANALYTICS_VIEW_STAFF,
    P.PAYROLL_VIEW, P.PAYROLL_EDIT,
    P.COMMUNICATIONS_VIEW, P.COMMUNICATIONS_SEND,
]

_STAFF_MEMBER_SET = [P.STAFF_VIEW, P.EVENTS_VIEW, P.COMMUNICATIONS_VIEW, P.COMMUNICATIONS_SEND]

ROLE_PERMISSION_SETS: Dict[SystemRoleName, List[PermissionName]] = {
    SystemRoleName.VENUE_OWNER: list(PermissionName),
    SystemRoleName.VENUE_MANAGER: [
        P.STAFF_VIEW, P.STAFF_CREATE, P.STAFF_EDIT, P.STAFF_MANAGE_ROLES, P.STAFF_VIEW_SENSITIVE,
        P.STAFF_MANAGE_PERFORMANCE, P.STAFF_MANAGE_CERTIFICATIONS,
        P.EVENTS_VIEW, P.EVENTS_CREATE, P.EVENTS_EDIT, P.EVENTS_MANAGE_STAFF, P.EVENTS_MANAGE_SCHEDULE,
        P.EVENTS_VIEW_FINANCIAL,
        P.BOOKINGS_VIEW, P.BOOKINGS_CREATE, P.BOOKINGS_EDIT, P.BOOKINGS_APPROVE, P.BOOKINGS_MANAGE_CONTRACTS,
        P.ANALYTICS_VIEW, P.ANALYTICS_VIEW_FINANCIAL, P.ANALYTICS_VIEW_STAFF, P.ANALYTICS_EXPORT,
        P.SETTINGS_VIEW, P.SETTINGS_EDIT_BASIC, P.SETTINGS_EDIT_ADVANCED,
        P.DOCUMENTS_VIEW, P.DOCUMENTS_UPLOAD, P.DOCUMENTS_EDIT, P.DOCUMENTS_MANAGE_CATEGORIES,
        P.PAYROLL_VIEW, P.PAYROLL_EDIT, P.PAYROLL_MANAGE_RATES,
        P.COMMUNICATIONS_VIEW, P.COMMUNICATIONS_SEND, P.COMMUNICATIONS_BROADCAST,
        P.COMMUNICATIONS_MANAGE_TEMPLATES,
    ],
    SystemRoleName.EVENT_COORDINATOR: [
        P.STAFF_VIEW, P.STAFF_EDIT,
        P.EVENTS_VIEW, P.EVENTS_CREATE, P.EVENTS_EDIT, P.EVENTS_MANAGE_STAFF, P.EVENTS_MANAGE_SCHEDULE,
        P.BOOKINGS_VIEW, P.BOOKINGS_CREATE, P.BOOKINGS_EDIT, P.BOOKINGS_APPROVE,
        P.ANALYTICS_VIEW,
        P.DOCUMENTS_VIEW, P.DOCUMENTS_UPLOAD, P.DOCUMENTS_EDIT,
        P.COMMUNICATIONS_VIEW, P.COMMUNICATIONS_SEND,
    ],
    SystemRoleName.STAFF_SUPERVISOR: _SUPERVISOR_SET,
    SystemRoleName.FOH_MANAGER: _SUPERVISOR_SET,
    SystemRoleName.TECHNICAL_MANAGER: _SUPERVISOR_SET,
    SystemRoleName.SECURITY_MANAGER: _SUPERVISOR_SET,
    SystemRoleName.BAR_MANAGER: _SUPERVISOR_SET,
    SystemRoleName.KITCHEN_MANAGER: _SUPERVISOR_SET,
    SystemRoleName.SENIOR_STAFF: [
        P.STAFF_VIEW, P.EVENTS_VIEW, P.ANALYTICS_VIEW, P.COMMUNICATIONS_VIEW, P.COMMUNICATIONS_SEND,
    ],
    SystemRoleName.STAFF_MEMBER: _STAFF_MEMBER_SET,
    SystemRoleName.TEMPORARY_STAFF: _STAFF_MEMBER_SET,
    SystemRoleName.VIEWER: [P.STAFF_VIEW, P.EVENTS_VIEW],
}

ROLE_LEVELS: Dict[SystemRoleName, int] = {
    SystemRoleName.VENUE_OWNER: 5,
    SystemRoleName.VENUE_MANAGER: 4,
    SystemRoleName.FOH_MANAGER: 4,
    SystemRoleName.TECHNICAL_MANAGER: 4,
    SystemRoleName.SECURITY_MANAGER: 4,
    SystemRoleName.BAR_MANAGER: 4,
    SystemRoleName.KITCHEN_MANAGER: 4,
    SystemRoleName.EVENT_COORDINATOR: 3,
    SystemRoleName.STAFF_SUPERVISOR: 3,
    SystemRoleName.SENIOR_STAFF: 3,
    SystemRoleName.STAFF_MEMBER: 2,
    SystemRoleName.TEMPORARY_STAFF: 1,
    SystemRoleName.VIEWER: 1,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        # SQLite drops tzinfo; stored values are UTC
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= now


def seed_permission_catalog(db: Session) -> Dict[str, VenuePermission]:
    """
    Insert any missing catalog permissions. Idempotent; does not commit.

    Returns:
        permission name -> VenuePermission
    """
    existing = {p.permission_name: p for p in db.query(VenuePermission).all()}
    for name in PermissionName:
        if name.value not in existing:
            permission = VenuePermission(
                permission_name=name.value,
                permission_description=name.description,
                permission_category=name.category,
            )
            db.add(permission)
            existing[name.value] = permission
    db.flush()
    return existing


def create_default_roles(db: Session, venue: Venue, created_by: Optional[UUID]) -> Dict[str, VenueRole]:
    """Create the system roles for a new venue with their permission sets. Does not commit."""
    catalog = seed_permission_catalog(db)
    roles = {}
    for role_name, permission_names in ROLE_PERMISSION_SETS.items():
        role = VenueRole(
            venue_id=venue.id,
            role_name=role_name.value,
            role_level=ROLE_LEVELS[role_name],
            is_system_role=True,
            is_active=True,
            created_by=created_by,
        )
        for name in permission_names:
            role.role_permissions.append(
                VenueRolePermission(permission=catalog[name.value], granted_by=created_by)
            )
        db.add(role)
        roles[role_name.value] = role
    db.flush()
    return roles


def record_audit(
    db: Session,
    venue_id: UUID,
    action_type: AuditActionType,
    performed_by: Optional[UUID],
    target_user_id: Optional[UUID] = None,
    role_id: Optional[UUID] = None,
    permission_id: Optional[UUID] = None,
    details: Optional[dict] = None,
) -> PermissionAuditLog:
    """Add an audit entry to the current transaction."""
    entry = PermissionAuditLog(
        venue_id=venue_id,
        action_type=action_type,
        target_user_id=target_user_id,
        role_id=role_id,
        permission_id=permission_id,
        performed_by=performed_by,
        details=details or {},
    )
    db.add(entry)
    return entry


def active_user_roles(db: Session, venue_id: UUID, user_id: UUID, now: Optional[datetime] = None) -> List[VenueUserRole]:
    now = now or _now()
    rows = (
        db.query(VenueUserRole)
        .join(VenueRole, VenueUserRole.role_id == VenueRole.id)
        .filter(
            VenueUserRole.venue_id == venue_id,
            VenueUserRole.user_id == user_id,
            VenueUserRole.is_active.is_(True),
            VenueRole.is_active.is_(True),
        )
        .all()
    )
    return [r for r in rows if not _is_expired(r.expires_at, now)]


def is_member(db: Session, venue: Venue, user_id: UUID) -> bool:
    """Owner, or holder of at least one active role at the venue."""
    if venue.owner_id == user_id:
        return True
    return bool(active_user_roles(db, venue.id, user_id))


def effective_permissions(db: Session, venue: Venue, user_id: UUID, now: Optional[datetime] = None) -> Set[str]:
    now = now or _now()
    if venue.owner_id == user_id:
        return {p.value for p in PermissionName}

    role_ids = [ur.role_id for ur in active_user_roles(db, venue.id, user_id, now)]
    granted: Set[str] = set()
    if role_ids:
        rows = (
            db.query(VenuePermission.permission_name)
            .join(VenueRolePermission, VenueRolePermission.permission_id == VenuePermission.id)
            .filter(VenueRolePermission.role_id.in_(role_ids))
            .all()
        )
        granted = {name for (name,) in rows}

    overrides = (
        db.query(VenueUserPermissionOverride)
        .filter(
            VenueUserPermissionOverride.venue_id == venue.id,
            VenueUserPermissionOverride.user_id == user_id,
        )
        .all()
    )
    for override in overrides:
        if _is_expired(override.expires_at, now):
            continue
        name = override.permission.permission_name
        if override.is_granted:
            granted.add(name)
        else:
            granted.discard(name)

    return granted


def has_permission(db: Session, venue: Venue, user_id: UUID, permission: str) -> bool:
    return str(getattr(permission, "value", permission)) in effective_permissions(db, venue, user_id)


class PrivilegeEscalationError(Exception):
    """Caller tried to hand out or take away access beyond their own."""
    pass


def highest_role_level(db: Session, venue: Venue, user_id: UUID) -> int:
    """Highest level among the user's active roles; the owner ranks above every role."""
    if venue.owner_id == user_id:
        return max(ROLE_LEVELS.values())
    return max((ur.role.role_level for ur in active_user_roles(db, venue.id, user_id)), default=0)


def ensure_can_manage_role(db: Session, venue: Venue, manager_id: UUID, role: VenueRole) -> None:
    """
    Check that a non-owner may assign or remove this role.

    The role must not outrank the manager's own highest role, and every
    permission it grants must be one the manager holds.

    Raises:
        PrivilegeEscalationError: Role is above the manager's level or
            grants permissions the manager lacks
    """
    if venue.owner_id == manager_id:
        return
    if role.role_level > highest_role_level(db, venue, manager_id):
        raise PrivilegeEscalationError(f"Cannot manage role '{role.role_name}' above your own level")
    held = effective_permissions(db, venue, manager_id)
    missing = sorted({rp.permission.permission_name for rp in role.role_permissions} - held)
    if missing:
        raise PrivilegeEscalationError(
            f"Cannot manage role '{role.role_name}': it grants permissions you do not hold "
            f"({', '.join(missing)})"
        )


def ensure_can_override(db: Session, venue: Venue, manager_id: UUID, permission_name: str) -> None:
    """
    Raises:
        PrivilegeEscalationError: A non-owner overriding a permission they do not hold
    """
    if venue.owner_id == manager_id:
        return
    if permission_name not in effective_permissions(db, venue, manager_id):
        raise PrivilegeEscalationError(f"Cannot override a permission you do not hold: {permission_name}")


def permission_matrix(db: Session, venue_id: UUID) -> Dict:
    """
    Role x permission grid built from venue_role_permissions.

    Returns:
        {"roles": [...], "permissions": [...], "matrix": {role_id: {permission_name: bool}}}
    """
    roles = (
        db.query(VenueRole)
        .filter(VenueRole.venue_id == venue_id)
        .order_by(VenueRole.role_level.desc(), VenueRole.role_name)
        .all()
    )
    permissions = (
        db.query(VenuePermission)
        .order_by(VenuePermission.permission_category, VenuePermission.permission_name)
        .all()
    )
    granted_pairs = set()
    if roles:
        rows = (
            db.query(VenueRolePermission.role_id, VenueRolePermission.permission_id)
            .filter(VenueRolePermission.role_id.in_([r.id for r in roles]))
            .all()
        )
        granted_pairs = {(role_id, permission_id) for role_id, permission_id in rows}

    matrix = {
        str(role.id): {p.permission_name: (role.id, p.id) in granted_pairs for p in permissions}
        for role in roles
    }
    return {"roles": roles, "permissions": permissions, "matrix": matrix}


def get_permission_by_name(db: Session, name: str) -> Optional[VenuePermission]:
    return db.query(VenuePermission).filter(VenuePermission.permission_name == name).first()


def set_role_permissions(
    db: Session, role: VenueRole, permission_names: Iterable[str], granted_by: UUID
) -> VenueRole:
    """
    Replace a role's permission set.

    Raises:
        ValueError: Unknown permission name; nothing is changed
    """
    wanted = set(permission_names)
    catalog = {p.permission_name: p for p in db.query(VenuePermission).filter(
        VenuePermission.permission_name.in_(wanted)).all()} if wanted else {}
    unknown = sorted(wanted - set(catalog))
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")

    current = {rp.permission.permission_name: rp for rp in role.role_permissions}
    added = sorted(wanted - set(current))
    removed = sorted(set(current) - wanted)

    try:
        for name in removed:
            role.role_permissions.remove(current[name])
        for name in added:
            role.role_permissions.append(
                VenueRolePermission(permission=catalog[name], granted_by=granted_by)
            )
        record_audit(
            db, role.venue_id, AuditActionType.ROLE_PERMISSIONS_UPDATED, granted_by,
            role_id=role.id, details={"added": added, "removed": removed},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(role)
    logger.info(f"Updated permissions for role {role.id}: +{len(added)} -{len(removed)}")
    return role


def assign_role(
    db: Session,
    venue_id: UUID,
    user_id: UUID,
    role: VenueRole,
    assigned_by: UUID,
    expires_at: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> VenueUserRole:
    """Give a user a role at a venue, reactivating an earlier assignment if one exists."""
    user_role = (
        db.query(VenueUserRole)
        .filter(
            VenueUserRole.venue_id == venue_id,
            VenueUserRole.user_id == user_id,
            VenueUserRole.role_id == role.id,
        )
        .first()
    )
    try:
        if user_role is None:
            user_role = VenueUserRole(venue_id=venue_id, user_id=user_id, role_id=role.id)
            db.add(user_role)
        user_role.is_active = True
        user_role.assigned_by = assigned_by
        user_role.assigned_at = _now()
        user_role.expires_at = expires_at
        user_role.notes = notes
        record_audit(
            db, venue_id, AuditActionType.ROLE_ASSIGNED, assigned_by,
            target_user_id=user_id, role_id=role.id, details={"role_name": role.role_name},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user_role)
    return user_role


def remove_role(db: Session, venue_id: UUID, user_id: UUID, role: VenueRole, removed_by: UUID) -> bool:
    """Deactivate a user's role. Returns False when the user does not hold it."""
    user_role = (
        db.query(VenueUserRole)
        .filter(
            VenueUserRole.venue_id == venue_id,
            VenueUserRole.user_id == user_id,
            VenueUserRole.role_id == role.id,
            VenueUserRole.is_active.is_(True),
        )
        .first()
    )
    if user_role is None:
        return False
    try:
        user_role.is_active = False
        record_audit(
            db, venue_id, AuditActionType.ROLE_REMOVED, removed_by,
            target_user_id=user_id, role_id=role.id, details={"role_name": role.role_name},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True


def set_override(
    db: Session,
    venue_id: UUID,
    user_id: UUID,
    permission: VenuePermission,
    is_granted: bool,
    granted_by: UUID,
    expires_at: Optional[datetime] = None,
    reason: Optional[str] = None,
) -> VenueUserPermissionOverride:
    """Create or replace the user's override for one permission."""
    override = (
        db.query(VenueUserPermissionOverride)
        .filter(
            VenueUserPermissionOverride.venue_id == venue_id,
            VenueUserPermissionOverride.user_id == user_id,
            VenueUserPermissionOverride.permission_id == permission.id,
        )
        .first()
    )
    try:
        if override is None:
            override = VenueUserPermissionOverride(
                venue_id=venue_id, user_id=user_id, permission_id=permission.id, is_granted=is_granted
            )
            db.add(override)
        override.is_granted = is_granted
        override.granted_by = granted_by
        override.granted_at = _now()
        override.expires_at = expires_at
        override.reason = reason
        record_audit(
            db, venue_id, AuditActionType.OVERRIDE_ADDED, granted_by,
            target_user_id=user_id, permission_id=permission.id,
            details={"permission_name": permission.permission_name, "is_granted": is_granted, "reason": reason},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(override)
    return override


def remove_override(
    db: Session, venue_id: UUID, user_id: UUID, permission: VenuePermission, removed_by: UUID
) -> bool:
    override = (
        db.query(VenueUserPermissionOverride)
        .filter(
            VenueUserPermissionOverride.venue_id == venue_id,
            VenueUserPermissionOverride.user_id == user_id,
            VenueUserPermissionOverride.permission_id == permission.id,
        )
        .first()
    )
    if override is None:
        return False
    try:
        db.delete(override)
        record_audit(
            db, venue_id, AuditActionType.OVERRIDE_REMOVED, removed_by,
            target_user_id=user_id, permission_id=permission.id,
            details={"permission_name": permission.permission_name},
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True


def accessible_venue_ids(db: Session, user_id: UUID) -> Set[UUID]:
    """Venues the user owns or holds an active, unexpired role at."""
    now = _now()
    owned = {vid for (vid,) in db.query(Venue.id).filter(Venue.owner_id == user_id).all()}
    rows = (
        db.query(VenueUserRole)
        .join(VenueRole, VenueUserRole.role_id == VenueRole.id)
        .filter(
            VenueUserRole.user_id == user_id,
            VenueUserRole.is_active.is_(True),
            VenueRole.is_active.is_(True),
        )
        .all()
    )
    return owned | {r.venue_id for r in rows if not _is_expired(r.expires_at, now)}
