"""initial_venue_schema

Creates the venue operations schema:
1. Venues (tenant boundary) and staff members
2. Job postings and applications (with screening results)
3. Onboarding templates
4. Shifts, assignments, swaps and drop/pickup requests
5. Roles, permissions, user roles, overrides and the permission audit log

Enum columns store member names, matching SQLAlchemy's Enum default.

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 09:12:40.518223

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    'employmenttype': ('FULL_TIME', 'PART_TIME', 'CONTRACTOR', 'VOLUNTEER', 'INTERN'),
    'staffstatus': ('ACTIVE', 'INACTIVE', 'ON_LEAVE', 'TERMINATED'),
    'jobpostingstatus': ('DRAFT', 'PUBLISHED', 'PAUSED', 'CLOSED'),
    'experiencelevel': ('ENTRY', 'MID', 'SENIOR', 'EXECUTIVE'),
    'salarytype': ('HOURLY', 'SALARY', 'DAILY'),
    'applicationstatus': ('PENDING', 'REVIEWED', 'SHORTLISTED', 'APPROVED', 'REJECTED', 'WITHDRAWN'),
    'rolecategory': ('GENERAL', 'SECURITY', 'BAR', 'TECHNICAL', 'MANAGEMENT'),
    'shiftstatus': ('OPEN', 'FILLED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED'),
    'shiftpriority': ('LOW', 'NORMAL', 'HIGH', 'URGENT'),
    'assignmentstatus': ('ASSIGNED', 'CONFIRMED', 'DECLINED', 'CANCELLED'),
    'requeststatus': ('PENDING', 'APPROVED', 'DENIED', 'CANCELLED'),
    'requesttype': ('DROP', 'PICKUP'),
    'permissioncategory': (
        'STAFF', 'EVENTS', 'BOOKINGS', 'ANALYTICS', 'SETTINGS',
        'DOCUMENTS', 'PAYROLL', 'COMMUNICATIONS', 'ADMIN',
    ),
    'auditactiontype': (
        'ROLE_ASSIGNED', 'ROLE_REMOVED', 'OVERRIDE_ADDED', 'OVERRIDE_REMOVED', 'ROLE_PERMISSIONS_UPDATED',
    ),
}


def _enum(name: str) -> postgresql.ENUM:
    # Types are created once up front; several tables share them
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create all venue operations tables."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # 1. Venues and staff
    op.create_table(
        'venues',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('owner_id', _uuid(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_venues_id', 'venues', ['id'])
    op.create_index('ix_venues_slug', 'venues', ['slug'], unique=True)
    op.create_index('ix_venues_owner_id', 'venues', ['owner_id'])

    op.create_table(
        'staff_members',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('user_id', _uuid(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('employment_type', _enum('employmenttype'), nullable=False),
        sa.Column('status', _enum('staffstatus'), nullable=False),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('hourly_rate', sa.Float(), nullable=True),
        sa.Column('performance_rating', sa.Float(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_staff_members_id', 'staff_members', ['id'])
    op.create_index('ix_staff_members_venue_id', 'staff_members', ['venue_id'])
    op.create_index('ix_staff_members_user_id', 'staff_members', ['user_id'])
    op.create_index('ix_staff_members_name', 'staff_members', ['name'])
    op.create_index('ix_staff_members_department', 'staff_members', ['department'])
    op.create_index('ix_staff_members_status', 'staff_members', ['status'])

    # 2. Recruitment
    op.create_table(
        'job_postings',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('department', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=False),
        sa.Column('employment_type', _enum('employmenttype'), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('number_of_positions', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('salary_min', sa.Float(), nullable=True),
        sa.Column('salary_max', sa.Float(), nullable=True),
        sa.Column('salary_type', _enum('salarytype'), nullable=True),
        sa.Column('requirements', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('responsibilities', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('benefits', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('skills', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('experience_level', _enum('experiencelevel'), nullable=False),
        sa.Column('remote', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('urgent', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('status', _enum('jobpostingstatus'), nullable=False),
        sa.Column('required_certifications', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('role_type', sa.String(), nullable=True),
        sa.Column('age_requirement', sa.Integer(), nullable=True),
        sa.Column('background_check_required', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('drug_test_required', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('applications_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('views_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', _uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_job_postings_id', 'job_postings', ['id'])
    op.create_index('ix_job_postings_venue_id', 'job_postings', ['venue_id'])
    op.create_index('ix_job_postings_title', 'job_postings', ['title'])
    op.create_index('ix_job_postings_department', 'job_postings', ['department'])
    op.create_index('ix_job_postings_status', 'job_postings', ['status'])

    op.create_table(
        'job_applications',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('job_posting_id', _uuid(), nullable=False),
        sa.Column('applicant_name', sa.String(), nullable=False),
        sa.Column('applicant_email', sa.String(), nullable=False),
        sa.Column('applicant_phone', sa.String(), nullable=True),
        sa.Column('status', _enum('applicationstatus'), nullable=False),
        sa.Column('form_responses', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('resume_url', sa.String(), nullable=True),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('reviewed_by', _uuid(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('screening_passed', sa.Boolean(), nullable=True),
        sa.Column('screening_issues', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('screening_recommendations', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('screened_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_posting_id'], ['job_postings.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_job_applications_id', 'job_applications', ['id'])
    op.create_index('ix_job_applications_venue_id', 'job_applications', ['venue_id'])
    op.create_index('ix_job_applications_job_posting_id', 'job_applications', ['job_posting_id'])
    op.create_index('ix_job_applications_applicant_email', 'job_applications', ['applicant_email'])
    op.create_index('ix_job_applications_status', 'job_applications', ['status'])
    op.create_index('ix_job_applications_applied_at', 'job_applications', ['applied_at'])

    # 3. Onboarding
    op.create_table(
        'onboarding_templates',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('department', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=False),
        sa.Column('employment_type', _enum('employmenttype'), nullable=False),
        sa.Column('role_category', _enum('rolecategory'), nullable=False),
        sa.Column('fields', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('estimated_days', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('required_documents', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('tags', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('use_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', _uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_onboarding_templates_id', 'onboarding_templates', ['id'])
    op.create_index('ix_onboarding_templates_venue_id', 'onboarding_templates', ['venue_id'])

    # 4. Scheduling
    op.create_table(
        'venue_shifts',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('event_id', _uuid(), nullable=True),
        sa.Column('shift_title', sa.String(), nullable=False),
        sa.Column('shift_description', sa.Text(), nullable=True),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('role_required', sa.String(), nullable=True),
        sa.Column('staff_needed', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('staff_assigned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('hourly_rate', sa.Float(), nullable=True),
        sa.Column('flat_rate', sa.Float(), nullable=True),
        sa.Column('shift_status', _enum('shiftstatus'), nullable=False),
        sa.Column('priority', _enum('shiftpriority'), nullable=False),
        sa.Column('dress_code', sa.String(), nullable=True),
        sa.Column('special_requirements', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', _uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_venue_shifts_id', 'venue_shifts', ['id'])
    op.create_index('ix_venue_shifts_venue_id', 'venue_shifts', ['venue_id'])
    op.create_index('ix_venue_shifts_shift_date', 'venue_shifts', ['shift_date'])
    op.create_index('ix_venue_shifts_department', 'venue_shifts', ['department'])
    op.create_index('ix_venue_shifts_shift_status', 'venue_shifts', ['shift_status'])

    op.create_table(
        'shift_assignments',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('shift_id', _uuid(), nullable=False),
        sa.Column('staff_member_id', _uuid(), nullable=False),
        sa.Column('assignment_status', _enum('assignmentstatus'), nullable=False),
        sa.Column('assigned_by', _uuid(), nullable=False),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('declined_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('decline_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['shift_id'], ['venue_shifts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['staff_member_id'], ['staff_members.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_shift_assignments_id', 'shift_assignments', ['id'])
    op.create_index('ix_shift_assignments_shift_id', 'shift_assignments', ['shift_id'])
    op.create_index('ix_shift_assignments_staff_member_id', 'shift_assignments', ['staff_member_id'])

    op.create_table(
        'shift_swaps',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('original_shift_id', _uuid(), nullable=False),
        sa.Column('original_staff_id', _uuid(), nullable=False),
        sa.Column('requested_staff_id', _uuid(), nullable=False),
        sa.Column('swap_reason', sa.Text(), nullable=True),
        sa.Column('request_status', _enum('requeststatus'), nullable=False),
        sa.Column('requested_by', _uuid(), nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('approved_by', _uuid(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('denied_by', _uuid(), nullable=True),
        sa.Column('denied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('denial_reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['original_shift_id'], ['venue_shifts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['original_staff_id'], ['staff_members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['requested_staff_id'], ['staff_members.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_shift_swaps_id', 'shift_swaps', ['id'])
    op.create_index('ix_shift_swaps_venue_id', 'shift_swaps', ['venue_id'])
    op.create_index('ix_shift_swaps_request_status', 'shift_swaps', ['request_status'])

    op.create_table(
        'shift_requests',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('shift_id', _uuid(), nullable=False),
        sa.Column('staff_member_id', _uuid(), nullable=False),
        sa.Column('request_type', _enum('requesttype'), nullable=False),
        sa.Column('request_reason', sa.Text(), nullable=True),
        sa.Column('request_status', _enum('requeststatus'), nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('approved_by', _uuid(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('denied_by', _uuid(), nullable=True),
        sa.Column('denied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('denial_reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['shift_id'], ['venue_shifts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['staff_member_id'], ['staff_members.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_shift_requests_id', 'shift_requests', ['id'])
    op.create_index('ix_shift_requests_venue_id', 'shift_requests', ['venue_id'])
    op.create_index('ix_shift_requests_request_status', 'shift_requests', ['request_status'])

    # 5. Access control
    op.create_table(
        'venue_permissions',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('permission_name', sa.String(), nullable=False),
        sa.Column('permission_description', sa.Text(), nullable=True),
        sa.Column('permission_category', _enum('permissioncategory'), nullable=False),
    )
    op.create_index('ix_venue_permissions_id', 'venue_permissions', ['id'])
    op.create_index('ix_venue_permissions_permission_name', 'venue_permissions', ['permission_name'], unique=True)

    op.create_table(
        'venue_roles',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('role_name', sa.String(), nullable=False),
        sa.Column('role_description', sa.Text(), nullable=True),
        sa.Column('role_level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_system_role', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_by', _uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('venue_id', 'role_name', name='uq_venue_role_name'),
    )
    op.create_index('ix_venue_roles_id', 'venue_roles', ['id'])
    op.create_index('ix_venue_roles_venue_id', 'venue_roles', ['venue_id'])

    op.create_table(
        'venue_role_permissions',
        sa.Column('role_id', _uuid(), primary_key=True, nullable=False),
        sa.Column('permission_id', _uuid(), primary_key=True, nullable=False),
        sa.Column('granted_by', _uuid(), nullable=True),
        sa.Column('granted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['role_id'], ['venue_roles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['permission_id'], ['venue_permissions.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'venue_user_roles',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('user_id', _uuid(), nullable=False),
        sa.Column('role_id', _uuid(), nullable=False),
        sa.Column('assigned_by', _uuid(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['venue_roles.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_venue_user_roles_id', 'venue_user_roles', ['id'])
    op.create_index('ix_venue_user_roles_venue_id', 'venue_user_roles', ['venue_id'])
    op.create_index('ix_venue_user_roles_user_id', 'venue_user_roles', ['user_id'])

    op.create_table(
        'venue_user_permission_overrides',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('user_id', _uuid(), nullable=False),
        sa.Column('permission_id', _uuid(), nullable=False),
        sa.Column('is_granted', sa.Boolean(), nullable=False),
        sa.Column('granted_by', _uuid(), nullable=True),
        sa.Column('granted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['permission_id'], ['venue_permissions.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('venue_id', 'user_id', 'permission_id', name='uq_venue_user_permission_override'),
    )
    op.create_index('ix_venue_user_permission_overrides_id', 'venue_user_permission_overrides', ['id'])
    op.create_index('ix_venue_user_permission_overrides_venue_id', 'venue_user_permission_overrides', ['venue_id'])
    op.create_index('ix_venue_user_permission_overrides_user_id', 'venue_user_permission_overrides', ['user_id'])

    op.create_table(
        'permission_audit_log',
        sa.Column('id', _uuid(), primary_key=True, nullable=False),
        sa.Column('venue_id', _uuid(), nullable=False),
        sa.Column('action_type', _enum('auditactiontype'), nullable=False),
        sa.Column('target_user_id', _uuid(), nullable=True),
        sa.Column('role_id', _uuid(), nullable=True),
        sa.Column('permission_id', _uuid(), nullable=True),
        sa.Column('performed_by', _uuid(), nullable=True),
        sa.Column('performed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('details', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.ForeignKeyConstraint(['venue_id'], ['venues.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_permission_audit_log_id', 'permission_audit_log', ['id'])
    op.create_index('ix_permission_audit_log_venue_id', 'permission_audit_log', ['venue_id'])
    op.create_index('ix_permission_audit_log_performed_at', 'permission_audit_log', ['performed_at'])


def downgrade() -> None:
    """Drop all venue operations tables and enum types."""
    for table in (
        'permission_audit_log',
        'venue_user_permission_overrides',
        'venue_user_roles',
        'venue_role_permissions',
        'venue_roles',
        'venue_permissions',
        'shift_requests',
        'shift_swaps',
        'shift_assignments',
        'venue_shifts',
        'onboarding_templates',
        'job_applications',
        'job_postings',
        'staff_members',
        'venues',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
