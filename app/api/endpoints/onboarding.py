"""
API endpoints for onboarding templates and the onboarding field catalog.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user, require_permission
from app.core.security import CurrentUser
from app.crud import onboarding_template as template_crud
from app.models.onboarding_template import RoleCategory
from app.models.venue import Venue
from app.schemas.onboarding import (
    OnboardingField,
    OnboardingTemplateCreate,
    OnboardingTemplateResponse,
    OnboardingTemplateUpdate,
    ResponseValidationRequest,
    ResponseValidationResult,
)
from app.services import onboarding_fields
from app.services.listing import RecordQuery, filter_records
from app.services.permissions import PermissionName

router = APIRouter(prefix="/venues/{venue_id}/onboarding-templates", tags=["Onboarding"])
catalog_router = APIRouter(prefix="/onboarding", tags=["Onboarding"])
logger = logging.getLogger(__name__)


@catalog_router.get("/field-catalog/{role_category}", response_model=List[OnboardingField])
def get_field_catalog(
    role_category: RoleCategory,
    user: CurrentUser = Depends(get_current_user),
):
    """General fields, plus the role's extra fields for non-general categories."""
    return onboarding_fields.get_fields(role_category)


@router.get("", response_model=List[OnboardingTemplateResponse])
def list_templates(
    search: Optional[str] = None,
    role_category: Optional[List[RoleCategory]] = Query(None),
    tag: Optional[List[str]] = Query(None),
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    """Default templates first, then most used."""
    query = RecordQuery(
        search=search,
        search_fields=("name", "description", "department", "position"),
        memberships={"role_category": role_category or []},
        tags=tag or (),
    )
    return filter_records(template_crud.get_all(db, venue.id), query)


@router.post("", status_code=201, response_model=OnboardingTemplateResponse)
def create_template(
    template_data: OnboardingTemplateCreate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a template; without fields it starts from its role category's catalog."""
    try:
        template = template_crud.create(db, venue.id, template_data, created_by=user.id)
    except SQLAlchemyError as e:
        logger.error(f"Error creating onboarding template at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create onboarding template")
    logger.info(f"Created onboarding template {template.id} ({len(template.fields)} fields)")
    return template


@router.post("/defaults", status_code=201, response_model=List[OnboardingTemplateResponse])
def create_default_templates(
    venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add the five starter templates (general, security, bar, technical, management)."""
    try:
        return template_crud.create_defaults(db, venue.id, created_by=user.id)
    except SQLAlchemyError as e:
        logger.error(f"Error creating default templates at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create default templates")


@router.get("/{template_id}", response_model=OnboardingTemplateResponse)
def get_template(
    template_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    template = template_crud.get_by_id(db, venue.id, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Onboarding template not found")
    return template


@router.patch("/{template_id}", response_model=OnboardingTemplateResponse)
def update_template(
    template_id: UUID,
    template_data: OnboardingTemplateUpdate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    db: Session = Depends(get_db),
):
    """Update a template. Changing its fields bumps the version."""
    template = template_crud.get_by_id(db, venue.id, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Onboarding template not found")
    try:
        return template_crud.update(db, template, template_data)
    except SQLAlchemyError as e:
        logger.error(f"Error updating onboarding template {template_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update onboarding template")


@router.delete("/{template_id}", status_code=204)
def delete_template(
    template_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    db: Session = Depends(get_db),
):
    try:
        deleted = template_crud.delete(db, venue.id, template_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting onboarding template {template_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete onboarding template")
    if not deleted:
        raise HTTPException(status_code=404, detail="Onboarding template not found")
    return None


@router.post("/{template_id}/use", response_model=OnboardingTemplateResponse)
def use_template(
    template_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE)),
    db: Session = Depends(get_db),
):
    """Record that the template was used to start an onboarding."""
    template = template_crud.get_by_id(db, venue.id, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Onboarding template not found")
    try:
        return template_crud.mark_used(db, template)
    except SQLAlchemyError as e:
        logger.error(f"Error recording use of onboarding template {template_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to record template use")


@router.post("/{template_id}/validate", response_model=ResponseValidationResult)
def validate_template_responses(
    template_id: UUID,
    payload: ResponseValidationRequest,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    """
    Check a filled-in onboarding form against the template's fields.

    Returns 200 either way; errors maps field id to a message.
    """
    template = template_crud.get_by_id(db, venue.id, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Onboarding template not found")

    fields = [OnboardingField.model_validate(f) for f in template.fields or []]
    errors = onboarding_fields.validate_responses(fields, payload.responses)
    return ResponseValidationResult(valid=not errors, errors=errors)
