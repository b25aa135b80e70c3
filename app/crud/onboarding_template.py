"""
CRUD operations for OnboardingTemplate model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.onboarding_template import OnboardingTemplate
from app.schemas.onboarding import OnboardingTemplateCreate, OnboardingTemplateUpdate
from app.services import onboarding_fields


def get_by_id(db: Session, venue_id: UUID, template_id: UUID) -> Optional[OnboardingTemplate]:
    return (
        db.query(OnboardingTemplate)
        .filter(OnboardingTemplate.id == template_id, OnboardingTemplate.venue_id == venue_id)
        .first()
    )


def get_all(db: Session, venue_id: UUID) -> List[OnboardingTemplate]:
    """Default templates first, then most used."""
    return (
        db.query(OnboardingTemplate)
        .filter(OnboardingTemplate.venue_id == venue_id)
        .order_by(OnboardingTemplate.is_default.desc(), OnboardingTemplate.use_count.desc())
        .all()
    )


def _commit(db: Session, template: OnboardingTemplate) -> OnboardingTemplate:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(template)
    return template


def create(db: Session, venue_id: UUID, data: OnboardingTemplateCreate, created_by: UUID) -> OnboardingTemplate:
    """
    Create a template. Without explicit fields it starts from the catalog
    for its role category.
    """
    fields = data.fields if data.fields is not None else onboarding_fields.get_fields(data.role_category)
    template = OnboardingTemplate(
        venue_id=venue_id,
        created_by=created_by,
        fields=[f.model_dump(mode="json", exclude_none=True) for f in fields],
        **data.model_dump(exclude={"fields"}),
    )
    db.add(template)
    return _commit(db, template)


def create_defaults(db: Session, venue_id: UUID, created_by: UUID) -> List[OnboardingTemplate]:
    """Add the five starter templates (again) to a venue."""
    templates = [
        OnboardingTemplate(created_by=created_by, **data)
        for data in onboarding_fields.get_default_templates(venue_id)
    ]
    try:
        db.add_all(templates)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    for template in templates:
        db.refresh(template)
    return templates


def update(db: Session, template: OnboardingTemplate, data: OnboardingTemplateUpdate) -> OnboardingTemplate:
    """
    Update a template. A change to fields bumps the version.
    """
    changes = data.model_dump(exclude_unset=True, exclude={"fields"})
    for field, value in changes.items():
        setattr(template, field, value)

    if data.fields is not None:
        new_fields = [f.model_dump(mode="json", exclude_none=True) for f in data.fields]
        if new_fields != template.fields:
            template.fields = new_fields
            template.version = template.version + 1

    return _commit(db, template)


def mark_used(db: Session, template: OnboardingTemplate) -> OnboardingTemplate:
    template.use_count = OnboardingTemplate.use_count + 1
    return _commit(db, template)


def delete(db: Session, venue_id: UUID, template_id: UUID) -> bool:
    template = get_by_id(db, venue_id, template_id)
    if not template:
        return False
    try:
        db.delete(template)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True
