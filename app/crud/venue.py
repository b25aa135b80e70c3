"""
CRUD operations for Venue model.

Creating a venue also seeds its access control (system roles, with the
creator holding Venue Owner) and the default onboarding templates, all in
one transaction.
"""

import logging
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.onboarding_template import OnboardingTemplate
from app.models.permission import VenueUserRole
from app.models.venue import Venue
from app.schemas.venue import VenueCreate, VenueUpdate
from app.services import onboarding_fields
from app.services import permissions as permission_service

logger = logging.getLogger(__name__)


def get_by_id(db: Session, venue_id: UUID) -> Optional[Venue]:
    return db.query(Venue).filter(Venue.id == venue_id).first()


def get_by_slug(db: Session, slug: str) -> Optional[Venue]:
    return db.query(Venue).filter(Venue.slug == slug).first()


def get_multi_by_ids(db: Session, venue_ids: Set[UUID]) -> List[Venue]:
    if not venue_ids:
        return []
    return db.query(Venue).filter(Venue.id.in_(venue_ids)).order_by(Venue.name).all()


def create(db: Session, venue_data: VenueCreate, owner_id: UUID) -> Venue:
    """
    Create a venue owned by owner_id.

    Args:
        db: Database session
        venue_data: Validated venue data
        owner_id: Auth user id of the creator

    Returns:
        Created Venue with roles and default templates in place
    """
    venue = Venue(owner_id=owner_id, **venue_data.model_dump())
    try:
        db.add(venue)
        db.flush()

        roles = permission_service.create_default_roles(db, venue, created_by=owner_id)
        db.add(VenueUserRole(
            venue_id=venue.id,
            user_id=owner_id,
            role_id=roles[permission_service.SystemRoleName.VENUE_OWNER.value].id,
            assigned_by=owner_id,
        ))

        for template in onboarding_fields.get_default_templates(venue.id):
            db.add(OnboardingTemplate(created_by=owner_id, **template))

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(venue)
    logger.info(f"Created venue {venue.id} ({venue.slug}) for owner {owner_id}")
    return venue


def update(db: Session, venue: Venue, venue_data: VenueUpdate) -> Venue:
    for field, value in venue_data.model_dump(exclude_unset=True).items():
        setattr(venue, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(venue)
    return venue
