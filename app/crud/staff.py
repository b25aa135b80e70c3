"""
CRUD operations for StaffMember model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.staff import StaffMember
from app.schemas.staff import StaffMemberCreate, StaffMemberUpdate


def get_by_id(db: Session, venue_id: UUID, staff_id: UUID) -> Optional[StaffMember]:
    """
    Retrieve a staff member, scoped to a venue.

    Returns:
        StaffMember if found at this venue, None otherwise
    """
    return (
        db.query(StaffMember)
        .filter(StaffMember.id == staff_id, StaffMember.venue_id == venue_id)
        .first()
    )


def get_all(db: Session, venue_id: UUID) -> List[StaffMember]:
    return (
        db.query(StaffMember)
        .filter(StaffMember.venue_id == venue_id)
        .order_by(StaffMember.created_at)
        .all()
    )


def create(db: Session, venue_id: UUID, staff_data: StaffMemberCreate) -> StaffMember:
    staff = StaffMember(venue_id=venue_id, **staff_data.model_dump())
    try:
        db.add(staff)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(staff)
    return staff


def update(db: Session, staff: StaffMember, staff_data: StaffMemberUpdate) -> StaffMember:
    for field, value in staff_data.model_dump(exclude_unset=True).items():
        setattr(staff, field, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(staff)
    return staff


def delete(db: Session, venue_id: UUID, staff_id: UUID) -> bool:
    """
    Delete a staff member and their shift assignments.

    Returns:
        True if deleted, False if not found
    """
    staff = get_by_id(db, venue_id, staff_id)
    if not staff:
        return False
    try:
        db.delete(staff)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True
