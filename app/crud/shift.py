"""
CRUD operations for shifts, assignments, swaps and drop/pickup requests.

Scheduling rules (conflicts, approvals, staff counts) live in
app.services.scheduling; this module only loads and stores rows.
"""

from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.shift import (
    RequestStatus, ShiftAssignment, ShiftRequest, ShiftSwap, VenueShift
)
from app.schemas.shift import ShiftCreate, ShiftUpdate, SwapCreate, ShiftRequestCreate
from app.services import scheduling

RESCHEDULE_FIELDS = {"shift_date", "start_time", "end_time", "shift_status"}


def get_by_id(db: Session, venue_id: UUID, shift_id: UUID) -> Optional[VenueShift]:
    return (
        db.query(VenueShift)
        .filter(VenueShift.id == shift_id, VenueShift.venue_id == venue_id)
        .first()
    )


def get_multi_by_ids(db: Session, venue_id: UUID, shift_ids: Sequence[UUID]) -> List[VenueShift]:
    """Shifts of this venue among shift_ids, in the order the ids were given."""
    rows = (
        db.query(VenueShift)
        .filter(VenueShift.venue_id == venue_id, VenueShift.id.in_(set(shift_ids)))
        .all()
    )
    by_id = {s.id: s for s in rows}
    return [by_id[i] for i in shift_ids if i in by_id]


def get_in_range(
    db: Session,
    venue_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[VenueShift]:
    """Shifts dated within [start_date, end_date], ordered by date then start time."""
    query = db.query(VenueShift).filter(VenueShift.venue_id == venue_id)
    if start_date is not None:
        query = query.filter(VenueShift.shift_date >= start_date)
    if end_date is not None:
        query = query.filter(VenueShift.shift_date <= end_date)
    return query.order_by(VenueShift.shift_date, VenueShift.start_time).all()


def create(db: Session, venue_id: UUID, shift_data: ShiftCreate, created_by: UUID) -> VenueShift:
    shift = VenueShift(venue_id=venue_id, created_by=created_by, **shift_data.model_dump())
    try:
        db.add(shift)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(shift)
    return shift


def update(db: Session, shift: VenueShift, shift_data: ShiftUpdate) -> VenueShift:
    """
    Apply a partial update. Moving a staffed shift re-checks its assignments
    and raises scheduling.SchedulingConflictError (rolled back) on overlap.
    """
    changes = shift_data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(shift, field, value)
    try:
        if RESCHEDULE_FIELDS & changes.keys():
            scheduling.check_staffed_shift(db, shift)
        if "staff_needed" in changes:
            scheduling.refresh_staff_count(db, shift)
        db.commit()
    except (scheduling.SchedulingConflictError, SQLAlchemyError):
        db.rollback()
        raise
    db.refresh(shift)
    return shift


def delete(db: Session, venue_id: UUID, shift_id: UUID) -> bool:
    shift = get_by_id(db, venue_id, shift_id)
    if not shift:
        return False
    try:
        db.delete(shift)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True


def get_assignment(db: Session, venue_id: UUID, assignment_id: UUID) -> Optional[ShiftAssignment]:
    """Assignment by id, only if its shift belongs to the venue."""
    return (
        db.query(ShiftAssignment)
        .join(VenueShift, ShiftAssignment.shift_id == VenueShift.id)
        .filter(ShiftAssignment.id == assignment_id, VenueShift.venue_id == venue_id)
        .first()
    )


def get_swap(db: Session, venue_id: UUID, swap_id: UUID) -> Optional[ShiftSwap]:
    return db.query(ShiftSwap).filter(ShiftSwap.id == swap_id, ShiftSwap.venue_id == venue_id).first()


def get_swaps(
    db: Session, venue_id: UUID, statuses: Optional[Sequence[RequestStatus]] = None,
    staff_member_id: Optional[UUID] = None,
) -> List[ShiftSwap]:
    query = db.query(ShiftSwap).filter(ShiftSwap.venue_id == venue_id)
    if statuses:
        query = query.filter(ShiftSwap.request_status.in_(statuses))
    if staff_member_id:
        query = query.filter(
            (ShiftSwap.original_staff_id == staff_member_id) | (ShiftSwap.requested_staff_id == staff_member_id)
        )
    return query.order_by(ShiftSwap.requested_at.desc()).all()


def create_swap(db: Session, venue_id: UUID, data: SwapCreate, requested_by: UUID) -> ShiftSwap:
    swap = ShiftSwap(venue_id=venue_id, requested_by=requested_by, **data.model_dump())
    try:
        db.add(swap)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(swap)
    return swap


def get_request(db: Session, venue_id: UUID, request_id: UUID) -> Optional[ShiftRequest]:
    return (
        db.query(ShiftRequest)
        .filter(ShiftRequest.id == request_id, ShiftRequest.venue_id == venue_id)
        .first()
    )


def get_requests(
    db: Session, venue_id: UUID, statuses: Optional[Sequence[RequestStatus]] = None,
    staff_member_id: Optional[UUID] = None,
) -> List[ShiftRequest]:
    query = db.query(ShiftRequest).filter(ShiftRequest.venue_id == venue_id)
    if statuses:
        query = query.filter(ShiftRequest.request_status.in_(statuses))
    if staff_member_id:
        query = query.filter(ShiftRequest.staff_member_id == staff_member_id)
    return query.order_by(ShiftRequest.requested_at.desc()).all()


def create_request(db: Session, venue_id: UUID, data: ShiftRequestCreate) -> ShiftRequest:
    request = ShiftRequest(venue_id=venue_id, **data.model_dump())
    try:
        db.add(request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(request)
    return request
