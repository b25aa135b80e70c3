"""
Shift scheduling operations.

Assignment, conflict detection, swap and drop/pickup approval, auto-scheduling
and schedule analytics. Functions take already-loaded, venue-scoped model
instances; callers are responsible for the 404 when a lookup fails.

Writes commit on success and roll back on any database error, so a failed
operation leaves the stored schedule unchanged.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.shift import (
    ACTIVE_ASSIGNMENT_STATUSES,
    AssignmentStatus,
    RequestStatus,
    RequestType,
    ShiftAssignment,
    ShiftRequest,
    ShiftStatus,
    ShiftSwap,
    VenueShift,
)
from app.models.staff import StaffMember, StaffStatus

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


class SchedulingConflictError(Exception):
    """Staff member cannot take the shift (overlap or already assigned)."""

    def __init__(self, conflicts: List[Dict]):
        self.conflicts = conflicts
        details = ", ".join(c["conflict_details"] for c in conflicts)
        super().__init__(f"Scheduling conflicts detected: {details}")


class InvalidRequestStateError(Exception):
    """Swap or request is no longer pending."""
    pass


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def shift_window(shift: VenueShift) -> tuple:
    """
    (start, end) in minutes from midnight of shift_date.

    A shift whose end is not after its start runs past midnight.
    """
    start = _minutes(shift.start_time)
    end = _minutes(shift.end_time)
    if end <= start:
        end += MINUTES_PER_DAY
    return start, end


def shift_hours(shift: VenueShift) -> float:
    start, end = shift_window(shift)
    return (end - start) / 60.0


def shift_cost(shift: VenueShift) -> float:
    """Hourly rate times hours when set, otherwise the flat rate (or 0)."""
    if shift.hourly_rate:
        return shift_hours(shift) * shift.hourly_rate
    return shift.flat_rate or 0.0


def shift_interval(shift: VenueShift) -> Tuple[datetime, datetime]:
    """Absolute (start, end) of the shift; overnight shifts end on the next day."""
    start, end = shift_window(shift)
    midnight = datetime.combine(shift.shift_date, time())
    return midnight + timedelta(minutes=start), midnight + timedelta(minutes=end)


def shifts_overlap(a: VenueShift, b: VenueShift) -> bool:
    a_start, a_end = shift_interval(a)
    b_start, b_end = shift_interval(b)
    return a_start < b_end and a_end > b_start


def find_conflicts(
    db: Session,
    shift: VenueShift,
    staff_member_id: UUID,
    exclude_assignment_id: Optional[UUID] = None,
) -> List[Dict]:
    """
    Check whether a staff member can be put on a shift.

    Only live assignments on live shifts count: cancelled shifts and
    cancelled or declined assignments are ignored. Shifts dated the day
    before or after are checked too, since overnight shifts cross midnight.

    Args:
        exclude_assignment_id: Assignment being re-activated or re-checked,
            left out of the comparison

    Returns:
        List of conflict dicts (empty when the staff member is free)
    """
    query = (
        db.query(ShiftAssignment)
        .join(VenueShift, ShiftAssignment.shift_id == VenueShift.id)
        .filter(
            ShiftAssignment.staff_member_id == staff_member_id,
            ShiftAssignment.assignment_status.in_(ACTIVE_ASSIGNMENT_STATUSES),
            VenueShift.shift_status != ShiftStatus.CANCELLED,
            VenueShift.shift_date.between(
                shift.shift_date - timedelta(days=1), shift.shift_date + timedelta(days=1)
            ),
        )
    )
    if exclude_assignment_id is not None:
        query = query.filter(ShiftAssignment.id != exclude_assignment_id)
    existing = query.all()

    conflicts = []
    if any(a.shift_id == shift.id for a in existing):
        conflicts.append({
            "shift_id": shift.id,
            "staff_member_id": staff_member_id,
            "conflict_type": "duplicate",
            "conflict_details": "Staff member is already assigned to this shift",
            "suggested_resolution": "No action needed",
        })

    overlapping = [a for a in existing if a.shift_id != shift.id and shifts_overlap(a.shift, shift)]
    if overlapping:
        conflicts.append({
            "shift_id": shift.id,
            "staff_member_id": staff_member_id,
            "conflict_type": "overlap",
            "conflict_details": "Staff member has overlapping shifts",
            "suggested_resolution": "Reschedule one of the conflicting shifts",
            "conflicting_shift_ids": [a.shift_id for a in overlapping],
        })

    return conflicts


def refresh_staff_count(db: Session, shift: VenueShift) -> None:
    """
    Recount live assignments and flip open/filled to match.

    Shifts that are in progress, completed or cancelled keep their status.
    """
    db.flush()
    count = (
        db.query(ShiftAssignment)
        .filter(
            ShiftAssignment.shift_id == shift.id,
            ShiftAssignment.assignment_status.in_(ACTIVE_ASSIGNMENT_STATUSES),
        )
        .count()
    )
    shift.staff_assigned = count
    if shift.shift_status in (ShiftStatus.OPEN, ShiftStatus.FILLED):
        shift.shift_status = ShiftStatus.FILLED if count >= shift.staff_needed else ShiftStatus.OPEN


def check_staffed_shift(db: Session, shift: VenueShift) -> None:
    """
    Re-check every live assignment on a shift after its date or times change.

    Raises:
        SchedulingConflictError: The moved shift now overlaps another shift
            of one of its staff members
    """
    if shift.shift_status == ShiftStatus.CANCELLED:
        return
    live = (
        db.query(ShiftAssignment)
        .filter(
            ShiftAssignment.shift_id == shift.id,
            ShiftAssignment.assignment_status.in_(ACTIVE_ASSIGNMENT_STATUSES),
        )
        .all()
    )
    conflicts = []
    for assignment in live:
        conflicts.extend(
            find_conflicts(db, shift, assignment.staff_member_id, exclude_assignment_id=assignment.id)
        )
    if conflicts:
        raise SchedulingConflictError(conflicts)


def _add_assignment(
    db: Session,
    shift: VenueShift,
    staff_member_id: UUID,
    assigned_by: UUID,
    notes: Optional[str] = None,
) -> ShiftAssignment:
    conflicts = find_conflicts(db, shift, staff_member_id)
    if conflicts:
        raise SchedulingConflictError(conflicts)

    assignment = ShiftAssignment(
        shift_id=shift.id,
        staff_member_id=staff_member_id,
        assigned_by=assigned_by,
        assignment_status=AssignmentStatus.ASSIGNED,
        notes=notes,
    )
    db.add(assignment)
    refresh_staff_count(db, shift)
    return assignment


def assign_staff(
    db: Session,
    shift: VenueShift,
    staff_member: StaffMember,
    assigned_by: UUID,
    notes: Optional[str] = None,
) -> ShiftAssignment:
    """
    Assign a staff member to a shift.

    Raises:
        SchedulingConflictError: Overlapping shift or duplicate assignment;
            nothing is written
    """
    try:
        assignment = _add_assignment(db, shift, staff_member.id, assigned_by, notes)
        db.commit()
    except SchedulingConflictError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(assignment)
    logger.info(f"Assigned staff {staff_member.id} to shift {shift.id}")
    return assignment


def update_assignment_status(
    db: Session,
    assignment: ShiftAssignment,
    status: AssignmentStatus,
    decline_reason: Optional[str] = None,
    notes: Optional[str] = None,
) -> ShiftAssignment:
    """
    Change an assignment's status, stamping confirmed_at / declined_at.

    Raises:
        SchedulingConflictError: A declined or cancelled assignment is being
            made live again while the staff member is on an overlapping
            shift; nothing is written
    """
    reactivating = (
        status in ACTIVE_ASSIGNMENT_STATUSES
        and assignment.assignment_status not in ACTIVE_ASSIGNMENT_STATUSES
    )
    if reactivating:
        conflicts = find_conflicts(
            db, assignment.shift, assignment.staff_member_id, exclude_assignment_id=assignment.id
        )
        if conflicts:
            db.rollback()
            raise SchedulingConflictError(conflicts)

    now = datetime.now(timezone.utc)
    assignment.assignment_status = status
    if status == AssignmentStatus.CONFIRMED:
        assignment.confirmed_at = now
    elif status == AssignmentStatus.DECLINED:
        assignment.declined_at = now
        assignment.decline_reason = decline_reason
    if notes:
        assignment.notes = notes

    try:
        refresh_staff_count(db, assignment.shift)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(assignment)
    return assignment


def remove_assignment(db: Session, assignment: ShiftAssignment) -> None:
    shift = assignment.shift
    try:
        db.delete(assignment)
        refresh_staff_count(db, shift)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def clone_shift(db: Session, shift: VenueShift, new_date: date, created_by: UUID) -> VenueShift:
    """Copy a shift's definition to another date. Assignments are not copied."""
    clone = VenueShift(
        venue_id=shift.venue_id,
        event_id=shift.event_id,
        shift_title=shift.shift_title,
        shift_description=shift.shift_description,
        shift_date=new_date,
        start_time=shift.start_time,
        end_time=shift.end_time,
        location=shift.location,
        department=shift.department,
        role_required=shift.role_required,
        staff_needed=shift.staff_needed,
        staff_assigned=0,
        hourly_rate=shift.hourly_rate,
        flat_rate=shift.flat_rate,
        shift_status=ShiftStatus.OPEN,
        priority=shift.priority,
        dress_code=shift.dress_code,
        special_requirements=shift.special_requirements,
        notes=shift.notes,
        created_by=created_by,
    )
    try:
        db.add(clone)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(clone)
    return clone


def _ensure_pending(record, kind: str) -> None:
    if record.request_status != RequestStatus.PENDING:
        raise InvalidRequestStateError(
            f"{kind} is {record.request_status.value}; only pending {kind.lower()}s can be changed"
        )


def _live_assignment(db: Session, shift_id: UUID, staff_member_id: UUID) -> Optional[ShiftAssignment]:
    return (
        db.query(ShiftAssignment)
        .filter(
            ShiftAssignment.shift_id == shift_id,
            ShiftAssignment.staff_member_id == staff_member_id,
            ShiftAssignment.assignment_status.in_(ACTIVE_ASSIGNMENT_STATUSES),
        )
        .first()
    )


def approve_swap(db: Session, swap: ShiftSwap, approved_by: UUID) -> ShiftSwap:
    """
    Approve a swap: cancel the original staff member's assignment on the
    shift and assign the requested staff member, in one transaction.

    Raises:
        InvalidRequestStateError: Swap is not pending
        SchedulingConflictError: Requested staff member is not free
    """
    _ensure_pending(swap, "Swap")
    shift = swap.original_shift

    try:
        original = _live_assignment(db, shift.id, swap.original_staff_id)
        if original is not None:
            original.assignment_status = AssignmentStatus.CANCELLED
            original.notes = "Cancelled due to shift swap"
        db.flush()

        _add_assignment(db, shift, swap.requested_staff_id, approved_by)

        swap.request_status = RequestStatus.APPROVED
        swap.approved_by = approved_by
        swap.approved_at = datetime.now(timezone.utc)
        db.commit()
    except (SchedulingConflictError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(swap)
    logger.info(f"Approved shift swap {swap.id}")
    return swap


def deny_swap(db: Session, swap: ShiftSwap, denied_by: UUID, denial_reason: Optional[str] = None) -> ShiftSwap:
    _ensure_pending(swap, "Swap")
    swap.request_status = RequestStatus.DENIED
    swap.denied_by = denied_by
    swap.denied_at = datetime.now(timezone.utc)
    swap.denial_reason = denial_reason
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(swap)
    return swap


def approve_request(db: Session, request: ShiftRequest, approved_by: UUID) -> ShiftRequest:
    """
    Approve a drop (remove the staff member's assignment) or a pickup
    (assign the staff member).

    Raises:
        InvalidRequestStateError: Request is not pending
        SchedulingConflictError: Pickup conflicts with the staff member's schedule
    """
    _ensure_pending(request, "Request")
    shift = request.shift

    try:
        if request.request_type == RequestType.DROP:
            assignment = _live_assignment(db, shift.id, request.staff_member_id)
            if assignment is not None:
                db.delete(assignment)
            refresh_staff_count(db, shift)
        else:
            _add_assignment(db, shift, request.staff_member_id, approved_by)

        request.request_status = RequestStatus.APPROVED
        request.approved_by = approved_by
        request.approved_at = datetime.now(timezone.utc)
        db.commit()
    except (SchedulingConflictError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(request)
    logger.info(f"Approved shift {request.request_type.value} request {request.id}")
    return request


def deny_request(
    db: Session, request: ShiftRequest, denied_by: UUID, denial_reason: Optional[str] = None
) -> ShiftRequest:
    _ensure_pending(request, "Request")
    request.request_status = RequestStatus.DENIED
    request.denied_by = denied_by
    request.denied_at = datetime.now(timezone.utc)
    request.denial_reason = denial_reason
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(request)
    return request


def available_staff_for_shift(db: Session, shift: VenueShift) -> List[StaffMember]:
    """
    Active, available staff who match the shift's department and role and
    have no conflict, best performance rating first.
    """
    query = db.query(StaffMember).filter(
        StaffMember.venue_id == shift.venue_id,
        StaffMember.status == StaffStatus.ACTIVE,
        StaffMember.is_available.is_(True),
    )
    if shift.department:
        query = query.filter(StaffMember.department == shift.department)
    if shift.role_required:
        query = query.filter(StaffMember.role == shift.role_required)

    candidates = [s for s in query.order_by(StaffMember.created_at).all() if not find_conflicts(db, shift, s.id)]
    return sorted(candidates, key=lambda s: s.performance_rating or 0, reverse=True)


def auto_schedule(db: Session, shifts: Sequence[VenueShift], assigned_by: UUID) -> List[ShiftAssignment]:
    """
    Fill open shifts greedily from available staff.

    Shifts that are not open are skipped. Each shift takes up to
    staff_needed - staff_assigned people. Not an optimizer: earlier shifts
    in the list get first pick.
    """
    created: List[ShiftAssignment] = []
    try:
        for shift in shifts:
            if shift.shift_status != ShiftStatus.OPEN:
                continue
            needed = shift.staff_needed - shift.staff_assigned
            if needed <= 0:
                continue
            for staff in available_staff_for_shift(db, shift)[:needed]:
                created.append(_add_assignment(db, shift, staff.id, assigned_by))
                # flush so the next shift's conflict check sees this assignment
                db.flush()
        db.commit()
    except (SchedulingConflictError, SQLAlchemyError):
        db.rollback()
        raise

    for assignment in created:
        db.refresh(assignment)
    logger.info(f"Auto-scheduled {len(created)} assignments across {len(shifts)} shifts")
    return created


def schedule_analytics(shifts: Sequence[VenueShift]) -> Dict:
    """
    Totals over a set of shifts.

    average_attendance is the mean of staff_assigned; completion_rate is the
    percentage of shifts marked completed.
    """
    total = len(shifts)
    total_hours = 0.0
    total_cost = 0.0
    completed = 0
    assigned_sum = 0
    department_stats = defaultdict(lambda: {"shifts": 0, "hours": 0.0, "cost": 0.0})
    status_counts: Dict[str, int] = defaultdict(int)

    for shift in shifts:
        hours = shift_hours(shift)
        cost = shift_cost(shift)
        total_hours += hours
        total_cost += cost
        assigned_sum += shift.staff_assigned or 0
        status_counts[shift.shift_status.value] += 1
        if shift.shift_status == ShiftStatus.COMPLETED:
            completed += 1
        if shift.department:
            stats = department_stats[shift.department]
            stats["shifts"] += 1
            stats["hours"] += hours
            stats["cost"] += cost

    return {
        "total_shifts": total,
        "total_hours": round(total_hours, 2),
        "total_cost": round(total_cost, 2),
        "average_attendance": assigned_sum / total if total else 0.0,
        "completion_rate": (completed / total) * 100 if total else 0.0,
        "status_counts": dict(status_counts),
        "department_stats": {k: dict(v) for k, v in department_stats.items()},
    }
