"""
API endpoints for shift scheduling.

Shifts, their staff assignments, calendar and analytics views, plus shift
swaps and drop/pickup requests. Scheduling rules live in
app.services.scheduling; these routes load venue-scoped rows, call the rule,
and translate its exceptions:

- SchedulingConflictError -> 409 (nothing was written)
- InvalidRequestStateError -> 409 (swap or request already decided)
"""

import logging
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user, require_permission
from app.core.security import CurrentUser
from app.crud import shift as shift_crud
from app.crud import staff as staff_crud
from app.models.shift import RequestStatus, ShiftPriority, ShiftStatus, VenueShift
from app.models.venue import Venue
from app.schemas.shift import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    AutoScheduleRequest,
    AutoScheduleResponse,
    CalendarDay,
    CalendarResponse,
    ConflictResponse,
    DenyRequest,
    ShiftAnalyticsResponse,
    ShiftClone,
    ShiftCreate,
    ShiftDetailResponse,
    ShiftRequestCreate,
    ShiftRequestResponse,
    ShiftResponse,
    ShiftUpdate,
    SwapCreate,
    SwapResponse,
)
from app.services import calendar, scheduling
from app.services.calendar import CalendarView, NavigationDirection
from app.services.listing import RecordQuery, apply_query, paginate
from app.services.permissions import PermissionName
from app.services.scheduling import InvalidRequestStateError, SchedulingConflictError

router = APIRouter(prefix="/venues/{venue_id}/shifts", tags=["Shifts"])
assignments_router = APIRouter(prefix="/venues/{venue_id}/shift-assignments", tags=["Shifts"])
swaps_router = APIRouter(prefix="/venues/{venue_id}/shift-swaps", tags=["Shift Swaps"])
requests_router = APIRouter(prefix="/venues/{venue_id}/shift-requests", tags=["Shift Requests"])
logger = logging.getLogger(__name__)

SHIFT_SEARCH_FIELDS = ("shift_title", "shift_description", "location", "department", "role_required")
SHIFT_SORT_FIELDS = {
    "shift_date", "shift_title", "department",
    "staff_needed", "staff_assigned", "hourly_rate", "created_at",
}


def _get_shift_or_404(db: Session, venue: Venue, shift_id: UUID) -> VenueShift:
    shift = shift_crud.get_by_id(db, venue.id, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


def _ensure_staff(db: Session, venue: Venue, staff_id: UUID):
    staff = staff_crud.get_by_id(db, venue.id, staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return staff


def _conflict(e: Exception) -> HTTPException:
    logger.info(f"Scheduling request rejected: {e}")
    return HTTPException(status_code=409, detail=str(e))


def _db_error(action: str, e: SQLAlchemyError) -> HTTPException:
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


@router.get("", response_model=List[ShiftResponse])
def list_shifts(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    status: Optional[List[ShiftStatus]] = Query(None),
    department: Optional[List[str]] = Query(None),
    priority: Optional[List[ShiftPriority]] = Query(None),
    sort_by: str = "shift_date",
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    """Shifts dated within [start_date, end_date] (either bound optional) with listing filters."""
    if sort_by not in SHIFT_SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort shifts by '{sort_by}'")
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    query = RecordQuery(
        search=search,
        search_fields=SHIFT_SEARCH_FIELDS,
        memberships={
            "shift_status": status or [],
            "department": department or [],
            "priority": priority or [],
        },
        sort_by=sort_by,
        sort_order=sort_order,
    )
    shifts = apply_query(shift_crud.get_in_range(db, venue.id, start_date, end_date), query)
    return paginate(shifts, skip, min(limit, settings.MAX_PAGE_SIZE))


@router.post("", status_code=201, response_model=ShiftResponse)
def create_shift(
    shift_data: ShiftCreate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_SCHEDULE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        shift = shift_crud.create(db, venue.id, shift_data, created_by=user.id)
    except SQLAlchemyError as e:
        raise _db_error("create shift", e)
    logger.info(f"Created shift {shift.id} on {shift.shift_date} at venue {venue.id}")
    return shift


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    anchor: Optional[date] = None,
    view: CalendarView = CalendarView.MONTH,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    """
    Shifts bucketed by day for a month (42-day grid), week or day view.

    previous_anchor and next_anchor are the anchors for the neighbouring
    pages of the same view.
    """
    today = date.today()
    anchor = anchor or today
    start, end = calendar.view_range(anchor, view)
    shifts = shift_crud.get_in_range(db, venue.id, start, end)
    buckets = calendar.build_buckets(anchor, view, shifts, date_field="shift_date", today=today)

    return CalendarResponse(
        view=view,
        anchor=anchor,
        start_date=start,
        end_date=end,
        previous_anchor=calendar.navigate(anchor, view, NavigationDirection.PREV),
        next_anchor=calendar.navigate(anchor, view, NavigationDirection.NEXT),
        days=[
            CalendarDay(
                date=bucket.date,
                is_today=bucket.is_today,
                is_current_month=bucket.is_current_month,
                shifts=[ShiftResponse.model_validate(s) for s in bucket.records],
            )
            for bucket in buckets
        ],
    )


@router.get("/analytics", response_model=ShiftAnalyticsResponse)
def get_shift_analytics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    venue: Venue = Depends(require_permission(PermissionName.ANALYTICS_VIEW_STAFF)),
    db: Session = Depends(get_db),
):
    """Hours, cost, attendance and completion over a date range (default: the last 30 days)."""
    end_date = end_date or date.today()
    start_date = start_date or end_date - timedelta(days=30)
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    shifts = shift_crud.get_in_range(db, venue.id, start_date, end_date)
    stats = scheduling.schedule_analytics(shifts)
    return ShiftAnalyticsResponse(start_date=start_date, end_date=end_date, **stats)


@router.post("/auto-schedule", response_model=AutoScheduleResponse)
def auto_schedule(
    request: AutoScheduleRequest,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_SCHEDULE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Fill the given open shifts from available, matching staff.

    Shifts are filled in the order given; each takes the best-rated free
    staff members up to its remaining headcount.
    """
    shifts = shift_crud.get_multi_by_ids(db, venue.id, request.shift_ids)
    if len(shifts) != len(set(request.shift_ids)):
        raise HTTPException(status_code=404, detail="One or more shifts not found")

    try:
        created = scheduling.auto_schedule(db, shifts, assigned_by=user.id)
    except SchedulingConflictError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("auto-schedule shifts", e)

    return AutoScheduleResponse(
        assignments_created=len(created),
        assignments=[AssignmentResponse.model_validate(a) for a in created],
    )


@router.get("/{shift_id}", response_model=ShiftDetailResponse)
def get_shift(
    shift_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    return _get_shift_or_404(db, venue, shift_id)


@router.patch("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: UUID,
    shift_data: ShiftUpdate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_SCHEDULE)),
    db: Session = Depends(get_db),
):
    shift = _get_shift_or_404(db, venue, shift_id)
    try:
        return shift_crud.update(db, shift, shift_data)
    except SchedulingConflictError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("update shift", e)


@router.delete("/{shift_id}", status_code=204)
def delete_shift(
    shift_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_SCHEDULE)),
    db: Session = Depends(get_db),
):
    try:
        deleted = shift_crud.delete(db, venue.id, shift_id)
    except SQLAlchemyError as e:
        raise _db_error("delete shift", e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Shift not found")
    return None


@router.post("/{shift_id}/clone", status_code=201, response_model=ShiftResponse)
def clone_shift(
    shift_id: UUID,
    clone: ShiftClone,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_SCHEDULE)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Copy the shift to another date, open and without assignments."""
    shift = _get_shift_or_404(db, venue, shift_id)
    try:
        return scheduling.clone_shift(db, shift, clone.new_date, created_by=user.id)
    except SQLAlchemyError as e:
        raise _db_error("clone shift", e)


@router.post("/{shift_id}/assignments", status_code=201, response_model=AssignmentResponse)
def assign_staff(
    shift_id: UUID,
    assignment: AssignmentCreate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Put a staff member on a shift.

    Raises:
        HTTPException 404: Shift or staff member not found at this venue
        HTTPException 409: Staff member is already on this shift or on an
            overlapping one
    """
    shift = _get_shift_or_404(db, venue, shift_id)
    staff = _ensure_staff(db, venue, assignment.staff_member_id)
    try:
        return scheduling.assign_staff(db, shift, staff, assigned_by=user.id, notes=assignment.notes)
    except SchedulingConflictError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("assign staff", e)


@router.get("/{shift_id}/conflicts", response_model=List[ConflictResponse])
def check_conflicts(
    shift_id: UUID,
    staff_member_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    """Conflicts that assigning this staff member would cause (empty when free)."""
    shift = _get_shift_or_404(db, venue, shift_id)
    _ensure_staff(db, venue, staff_member_id)
    return scheduling.find_conflicts(db, shift, staff_member_id)


@assignments_router.patch("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: UUID,
    update: AssignmentUpdate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    db: Session = Depends(get_db),
):
    """
    Confirm, decline or cancel an assignment. The shift's staff count follows.

    Raises:
        HTTPException 409: Re-activating an assignment that now overlaps
            another of the staff member's shifts
    """
    assignment = shift_crud.get_assignment(db, venue.id, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")
    try:
        return scheduling.update_assignment_status(
            db, assignment, update.assignment_status,
            decline_reason=update.decline_reason, notes=update.notes,
        )
    except SchedulingConflictError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("update assignment", e)


@assignments_router.delete("/{assignment_id}", status_code=204)
def remove_assignment(
    assignment_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    db: Session = Depends(get_db),
):
    assignment = shift_crud.get_assignment(db, venue.id, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")
    try:
        scheduling.remove_assignment(db, assignment)
    except SQLAlchemyError as e:
        raise _db_error("remove assignment", e)
    return None


@swaps_router.get("", response_model=List[SwapResponse])
def list_swaps(
    status: Optional[List[RequestStatus]] = Query(None),
    staff_member_id: Optional[UUID] = None,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    return shift_crud.get_swaps(db, venue.id, statuses=status, staff_member_id=staff_member_id)


@swaps_router.post("", status_code=201, response_model=SwapResponse)
def create_swap(
    swap_data: SwapCreate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ask to hand a shift from one staff member to another. Stays pending until a manager decides."""
    _get_shift_or_404(db, venue, swap_data.original_shift_id)
    _ensure_staff(db, venue, swap_data.original_staff_id)
    _ensure_staff(db, venue, swap_data.requested_staff_id)
    if swap_data.original_staff_id == swap_data.requested_staff_id:
        raise HTTPException(status_code=400, detail="Cannot swap a shift with the same staff member")
    try:
        return shift_crud.create_swap(db, venue.id, swap_data, requested_by=user.id)
    except SQLAlchemyError as e:
        raise _db_error("create shift swap", e)


@swaps_router.post("/{swap_id}/approve", response_model=SwapResponse)
def approve_swap(
    swap_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Move the shift from the original to the requested staff member."""
    swap = shift_crud.get_swap(db, venue.id, swap_id)
    if not swap:
        raise HTTPException(status_code=404, detail="Shift swap not found")
    try:
        return scheduling.approve_swap(db, swap, approved_by=user.id)
    except (SchedulingConflictError, InvalidRequestStateError) as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("approve shift swap", e)


@swaps_router.post("/{swap_id}/deny", response_model=SwapResponse)
def deny_swap(
    swap_id: UUID,
    denial: DenyRequest,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    swap = shift_crud.get_swap(db, venue.id, swap_id)
    if not swap:
        raise HTTPException(status_code=404, detail="Shift swap not found")
    try:
        return scheduling.deny_swap(db, swap, denied_by=user.id, denial_reason=denial.denial_reason)
    except InvalidRequestStateError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("deny shift swap", e)


@requests_router.get("", response_model=List[ShiftRequestResponse])
def list_requests(
    status: Optional[List[RequestStatus]] = Query(None),
    staff_member_id: Optional[UUID] = None,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    return shift_crud.get_requests(db, venue.id, statuses=status, staff_member_id=staff_member_id)


@requests_router.post("", status_code=201, response_model=ShiftRequestResponse)
def create_request(
    request_data: ShiftRequestCreate,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_VIEW)),
    db: Session = Depends(get_db),
):
    """Ask to drop an assigned shift or pick up an open one."""
    _get_shift_or_404(db, venue, request_data.shift_id)
    _ensure_staff(db, venue, request_data.staff_member_id)
    try:
        return shift_crud.create_request(db, venue.id, request_data)
    except SQLAlchemyError as e:
        raise _db_error("create shift request", e)


@requests_router.post("/{request_id}/approve", response_model=ShiftRequestResponse)
def approve_request(
    request_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shift_request = shift_crud.get_request(db, venue.id, request_id)
    if not shift_request:
        raise HTTPException(status_code=404, detail="Shift request not found")
    try:
        return scheduling.approve_request(db, shift_request, approved_by=user.id)
    except (SchedulingConflictError, InvalidRequestStateError) as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("approve shift request", e)


@requests_router.post("/{request_id}/deny", response_model=ShiftRequestResponse)
def deny_request(
    request_id: UUID,
    denial: DenyRequest,
    venue: Venue = Depends(require_permission(PermissionName.EVENTS_MANAGE_STAFF)),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shift_request = shift_crud.get_request(db, venue.id, request_id)
    if not shift_request:
        raise HTTPException(status_code=404, detail="Shift request not found")
    try:
        return scheduling.deny_request(db, shift_request, denied_by=user.id, denial_reason=denial.denial_reason)
    except InvalidRequestStateError as e:
        raise _conflict(e)
    except SQLAlchemyError as e:
        raise _db_error("deny shift request", e)
