import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import require_permission
from app.crud import staff as staff_crud
from app.models.staff import EmploymentType, StaffStatus
from app.models.venue import Venue
from app.schemas.staff import StaffMemberCreate, StaffMemberUpdate, StaffMemberResponse
from app.services.listing import RecordQuery, apply_query, paginate
from app.services.permissions import PermissionName

router = APIRouter(prefix="/venues/{venue_id}/staff", tags=["Staff"])
logger = logging.getLogger(__name__)

STAFF_SEARCH_FIELDS = ("name", "email", "phone", "role", "department")
STAFF_SORT_FIELDS = {"name", "role", "department", "hire_date", "hourly_rate", "performance_rating", "created_at"}


@router.get("", response_model=List[StaffMemberResponse])
def list_staff(
    search: Optional[str] = None,
    department: Optional[List[str]] = Query(None),
    status: Optional[List[StaffStatus]] = Query(None),
    employment_type: Optional[List[EmploymentType]] = Query(None),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    max_rating: Optional[float] = Query(None, ge=0, le=5),
    sort_by: str = "name",
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    """
    List the venue's staff.

    Search matches name, email, phone, role and department. Rating bounds are
    inclusive; staff without a rating are left out when either bound is set.
    """
    if sort_by not in STAFF_SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort staff by '{sort_by}'")

    query = RecordQuery(
        search=search,
        search_fields=STAFF_SEARCH_FIELDS,
        memberships={
            "department": department or [],
            "status": status or [],
            "employment_type": employment_type or [],
        },
        numeric_ranges={"performance_rating": (min_rating, max_rating)},
        sort_by=sort_by,
        sort_order=sort_order,
    )
    staff = apply_query(staff_crud.get_all(db, venue.id), query)
    return paginate(staff, skip, min(limit, settings.MAX_PAGE_SIZE))


@router.post("", status_code=201, response_model=StaffMemberResponse)
def create_staff(
    staff_data: StaffMemberCreate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_CREATE)),
    db: Session = Depends(get_db),
):
    try:
        staff = staff_crud.create(db, venue.id, staff_data)
    except SQLAlchemyError as e:
        logger.error(f"Error creating staff member at venue {venue.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create staff member")
    logger.info(f"Created staff member {staff.id} at venue {venue.id}")
    return staff


@router.get("/{staff_id}", response_model=StaffMemberResponse)
def get_staff(
    staff_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_VIEW)),
    db: Session = Depends(get_db),
):
    staff = staff_crud.get_by_id(db, venue.id, staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return staff


@router.patch("/{staff_id}", response_model=StaffMemberResponse)
def update_staff(
    staff_id: UUID,
    staff_data: StaffMemberUpdate,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_EDIT)),
    db: Session = Depends(get_db),
):
    staff = staff_crud.get_by_id(db, venue.id, staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found")
    try:
        return staff_crud.update(db, staff, staff_data)
    except SQLAlchemyError as e:
        logger.error(f"Error updating staff member {staff_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update staff member")


@router.delete("/{staff_id}", status_code=204)
def delete_staff(
    staff_id: UUID,
    venue: Venue = Depends(require_permission(PermissionName.STAFF_DELETE)),
    db: Session = Depends(get_db),
):
    """Delete a staff member along with their shift assignments."""
    try:
        deleted = staff_crud.delete(db, venue.id, staff_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting staff member {staff_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete staff member")
    if not deleted:
        raise HTTPException(status_code=404, detail="Staff member not found")
    logger.info(f"Deleted staff member {staff_id} from venue {venue.id}")
    return None
