"""
Health check and monitoring endpoints.

Provides detailed health status for the database and the task broker.
"""

import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends, status
from kombu import Connection
from sqlalchemy.orm import Session
from sqlalchemy import text, func
from datetime import datetime

from app.core.config import settings
from app.core.database import get_db
from app.models.job_application import JobApplication, ApplicationStatus
from app.models.job_posting import JobPosting, JobPostingStatus
from app.models.shift import VenueShift
from app.models.staff import StaffMember
from app.models.venue import Venue

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    Use this for simple uptime monitoring and load balancer health checks.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Database connectivity
    - Task broker (Redis) reachability

    Returns 200 with the status of each component; the top-level status is
    "unhealthy" if any check failed.
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "checks": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }

    try:
        with Connection(settings.REDIS_URL, connect_timeout=2) as conn:
            conn.ensure_connection(max_retries=1)
        health_status["checks"]["broker"] = {
            "status": "healthy",
            "message": "Task broker reachable"
        }
    except Exception as e:
        logger.error(f"Broker health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["broker"] = {
            "status": "unhealthy",
            "message": f"Broker error: {str(e)}"
        }

    return health_status


@router.get("/metrics", status_code=status.HTTP_200_OK)
def get_metrics(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Application metrics endpoint.

    Returns basic operational counts across all venues.
    """
    try:
        return {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "metrics": {
                "total_venues": db.query(func.count(Venue.id)).scalar() or 0,
                "total_staff": db.query(func.count(StaffMember.id)).scalar() or 0,
                "published_job_postings": db.query(func.count(JobPosting.id)).filter(
                    JobPosting.status == JobPostingStatus.PUBLISHED
                ).scalar() or 0,
                "pending_applications": db.query(func.count(JobApplication.id)).filter(
                    JobApplication.status == ApplicationStatus.PENDING
                ).scalar() or 0,
                "total_shifts": db.query(func.count(VenueShift.id)).scalar() or 0,
            }
        }
    except Exception as e:
        logger.error(f"Failed to retrieve metrics: {e}")
        return {
            "error": "Failed to retrieve metrics",
            "message": str(e)
        }
