"""
Background screening of new job applications.

Queued by the public application endpoint so the applicant's request never
waits on screening.
"""

from uuid import UUID
import logging

from app.core.celery_app import celery_app
from app.core.database import SessionLocal
from app.crud import application as application_crud
from app.models.job_application import JobApplication
from app.services.screening import screen_application

logger = logging.getLogger(__name__)


@celery_app.task(name="app.tasks.application_tasks.screen_application_task", bind=True)
def screen_application_task(self, application_id: str):
    """
    Run rule-based screening on one application and store the result.

    Args:
        application_id: UUID of the application, as a string (JSON-serializable)

    Returns:
        dict: application_id, passed and issue count
    """
    db = SessionLocal()
    try:
        logger.info(f"[Task {self.request.id}] Screening application {application_id}")

        application = db.query(JobApplication).filter(JobApplication.id == UUID(application_id)).first()
        if not application:
            raise ValueError(f"Application {application_id} not found")

        result = screen_application(application, application.job_posting)
        application_crud.save_screening(db, application, result)

        logger.info(
            f"[Task {self.request.id}] Application {application_id} screened: "
            f"passed={result.passed}, issues={len(result.issues)}"
        )
        return {
            "application_id": application_id,
            "passed": result.passed,
            "issues": len(result.issues),
        }

    except ValueError as e:
        logger.error(f"[Task {self.request.id}] {e}")
        return {"status": "error", "error": str(e)}

    except Exception as e:
        logger.error(f"[Task {self.request.id}] Unexpected error screening application {application_id}: {e}", exc_info=True)
        db.rollback()
        raise

    finally:
        db.close()
