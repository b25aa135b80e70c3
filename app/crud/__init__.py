"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. Every lookup is scoped by venue_id.
"""

from app.crud import venue, staff, job_posting, application, onboarding_template, shift, role

__all__ = ["venue", "staff", "job_posting", "application", "onboarding_template", "shift", "role"]
