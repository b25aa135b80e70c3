"""
Celery tasks package.

Tasks are organized by domain:
- application_tasks: Rule-based screening of new job applications
"""

from app.tasks import application_tasks

__all__ = ["application_tasks"]
