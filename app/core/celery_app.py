"""
Celery application configuration.

Redis is both broker and result backend. Application screening runs on its
own queue so a worker can be pinned to it:

    celery -A app.core.celery_app worker -Q screening --loglevel=info
"""

from celery import Celery
from kombu import Queue
from app.core.config import settings

SCREENING_QUEUE = "screening"

celery_app = Celery(
    "venue_ops_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.application_tasks"],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    timezone="UTC",
    enable_utc=True,

    # Screening is a handful of queries; anything longer is stuck
    task_track_started=True,
    task_time_limit=60,
    task_soft_time_limit=45,
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    task_queues=(Queue(SCREENING_QUEUE),),
    task_default_queue=SCREENING_QUEUE,
    task_routes={
        "app.tasks.application_tasks.*": {"queue": SCREENING_QUEUE},
    },

    # Only the screening summary is kept
    result_expires=86400,

    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=500,
)
