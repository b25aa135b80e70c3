"""
Enqueueing Celery tasks from request handlers.

Queueing must never fail the request that triggers it: a broker outage is
logged and reported as False, and the caller carries on.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Tuple
from celery import Task
from kombu import Connection
from app.core.config import settings

logger = logging.getLogger(__name__)

# Queueing runs off the event loop so uvicorn's loop never blocks on the broker
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="celery_queue")

QUEUE_TIMEOUT_SECONDS = 5

BROKER_RETRY_POLICY = {
    "max_retries": 3,
    "interval_start": 0,
    "interval_step": 0.2,
    "interval_max": 0.2,
}


def _send(task: Task, args: tuple, kwargs: dict) -> Tuple[bool, str, str]:
    """
    Publish one task over a fresh Kombu connection.

    Returns:
        (success, task_id, error_message)
    """
    try:
        # A fresh connection avoids stale pooled broker connections
        with Connection(settings.REDIS_URL) as conn:
            result = task.apply_async(
                args=args,
                kwargs=kwargs,
                connection=conn,
                retry=True,
                retry_policy=BROKER_RETRY_POLICY,
            )
            return (True, result.id, "")
    except Exception as e:
        return (False, "", str(e))


def queue_task_safely(task: Task, *args, **kwargs) -> bool:
    """
    Queue a Celery task without letting broker errors reach the caller.

    Args:
        task: The Celery task to queue
        *args: Positional arguments for the task
        **kwargs: Keyword arguments for the task

    Returns:
        bool: True if the task was queued, False otherwise

    Example:
        from app.tasks.application_tasks import screen_application_task
        queued = queue_task_safely(screen_application_task, str(application.id))
    """
    future = _executor.submit(_send, task, args, kwargs)
    try:
        success, task_id, error = future.result(timeout=QUEUE_TIMEOUT_SECONDS)
    except FutureTimeoutError:
        success, task_id, error = False, "", f"timed out after {QUEUE_TIMEOUT_SECONDS}s"

    if success:
        logger.info(f"Task {task.name} queued successfully: {task_id}")
        return True

    logger.error(f"Failed to queue task {task.name}: {error}")
    return False
