from celery import Celery

from shopease.config import get_settings

settings = get_settings()

# Celery application for post-commit inventory work
celery_app = Celery(
    "shopease",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["shopease.tasks.inventory_tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Stock checks are read-only and cheap; nobody waits on their results
    task_ignore_result=True,
    task_time_limit=60,
    task_soft_time_limit=45,
    task_routes={"shopease.tasks.inventory_tasks.*": {"queue": "inventory"}},

    worker_prefetch_multiplier=1,

    # Redelivered on worker loss; the task itself is idempotent
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    broker_connection_retry_on_startup=True,
)
