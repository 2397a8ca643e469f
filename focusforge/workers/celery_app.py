"""
Celery app for Focus Forge background work.

Two queues: ``email`` for Resend deliveries and ``maintenance`` for the
periodic invitation expiry sweep that beat schedules.
"""

from celery import Celery
from celery.signals import after_setup_logger

from focusforge.core.config import settings
from focusforge.core.logging import setup_logging

EMAIL_QUEUE = "email"
MAINTENANCE_QUEUE = "maintenance"

celery_app = Celery(
    "focusforge",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["focusforge.workers.email_tasks", "focusforge.workers.invitation_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
    # An email is only acknowledged once Resend has answered
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
    task_default_queue=EMAIL_QUEUE,
    task_queues={EMAIL_QUEUE: {}, MAINTENANCE_QUEUE: {}},
    task_routes={
        "focusforge.workers.email_tasks.*": {"queue": EMAIL_QUEUE},
        "focusforge.workers.invitation_tasks.*": {"queue": MAINTENANCE_QUEUE},
    },
    beat_schedule={
        "expire-stale-invitations": {
            "task": "focusforge.workers.invitation_tasks.expire_invitations",
            "schedule": float(settings.INVITATION_SWEEP_INTERVAL_SECONDS),
        },
    },
)


@after_setup_logger.connect
def _configure_worker_logging(**kwargs: object) -> None:
    setup_logging()
