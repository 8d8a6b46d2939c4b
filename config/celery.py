import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("tripnest")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Re-enqueue vendor capability grants that did not complete after approval
    "retry-pending-capability-grants": {
        "task": "vendors.retry_pending_capability_grants",
        "schedule": crontab(minute="*/5"),
        "options": {"expires": 240},
    },
}
