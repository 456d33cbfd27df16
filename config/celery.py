import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("hotel_calendar")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cancel pending holds past their expiry - every minute
    "expire-pending-holds": {
        "task": "reservations.expire_pending_holds",
        "schedule": 60.0,
        "options": {"expires": 50},
    },
}
