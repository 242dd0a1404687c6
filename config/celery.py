import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("car_rental")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cancel unpaid Pending rentals - every 5 minutes
    "cancel-stale-pending-rentals": {
        "task": "rentals.cancel_stale_pending_rentals",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
}
