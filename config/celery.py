"""
Celery configuration for the retail POS platform.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("retail_pos")

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Sweep active products for low stock every morning at 7:00 AM
    "daily-low-stock-sweep": {
        "task": "apps.notifications.tasks.check_low_stock_products",
        "schedule": crontab(hour=7, minute=0),
        "options": {"queue": "notifications", "priority": 6},
    },
    # Remove read notifications older than 30 days every Sunday at 3:00 AM
    "cleanup-read-notifications": {
        "task": "apps.notifications.tasks.cleanup_read_notifications",
        "schedule": crontab(hour=3, minute=0, day_of_week=0),
        "options": {"queue": "notifications", "priority": 2},
    },
}

# Task routing configuration
app.conf.task_routes = {
    "apps.notifications.tasks.*": {"queue": "notifications", "priority": 5},
}
