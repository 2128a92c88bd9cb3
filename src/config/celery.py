"""
Celery application for the tortilla marketplace.

DJANGO_SETTINGS_MODULE is set before the app is created so Celery reads
the Django settings (``CELERY_`` prefix), including the beat schedule for
the outbox relay and the settlement reconciliation sweep.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("tortillas")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py from every installed module
app.autodiscover_tasks()
