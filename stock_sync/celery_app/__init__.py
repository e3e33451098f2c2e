"""
Celery application package.
Exports the main Celery app instance.
Version: 1.0.0
"""
from stock_sync.celery_app.celery_config import celery_app

__all__ = ["celery_app"]
