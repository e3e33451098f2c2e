"""
Celery tasks package.
Version: 1.0.0
"""
from stock_sync.celery_app.tasks.sync_stock import sync_stock

__all__ = ["sync_stock"]
