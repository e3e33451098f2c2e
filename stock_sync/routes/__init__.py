"""
Route aggregation — exports the routers main.py mounts at root.
Version: 1.0.0
"""
from stock_sync.routes.health import router as health_router
from stock_sync.routes.sync import router as sync_router

__all__ = ["health_router", "sync_router"]
