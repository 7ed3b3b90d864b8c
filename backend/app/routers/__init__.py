# backend/app/routers/__init__.py
"""
API routers. All are mounted under /api in app/main.py.
"""

from app.routers.assets import router as assets_router
from app.routers.market_data import router as market_data_router
from app.routers.settings import router as settings_router
from app.routers.ynab import router as ynab_router

__all__ = [
    "assets_router",
    "market_data_router",
    "settings_router",
    "ynab_router",
]
