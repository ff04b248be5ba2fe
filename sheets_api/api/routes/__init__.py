"""
API Routes
==========

Route modules for the sheets API.
"""

from sheets_api.api.routes.cache import router as cache_router
from sheets_api.api.routes.data import router as data_router
from sheets_api.api.routes.sheets import router as sheets_router

__all__ = ["cache_router", "data_router", "sheets_router"]
