"""
API Routers
===========
"""

from .readings import router as readings_router, get_database

__all__ = ["readings_router", "get_database"]
