"""
Route package initialization.
"""
from .credentials import router as credentials_router
from .search import router as search_router

__all__ = ["credentials_router", "search_router"]
