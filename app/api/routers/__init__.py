"""API router package for endpoint composition."""

from .accounts import api_create_accounts_router
from .bulk_demo import api_create_bulk_demo_router
from .health import api_create_health_router

__all__ = ["api_create_accounts_router", "api_create_bulk_demo_router", "api_create_health_router"]
