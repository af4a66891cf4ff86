"""API router package for endpoint composition."""

from .client_config import api_create_client_config_router
from .health import api_create_health_router

__all__ = ["api_create_client_config_router", "api_create_health_router"]
