"""Domain models used across application layer boundaries."""

from .build_info import CURRENT_VERSION, domain_load_build_info
from .models import BuildInfo, ConnectivityStatus

__all__ = ["BuildInfo", "ConnectivityStatus", "CURRENT_VERSION", "domain_load_build_info"]
