"""Build metadata constants stamped by the release pipeline."""

from __future__ import annotations

import os
from typing import Final

from .models import BuildInfo

CURRENT_VERSION: Final[str] = "2.0.0"


def domain_load_build_info() -> BuildInfo:
    """Return build metadata, honouring values injected by the release pipeline.

    The release pipeline exports `CHATSERVER_BUILD_*` variables into the runtime
    image. Local checkouts fall back to development markers.

    Returns:
        BuildInfo: Immutable build metadata for client bootstrap.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return BuildInfo(
        version=CURRENT_VERSION,
        build_number=os.environ.get("CHATSERVER_BUILD_NUMBER", "dev"),
        build_date=os.environ.get("CHATSERVER_BUILD_DATE", "n/a"),
        build_hash=os.environ.get("CHATSERVER_BUILD_HASH", "n/a"),
        enterprise_ready=os.environ.get("CHATSERVER_BUILD_ENTERPRISE_READY", "false").strip().lower() == "true",
    )
