"""Client configuration router serving the public bootstrap payload."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from chatserver.config import ConfigNotLoadedError
from chatserver.projection import projection_to_dict
from chatserver.service import ConfigurationService


def api_create_client_config_router(configuration_service: ConfigurationService) -> APIRouter:
    """Create router exposing the client projection.

    Args:
        configuration_service: Service owning the published projection.

    Returns:
        APIRouter: Router exposing `/api/v1/config/client`.

    Raises:
        ValueError: Raised when configuration_service is None.
    """

    if configuration_service is None:
        raise ValueError("configuration_service must not be None")

    router = APIRouter(prefix="/api/v1/config", tags=["config"])

    @router.get("/client")
    def api_client_config() -> JSONResponse:
        """Return the allow-listed client configuration.

        Returns:
            JSONResponse: Flat JSON object, or 503 before the first load.

        Raises:
            RuntimeError: Raised if the route handler cannot produce a response.
        """

        try:
            projection = configuration_service.config_client_projection()
        except ConfigNotLoadedError:
            payload = {"status": "error", "message": "configuration not loaded"}
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return JSONResponse(content=projection_to_dict(projection), status_code=status.HTTP_200_OK)

    return router
