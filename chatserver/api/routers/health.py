"""Health endpoint router composition for dependency smoke-tests."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from chatserver.activation import ConnectivityChecker
from chatserver.config import ConfigNotLoadedError
from chatserver.service import ConfigurationService


def api_create_health_router(
    configuration_service: ConfigurationService,
    connectivity_checker: ConnectivityChecker,
) -> APIRouter:
    """Create health-check router with dependency connectivity status.

    Args:
        configuration_service: Service owning the published configuration.
        connectivity_checker: Smoke-test runner.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if configuration_service is None:
        raise ValueError("configuration_service must not be None")
    if connectivity_checker is None:
        raise ValueError("connectivity_checker must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application, configuration and dependency health state.

        Returns:
            JSONResponse: 200 when every check passed, 503 otherwise.

        Raises:
            RuntimeError: Raised if the route handler cannot produce a response.
        """

        try:
            configuration = configuration_service.config_current()
        except ConfigNotLoadedError as error:
            payload = {"status": "degraded", "app": "up", "config": "missing", "detail": str(error), "checks": []}
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        checks = connectivity_checker.activation_test_connections(configuration)
        all_ok = all(check.is_ok for check in checks)
        payload = {
            "status": "ok" if all_ok else "degraded",
            "app": "up",
            "config": "loaded",
            "checks": [
                {
                    "target": check.target,
                    "status": check.status,
                    "detail": check.detail,
                    "label": check.label,
                }
                for check in checks
            ],
        }
        status_code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=payload, status_code=status_code)

    return router
