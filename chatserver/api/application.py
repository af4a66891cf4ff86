"""FastAPI application factory for the chat server configuration surface."""

from fastapi import FastAPI

from chatserver.activation import ConnectivityChecker
from chatserver.config import AppSettings
from chatserver.service import ConfigurationService

from .routers import api_create_client_config_router, api_create_health_router


def create_api_application(
    settings: AppSettings,
    configuration_service: ConfigurationService,
    connectivity_checker: ConnectivityChecker,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated process settings used for runtime metadata.
        configuration_service: Service owning the published configuration.
        connectivity_checker: Smoke-test runner used by the health endpoint.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """
    application = FastAPI(title="Chat Server")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification.

        Returns:
            dict[str, str]: Minimal response for API framework verification.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "chatserver",
            "status": "foundation-ready",
            "environment": settings.environment_name,
        }

    application.include_router(
        api_create_health_router(
            configuration_service=configuration_service,
            connectivity_checker=connectivity_checker,
        )
    )
    application.include_router(api_create_client_config_router(configuration_service=configuration_service))

    return application
