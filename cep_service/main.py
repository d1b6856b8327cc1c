from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
import httpx
import time
from typing import Callable

from cep_service.adapters.registry import default_registry
from cep_service.api.error_handlers import register_exception_handlers
from cep_service.core.config import get_settings, load_env_file
from cep_service.core.logging import configure_logging, get_logger, set_correlation_id
from cep_service.services.race_coordinator import RaceCoordinator


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context runs once at startup and once at shutdown.

    Builds the shared HTTP client and the race coordinator at startup. At
    shutdown, waits for detached adaptor calls before closing the client.
    """
    settings = get_settings()
    client = httpx.AsyncClient(timeout=settings.UPSTREAM_SOCKET_TIMEOUT)
    adapters = default_registry().create_all(settings)
    coordinator = RaceCoordinator(adapters, client)
    app.state.race_coordinator = coordinator

    logger.info(
        f"Starting up {settings.PROJECT_NAME}",
        extra={"data": {"providers": [a.name.value for a in adapters], "deadline_s": coordinator.deadline}}
    )
    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.PROJECT_NAME}")
        await coordinator.aclose()
        await client.aclose()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    The lookup root is the only route; docs and the OpenAPI schema are
    disabled so every other path answers 404.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    configure_middleware(app)
    register_exception_handlers(app)
    register_routers(app)

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        # Extract or generate correlation ID
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        start_time = time.time()

        try:
            response = await call_next(request)

            response.headers["X-Correlation-ID"] = correlation_id

            process_time = time.time() - start_time
            logger.info(
                "Request completed",
                extra={
                    "data": {
                        "request_path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "process_time_ms": round(process_time * 1000, 2)
                    }
                }
            )

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "data": {
                        "request_path": request.url.path,
                        "method": request.method,
                        "process_time_ms": round(process_time * 1000, 2),
                        "error": str(e)
                    }
                },
                exc_info=True
            )
            raise


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Import routers here to avoid circular imports
    from cep_service.api.routes.cep import cep_router

    app.include_router(cep_router, tags=["CEP"])


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("cep_service.main:app", host=settings.HOST, port=settings.PORT)
