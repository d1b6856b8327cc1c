from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cep_service.core.exceptions import (
    APIException,
    InvalidCEPError,
    LookupTimeoutError,
    RouteNotFoundError,
)
from cep_service.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

# Error responses carry the status code only; details go to the logs


async def handle_invalid_cep(request: Request, exc: InvalidCEPError) -> Response:
    """
    Handle missing or malformed CEPs.

    Args:
        request: FastAPI request object
        exc: InvalidCEPError instance

    Returns:
        Response: Empty 400 response
    """
    logger.info(f"Invalid CEP: {exc.detail}", extra={"data": exc.to_dict()})
    return Response(status_code=exc.status_code)


async def handle_lookup_timeout(request: Request, exc: LookupTimeoutError) -> Response:
    """
    Handle races where no provider answered in time.

    Args:
        request: FastAPI request object
        exc: LookupTimeoutError instance

    Returns:
        Response: Empty 504 response
    """
    logger.warning(f"Lookup timeout: {exc.detail}", extra={"data": exc.to_dict()})
    return Response(status_code=exc.status_code)


async def handle_api_exception(request: Request, exc: APIException) -> Response:
    """Handle any other APIException subclass."""
    logger.error(f"API Exception: {exc.detail}", extra={"data": exc.to_dict()})
    return Response(status_code=exc.status_code)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Handle routing errors raised by the framework itself.

    Unknown paths are logged as RouteNotFoundError so they share the log shape
    of the service's own errors.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        not_found = RouteNotFoundError(path=request.url.path)
        logger.info(f"Route not found: {not_found.detail}", extra={"data": not_found.to_dict()})
    else:
        logger.info(f"HTTP {exc.status_code} for {request.method} {request.url.path}")
    return Response(status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> Response:
    """Treat malformed query strings like a bad CEP."""
    invalid = InvalidCEPError(detail="Request validation error", context={"errors": exc.errors()})
    return await handle_invalid_cep(request, invalid)


async def handle_unexpected_exception(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(InvalidCEPError, handle_invalid_cep)
    app.add_exception_handler(LookupTimeoutError, handle_lookup_timeout)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected_exception)
