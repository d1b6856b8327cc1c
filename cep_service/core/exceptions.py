from fastapi import status
from typing import Any, Dict, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent log format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class InvalidCEPError(APIException):
    """Exception raised when the cep query parameter is missing or malformed."""

    def __init__(
        self,
        raw_code: Optional[str] = None,
        detail: str = "CEP must be 5 digits, an optional hyphen and 3 digits",
        code: str = "invalid_cep",
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"cep": raw_code}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )


class LookupTimeoutError(APIException):
    """Exception raised when no provider answered before the race deadline."""

    def __init__(
        self,
        cep: str,
        deadline: float,
        detail: Optional[str] = None,
        code: str = "lookup_timeout",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            detail = f"No provider answered for CEP '{cep}' within {deadline}s"

        merged_context = {"cep": cep, "deadline_s": deadline}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=detail,
            code=code,
            context=merged_context
        )


class RouteNotFoundError(APIException):
    """Exception raised for any path other than the lookup root."""

    def __init__(
        self,
        path: str,
        detail: Optional[str] = None,
        code: str = "not_found_error",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            detail = f"Path '{path}' not found"

        merged_context = {"path": path}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            code=code,
            context=merged_context
        )


class IntegrationException(APIException):
    """Exception raised when an external API integration fails."""

    def __init__(
        self,
        detail: str = "External API integration error",
        code: str = "integration_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)
        self.original_exception = original_exception

        # Add original exception info to context if available
        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class UpstreamTransportError(IntegrationException):
    """A provider call failed at the network level or answered with an error status."""

    def __init__(
        self,
        provider: str,
        detail: str = "Upstream transport error",
        original_exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"provider": provider}
        if context:
            merged_context.update(context)

        super().__init__(
            detail=detail,
            code="upstream_transport_error",
            context=merged_context,
            original_exception=original_exception
        )
        self.provider = provider


class UpstreamDecodeError(IntegrationException):
    """A provider answered with a body that is not JSON or does not fit its schema."""

    def __init__(
        self,
        provider: str,
        detail: str = "Upstream decode error",
        original_exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"provider": provider}
        if context:
            merged_context.update(context)

        super().__init__(
            detail=detail,
            code="upstream_decode_error",
            context=merged_context,
            original_exception=original_exception
        )
        self.provider = provider
