"""Global exception handling: every failure becomes the callable error envelope."""

from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from toyrotator.schemas.responses import ErrorBody, ErrorResponse
from toyrotator.utils.exceptions import InvalidArgumentError, ToyRotatorException
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)


def create_error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Dict[str, Any],
) -> JSONResponse:
    """
    Create JSON error response.

    Args:
        status_code: HTTP status code.
        error_code: Callable error code.
        message: Error message.
        details: Additional error details.

    Returns:
        JSON response.
    """
    body = ErrorResponse(
        message=message,
        error=ErrorBody(code=error_code, message=message, details=details),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _exception_response(e: ToyRotatorException) -> JSONResponse:
    log = logger.error if e.status_code >= 500 else logger.warning
    log(
        f"ToyRotator exception: {e.code} - {e.message}",
        extra={"extra_data": {"error_code": e.code, "details": e.details}},
    )
    return create_error_response(e.status_code, e.code, e.message, e.details)


async def toyrotator_exception_handler(request: Request, exc: ToyRotatorException) -> JSONResponse:
    return _exception_response(exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body validation failures map to invalid-argument."""
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    message = "; ".join(
        f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors
    ) or InvalidArgumentError.default_message
    return _exception_response(InvalidArgumentError(message, {"errors": errors}))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ToyRotatorException, toyrotator_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global error handler middleware that catches and formats all exceptions."""

    async def dispatch(self, request: Request, call_next: Any) -> JSONResponse:
        """
        Handle exceptions and return proper JSON responses.

        Args:
            request: HTTP request.
            call_next: Next middleware/route handler.

        Returns:
            JSON response with error details.
        """
        # Let OPTIONS (CORS preflight) requests pass through untouched
        if request.method == "OPTIONS":
            return await call_next(request)

        try:
            return await call_next(request)
        except ToyRotatorException as e:
            return _exception_response(e)
        except Exception as e:
            logger.error(
                f"Unhandled exception: {str(e)}",
                extra={"extra_data": {"exception_type": type(e).__name__, "path": request.url.path}},
                exc_info=True,
            )
            return create_error_response(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error_code="internal",
                message="An unexpected error occurred",
                details={},
            )
