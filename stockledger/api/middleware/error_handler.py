"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockledger.application.dto.responses import ErrorResponse
from stockledger.config import get_logger
from stockledger.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    LedgerError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    UnprocessableEntityError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first isinstance match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    UnprocessableEntityError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "PURCHASE_NOT_FOUND": "Check the purchase ID and try GET /api/purchases to list purchases.",
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "SALE_NOT_FOUND": "Check the sale ID and try GET /api/sales to list sales.",
    "INVALID_PURCHASE_STATE": "Reload the purchase; its status no longer allows this operation.",
    "PRODUCT_SOFT_DELETED": "Ask an admin to restore the product via POST /api/products/{id}/restore.",
    "DUPLICATE_PRODUCT_CODE": "Choose a different product code.",
    "SALE_CODE_EXHAUSTED": "Retry the sale; no free sale code could be allocated.",
    "SUPPLIER_BINDING_CONFLICT": "Remove the listed products or use the supplier they are bound to.",
    "INSUFFICIENT_STOCK_TO_REVERSE": "Stock was consumed after posting; adjust stock before cancelling.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or receive more stock first.",
    "PERMISSION_DENIED": "This operation requires the admin role.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "MIGRATION_ERROR": "Run stockledger-migrate --status and --verify against the database.",
    "UNAUTHORIZED": "Send the X-Actor-Id header identifying the authenticated user.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "You are not allowed to perform this operation.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The resource state does not allow this operation.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def ledger_error_response(request: Request, exc: LedgerError) -> JSONResponse:
    """Render a ledger error with its code and details."""
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "ledger_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_code=exc.code,
        error=exc.message,
        status=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=exc.code,
            message=exc.message,
            hint=_get_hint(exc.code, status_code),
            detail=exc.details or None,
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except LedgerError as e:
            return ledger_error_response(request, e)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_code = exc.__class__.__name__
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc(),
        )

        error_response = ErrorResponse(
            error_code="INTERNAL_ERROR",
            message="An internal error occurred",
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json"),
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(LedgerError)
    async def ledger_exception_handler(
        request: Request,
        exc: LedgerError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        return ledger_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")
