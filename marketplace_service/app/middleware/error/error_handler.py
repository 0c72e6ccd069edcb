import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace_service.app.utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("marketplace_service_error_handler")

_HTTP_ERROR_TYPES = {
    400: "bad_request",
    401: "authentication_error",
    403: "authorization_error",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def _validation_details(exc: Any) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


class MarketplaceErrorHandler:
    """Class to setup error handling for the Marketplace Service."""

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        """Setup error handlers for the FastAPI application."""

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(  # type: ignore
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            """Handle HTTP exceptions."""

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type=_HTTP_ERROR_TYPES.get(exc.status_code, "http_error"),
                message=str(exc.detail),
                headers=getattr(exc, "headers", None),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(  # type: ignore
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            """Handle request validation errors."""

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="validation_error",
                message="Request validation failed",
                details={"validation_errors": _validation_details(exc)},
            )

        @app.exception_handler(ValidationError)
        async def pydantic_validation_exception_handler(  # type: ignore
            request: Request, exc: ValidationError
        ) -> JSONResponse:
            """Handle Pydantic validation errors."""

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="data_validation_error",
                message="Data validation failed",
                details={"validation_errors": _validation_details(exc)},
            )

        @app.exception_handler(ValueError)
        async def value_error_handler(  # type: ignore
            request: Request, exc: ValueError
        ) -> JSONResponse:
            """Handle value errors."""

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="value_error",
                message=str(exc),
            )

        @app.exception_handler(IntegrityError)
        async def integrity_error_handler(  # type: ignore
            request: Request, exc: IntegrityError
        ) -> JSONResponse:
            """Unique constraint violations that slipped past the pre-checks."""

            logger.warning(
                "Database integrity error",
                extra={
                    "correlation_id": getattr(
                        request.state, "correlation_id", "unknown"
                    ),
                    "path": request.url.path,
                    "error": str(exc.orig),
                    "event_type": "integrity_error",
                },
            )
            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=409,
                error_type="conflict",
                message="A record with the same unique value already exists",
            )

        @app.exception_handler(PermissionError)
        async def permission_error_handler(  # type: ignore
            request: Request, exc: PermissionError
        ) -> JSONResponse:
            """Handle permission denied errors."""

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=403,
                error_type="authorization_error",
                message="You do not have permission to perform this action",
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(  # type: ignore
            request: Request, exc: Exception
        ) -> JSONResponse:
            """Handle all uncaught exceptions."""

            logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": getattr(
                        request.state, "correlation_id", "unknown"
                    ),
                    "user_id": getattr(request.state, "user_id", "anonymous"),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                    "event_type": "unhandled_exception",
                },
            )

            return MarketplaceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""

        correlation_id = getattr(request.state, "correlation_id", "unknown")
        user_id = getattr(request.state, "user_id", "anonymous")

        error: Dict[str, Any] = {
            "type": error_type,
            "message": message,
            "correlation_id": correlation_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
            "method": request.method,
        }
        if details:
            error["details"] = details

        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "user_id": user_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": message, "error": error},
            headers=headers,
        )


def setup_marketplace_error_handling(app: FastAPI) -> None:
    """Setup error handling for the Marketplace Service."""

    MarketplaceErrorHandler.setup_error_handlers(app)

    logger.info(
        "Marketplace Service error handling configured",
        extra={"event_type": "error_handler_setup"},
    )
