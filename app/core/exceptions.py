"""Application errors and their FastAPI handlers.

On the admin API errors render as RFC 7807 Problem Details; the seeder CLI
prints the message and exits 1.
"""

from typing import Any, ClassVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app.core.logging import get_logger
from app.core.problem_details import ProblemDetailResponse, problem_response

logger = get_logger(__name__)


class ClaimCheckError(Exception):
    """Base exception for ClaimCheck application errors.

    Subclasses set ``code``, ``status_code`` and ``default_message``.
    ``public_details`` names the ``details`` keys safe to return to API clients.
    """

    code: ClassVar[str] = "INTERNAL_ERROR"
    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "Internal error"
    public_details: ClassVar[tuple[str, ...]] = ()

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        """Initialize application error.

        Args:
            message: Human-readable error message.
            details: Additional error context.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def title(self) -> str:
        """RFC 7807 title, derived from the code."""
        return self.code.replace("_", " ").title()

    def public_extensions(self) -> dict[str, Any]:
        return {k: v for k, v in self.details.items() if k in self.public_details}


class ConfigurationError(ClaimCheckError):
    """Missing or invalid configuration (store credentials, marker path).

    Raised before any collection is touched; callers treat it as fatal.
    """

    code = "CONFIGURATION_ERROR"
    status_code = 503
    default_message = "Invalid configuration"
    public_details = ("missing",)


class DatasetError(ClaimCheckError):
    """The demo dataset document is missing or malformed."""

    code = "DATASET_ERROR"
    default_message = "Invalid demo dataset"
    public_details = ("section", "available")


class ForbiddenError(ClaimCheckError):
    """Operation not allowed in the current environment."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "Operation not allowed"


async def claimcheck_exception_handler(
    request: Request,
    exc: ClaimCheckError,
) -> ProblemDetailResponse:
    """Render a ClaimCheckError as problem details."""
    logger.error(
        "app.error_handled",
        error=exc.message,
        error_type=type(exc).__name__,
        error_code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details,
    )
    return problem_response(
        status=exc.status_code,
        title=exc.title,
        detail=exc.message,
        code=exc.code,
        **exc.public_extensions(),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> ProblemDetailResponse:
    """Render request validation errors with one entry per field."""
    field_errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": str(error.get("msg", "Validation failed")),
            "type": str(error.get("type", "unknown")),
        }
        for error in exc.errors()
    ]

    logger.warning(
        "app.validation_error",
        error_count=len(field_errors),
        path=request.url.path,
        fields=[e["field"] for e in field_errors],
    )
    return problem_response(
        status=422,
        title="Validation Error",
        detail=f"Request validation failed with {len(field_errors)} error(s)",
        code="VALIDATION_ERROR",
        errors=field_errors,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> ProblemDetailResponse:
    """Render any other exception as an opaque 500."""
    logger.error(
        "app.unhandled_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred. Quote the request_id when reporting it.",
        code="INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""
    app.add_exception_handler(ClaimCheckError, claimcheck_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
