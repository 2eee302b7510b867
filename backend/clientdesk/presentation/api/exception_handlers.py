"""Exception handlers — map domain exceptions to the JSON error envelope.

Every error response has the shape ``{success: false, message, error}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clientdesk.domain.exceptions import (
    AuthExchangeFailedError,
    ClientHasCasesError,
    DomainValidationError,
    DuplicateEmailError,
    DuplicateEntityError,
    EntityNotFoundError,
    ForbiddenError,
    MailboxNotAuthenticatedError,
    MailboxNotConfiguredError,
    MailboxProviderError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain → HTTP mapping on a FastAPI application."""

    @app.exception_handler(DomainValidationError)
    async def validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(DuplicateEntityError)
    async def duplicate_handler(request: Request, exc: DuplicateEntityError) -> JSONResponse:
        if isinstance(exc, DuplicateEmailError):
            return error_response(
                status.HTTP_400_BAD_REQUEST, "Client with this email already exists"
            )
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return error_response(status.HTTP_404_NOT_FOUND, f"{exc.entity_type} not found")

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
        return error_response(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(ClientHasCasesError)
    async def has_cases_handler(request: Request, exc: ClientHasCasesError) -> JSONResponse:
        return error_response(
            status.HTTP_409_CONFLICT,
            "Client has associated cases and cannot be deleted",
            str(exc),
        )

    @app.exception_handler(MailboxNotConfiguredError)
    async def not_configured_handler(
        request: Request, exc: MailboxNotConfiguredError
    ) -> JSONResponse:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    @app.exception_handler(MailboxNotAuthenticatedError)
    async def not_authenticated_handler(
        request: Request, exc: MailboxNotAuthenticatedError
    ) -> JSONResponse:
        return error_response(status.HTTP_401_UNAUTHORIZED, exc.message)

    @app.exception_handler(AuthExchangeFailedError)
    async def exchange_failed_handler(
        request: Request, exc: AuthExchangeFailedError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST, "Failed to complete authorization", exc.message
        )

    @app.exception_handler(MailboxProviderError)
    async def provider_error_handler(request: Request, exc: MailboxProviderError) -> JSONResponse:
        logger.warning("Mailbox provider error on %s: %s", request.url.path, exc)
        return error_response(
            status.HTTP_502_BAD_GATEWAY, "Mailbox provider request failed", exc.message
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc)
        )
