"""
Error Handler Middleware

Consistent error responses for the REST surface:
- Correlation ID on every request and response
- Domain errors mapped to their status codes
- Unhandled exceptions turned into a sanitized 500
"""

import traceback
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from mentorlink.config.logging_config import bind_correlation_id, clear_context, get_logger
from mentorlink.domain.errors import MentorLinkError, MessageValidationError

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Domain errors are handled by the exception handlers registered in
    `register_exception_handlers`; anything reaching this middleware
    is unexpected.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        bind_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        except Exception as e:
            logger.error(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
                traceback=traceback.format_exc(),
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "correlation_id": correlation_id,
                    "message": "An unexpected error occurred. Please try again.",
                },
                headers={CORRELATION_HEADER: correlation_id},
            )

        finally:
            clear_context()


async def domain_error_handler(request: Request, exc: MentorLinkError) -> JSONResponse:
    """Translate a domain error into `{"error": ..., "details": ...}`."""
    content: dict = {"error": exc.message}
    if isinstance(exc, MessageValidationError):
        content["details"] = exc.details

    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MentorLinkError, domain_error_handler)
