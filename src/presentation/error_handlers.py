"""Centralized error handling for the presentation layer."""

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from ..config import settings
from ..domain.exceptions import (
    DomainError,
    InvalidRestoreKeyError,
    RestoreRedirect,
    UnknownOptionError,
    ValidationError,
)
from ..request_utils import is_api_request
from .routes import templates

_STATUS_BY_ERROR: dict[type[DomainError], int] = {
    InvalidRestoreKeyError: status.HTTP_403_FORBIDDEN,
    UnknownOptionError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
}


def status_for(error: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_restore_redirect(redirect: RestoreRedirect) -> RedirectResponse:
    """End the request with the redirect requested by the restore protocol."""
    return RedirectResponse(url=redirect.location, status_code=status.HTTP_302_FOUND)


def handle_domain_error(error: DomainError, request: Request):
    """Convert domain errors to RFC 7807 problem details or an HTML error page."""
    status_code = status_for(error)

    if is_api_request(request):
        return JSONResponse(
            status_code=status_code,
            content={
                "type": "about:blank",
                "title": type(error).__name__,
                "status": status_code,
                "detail": str(error),
                "instance": str(request.url.path),
            },
            media_type="application/problem+json",
        )

    return render_error_response(request, str(error), status_code=status_code)


def render_error_response(
    request: Request, error_message: str, status_code: int = 400
) -> HTMLResponse:
    """Render error response for HTML requests."""
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error_message": error_message, "settings": settings},
        status_code=status_code,
    )
