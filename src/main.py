import socket
from contextlib import asynccontextmanager
from typing import Final

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .config import settings
from .domain.constants import ADMIN_EMAIL_OPTION, HOME_OPTION, SITEURL_OPTION
from .domain.exceptions import DomainError, RestoreRedirect
from .infrastructure.database.database import get_main_engine, init_db
from .infrastructure.database.options import OptionStore
from .logging_config import get_logger, setup_logging
from .logging_utils import log_system_info
from .middleware import log_requests_middleware
from .presentation.api_routes import api_router
from .presentation.error_handlers import (
    handle_domain_error,
    handle_restore_redirect,
    render_error_response,
)
from .presentation.routes import router
from .request_utils import is_api_request
from .telemetry import setup_telemetry


def seed_site_options(session: Session) -> None:
    """Store the configured site identity when the option table is empty."""
    options = OptionStore(session)
    options.add(HOME_OPTION, settings.default_home)
    options.add(SITEURL_OPTION, settings.default_siteurl)
    options.add(ADMIN_EMAIL_OPTION, settings.admin_email)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    logger = get_logger(__name__)

    engine = get_main_engine()
    init_db(engine)
    with Session(engine) as session:
        seed_site_options(session)
    logger.info("Database initialized successfully")

    hostname = socket.gethostname()
    try:
        ip_addr = socket.gethostbyname(hostname)
    except OSError:
        ip_addr = "unknown"
    log_system_info(hostname, ip_addr, settings.debug)

    yield

    logger.info("Application shutdown completed")


app: Final = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
    description="""
**Site URL Restore** - self-service rollback for the site identity values.

Changing `home` or `siteurl` can lock administrators out of the admin
interface. Every change to either value is backed up for 30 minutes and the
administrator receives an email with a single-use restore link. Opening the
link writes the previous values back and shows a confirmation on the admin
dashboard.
    """.strip(),
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
    openapi_tags=[
        {"name": "options", "description": "Read and change configuration values"},
        {"name": "restore", "description": "Inspect the pending restore"},
    ],
)

setup_telemetry(app)

app.middleware("http")(log_requests_middleware)


@app.exception_handler(RestoreRedirect)
async def restore_redirect_handler(request: Request, exc: RestoreRedirect):
    """A completed restore ends the request with a redirect."""
    return handle_restore_redirect(exc)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Global handler for domain-specific errors."""
    logger = get_logger(__name__)
    logger.warning(
        "Domain error occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
    )
    return handle_domain_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Global handler for database errors."""
    logger = get_logger(__name__)
    logger.error(
        "Database error occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    message = "A database error occurred. Please try again."
    if is_api_request(request):
        return JSONResponse(status_code=500, content={"detail": message})
    return render_error_response(request, message, status_code=500)


app.include_router(api_router)
app.include_router(router)


def serve() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run("src.main:app", host=settings.host, port=settings.port)
