from pathlib import Path
from typing import Final

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..application.siteurl_restore import SiteUrlRestore
from ..config import settings
from ..domain.constants import ADMIN_PATH, HOME_OPTION, SITEURL_OPTION
from ..domain.exceptions import DomainError
from ..logging_config import get_logger
from ..utils import truncate_value
from .dependencies import (
    get_restore_protocol,
    perform_siteurl_restore,
    restore_siteurl_success_notice,
)

logger: Final = get_logger(__name__)

TEMPLATES_DIR: Final = Path(__file__).resolve().parent.parent / "templates"

# A restore key may arrive on any page, so every page checks for one first
router: Final = APIRouter(dependencies=[Depends(perform_siteurl_restore)])
templates: Final = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["truncate_value"] = truncate_value


@router.get("/", response_class=HTMLResponse)
def site_front_page(
    *,
    request: Request,
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
):
    return templates.TemplateResponse(
        request,
        "site.html",
        {
            "home": protocol.options.get(HOME_OPTION),
            "siteurl": protocol.options.get(SITEURL_OPTION),
            "settings": settings,
        },
    )


@router.get(
    f"/{ADMIN_PATH}",
    response_class=HTMLResponse,
    dependencies=[Depends(restore_siteurl_success_notice)],
)
def admin_dashboard(
    *,
    request: Request,
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
):
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "notices": protocol.notices.render(),
            "home": protocol.options.get(HOME_OPTION),
            "siteurl": protocol.options.get(SITEURL_OPTION),
            "all_options": protocol.options.all(),
            "restore_status": protocol.restore_status(),
            "settings": settings,
        },
    )


@router.post(f"/{ADMIN_PATH}/options")
def update_site_option(
    *,
    request: Request,
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
    name: str = Form(...),
    value: str = Form(...),
):
    logger.debug("Updating option via admin form", option=name)
    try:
        updated = protocol.options.set(name, value.strip())
    except DomainError as e:
        logger.warning("Option update rejected", option=name, error=str(e))
        return templates.TemplateResponse(
            request,
            "error.html",
            {"error_message": str(e), "settings": settings},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    logger.info(
        "Option updated via admin form",
        option=name,
        updated=updated,
        restore_email_sent=protocol.email_sent,
    )
    return RedirectResponse(url=f"/{ADMIN_PATH}", status_code=status.HTTP_303_SEE_OTHER)
