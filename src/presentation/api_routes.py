from typing import Final

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..application.siteurl_restore import SiteUrlRestore
from ..domain.constants import MAX_OPTION_VALUE_LENGTH
from ..domain.exceptions import UnknownOptionError
from ..logging_config import get_logger
from .dependencies import get_restore_protocol

logger: Final = get_logger(__name__)

api_router: Final = APIRouter(prefix="/api/v1")


class OptionValue(BaseModel):
    value: str = Field(max_length=MAX_OPTION_VALUE_LENGTH)


class OptionResponse(BaseModel):
    name: str
    value: str


class OptionUpdateResponse(OptionResponse):
    updated: bool
    restore_email_sent: bool


class RestoreStatusResponse(BaseModel):
    key_pending: bool
    backed_up_options: list[str]
    can_restore: bool


@api_router.get("/options/{name}", tags=["options"], response_model=OptionResponse)
def api_get_option(
    *, name: str, protocol: SiteUrlRestore = Depends(get_restore_protocol)
):
    value = protocol.options.get(name)
    if value is None:
        raise UnknownOptionError(f'Option "{name}" not found')
    return OptionResponse(name=name, value=value)


@api_router.put(
    "/options/{name}", tags=["options"], response_model=OptionUpdateResponse
)
def api_update_option(
    *,
    name: str,
    option: OptionValue,
    protocol: SiteUrlRestore = Depends(get_restore_protocol),
):
    """Change a configuration value.

    Changing ``home`` or ``siteurl`` backs up the previous value and emails a
    restore link to the administrator.
    """
    updated = protocol.options.set(name, option.value)
    logger.info("Option updated via API", option=name, updated=updated)
    return OptionUpdateResponse(
        name=name,
        value=protocol.options.get(name) or "",
        updated=updated,
        restore_email_sent=protocol.email_sent,
    )


@api_router.get(
    "/restore/status", tags=["restore"], response_model=RestoreStatusResponse
)
def api_restore_status(*, protocol: SiteUrlRestore = Depends(get_restore_protocol)):
    restore_status = protocol.restore_status()
    return RestoreStatusResponse(
        key_pending=restore_status.key_pending,
        backed_up_options=restore_status.backed_up_options,
        can_restore=restore_status.can_restore(),
    )
