"""API routes for site settings."""

from __future__ import annotations

from typing import Any, Literal, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from helix.api.deps import get_settings_service, require_manage_options
from helix.core.logging import get_logger
from helix.schemas.settings import (
    BatchUpdateResponse,
    SettingsErrorDetail,
    SettingUpdate,
    SettingUpdatedResponse,
    SettingValueResponse,
)
from helix.services.settings import SettingsService
from helix.settings.exceptions import BatchUpdateFailedError, SettingsError

logger = get_logger(__name__)

router = APIRouter(
    prefix="/settings",
    tags=["settings"],
    dependencies=[Depends(require_manage_options)],
)

EDITABLE = ["POST", "PUT", "PATCH"]


def _raise_http(error: SettingsError) -> NoReturn:
    """Translate a settings error into an HTTP error response."""
    detail = SettingsErrorDetail(code=error.code, message=error.message)
    if isinstance(error, BatchUpdateFailedError):
        detail.errors = error.errors
    raise HTTPException(
        status_code=error.status,
        detail=detail.model_dump(exclude_none=True),
    )


@router.get("")
async def get_settings(
    context: Literal["view", "edit"] = Query(
        default="view",
        description="Scope under which the request is made",
    ),
    service: SettingsService = Depends(get_settings_service),
) -> dict[str, dict[str, dict[str, Any]]]:
    """Get all settings grouped by category.

    Every defined setting is returned, falling back to its default when
    the option has never been written. The ``edit`` context adds defaults
    and advisory bounds.
    """
    return await service.get_all(context)


@router.api_route(
    "",
    methods=EDITABLE,
    response_model=BatchUpdateResponse,
    response_model_exclude_none=True,
)
async def update_settings(
    values: dict[str, Any] | None = Body(default=None),
    service: SettingsService = Depends(get_settings_service),
) -> BatchUpdateResponse:
    """Update several settings at once.

    Keys are processed independently: failures are reported under
    ``errors`` while the remaining keys are still saved. Fails with 400
    only when the body is empty or no key could be saved.
    """
    try:
        result = await service.update_many(values or {})
    except SettingsError as e:
        _raise_http(e)

    return BatchUpdateResponse(updated=result.updated, errors=result.errors or None)


@router.get("/schema")
async def get_settings_schema(
    service: SettingsService = Depends(get_settings_service),
) -> dict[str, Any]:
    """Get the settings schema for form rendering.

    Returns the transport type, format, default, allowed values and
    advisory minimum/maximum of every setting, plus the allow-list.
    """
    return {
        "schema": service.registry.describe(),
        "keys": sorted(service.registry.allowed_keys()),
    }


@router.get("/{key}", response_model=SettingValueResponse)
async def get_setting(
    key: str,
    service: SettingsService = Depends(get_settings_service),
) -> SettingValueResponse:
    """Get a single setting value."""
    try:
        value = await service.get_one(key)
    except SettingsError as e:
        _raise_http(e)

    return SettingValueResponse(setting=key, value=value)


@router.api_route("/{key}", methods=EDITABLE, response_model=SettingUpdatedResponse)
async def update_setting(
    key: str,
    update: SettingUpdate,
    service: SettingsService = Depends(get_settings_service),
) -> SettingUpdatedResponse:
    """Update a single setting value.

    Returns 403 for keys outside the allow-list, 400 when the value fails
    validation and 500 when the write does not take effect.
    """
    try:
        value = await service.update_one(key, update.value)
    except SettingsError as e:
        _raise_http(e)

    return SettingUpdatedResponse(setting=key, value=value)
