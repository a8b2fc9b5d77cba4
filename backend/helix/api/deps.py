"""Shared dependencies for API routes."""

from __future__ import annotations

import secrets
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from helix.core.config import settings
from helix.core.logging import get_logger
from helix.db import get_db
from helix.services.host import HostService
from helix.services.options import OptionStore
from helix.services.settings import SettingsService
from helix.services.translations import TranslationService
from helix.settings.registry import SettingsRegistry

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def require_manage_options(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    """Require the administrative capability for settings endpoints.

    Raises:
        HTTPException: 401 without credentials, 403 with the wrong token or
            when no admin token is configured.
    """
    if settings.admin_token is None:
        logger.warning("admin_token_not_configured")
        raise HTTPException(
            status_code=403,
            detail={"code": "FORBIDDEN", "message": "Settings access is not configured."},
        )

    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "UNAUTHORIZED", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(credentials.credentials, settings.admin_token):
        logger.warning("settings_access_denied")
        raise HTTPException(
            status_code=403,
            detail={
                "code": "FORBIDDEN",
                "message": "Sorry, you are not allowed to manage options.",
            },
        )


async def get_translations() -> AsyncGenerator[TranslationService, None]:
    """Dependency providing a translation service for one request."""
    service = TranslationService()
    try:
        yield service
    finally:
        await service.close()


async def get_settings_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    translations: TranslationService = Depends(get_translations),
) -> SettingsService:
    """Dependency building the settings service for one request.

    The registry is rebuilt from a fresh host snapshot so dynamic defaults
    reflect the current options.
    """
    store = OptionStore(db)
    host = await HostService(store, translations).snapshot()
    registry = SettingsRegistry.from_host(
        host,
        getattr(request.app.state, "allow_list_filters", ()),
    )
    return SettingsService(store, registry, translations)
