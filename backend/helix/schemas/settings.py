"""Pydantic schemas for settings API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SettingValueResponse(BaseModel):
    """Response for a single setting read."""

    setting: str = Field(description="Setting key")
    value: Any = Field(description="Current value (type varies)")


class SettingUpdate(BaseModel):
    """Request to update a single setting."""

    value: str | bool | int | float | None = Field(description="New value for the setting")


class SettingUpdatedResponse(BaseModel):
    """Response after updating a single setting."""

    setting: str = Field(description="Setting key")
    value: Any = Field(description="Value as stored after sanitization")
    updated: Literal[True] = True


class BatchUpdateResponse(BaseModel):
    """Response after a batch update; errors lists keys that were skipped."""

    updated: dict[str, Any] = Field(description="Stored values by key")
    errors: dict[str, str] | None = Field(
        default=None,
        description="Failure reason by key, omitted when every key succeeded",
    )


class SettingsErrorDetail(BaseModel):
    """Error body for settings failures."""

    code: str
    message: str
    errors: dict[str, str] | None = None
