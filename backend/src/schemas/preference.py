"""Pydantic schemas for dashboard preference endpoints."""
from pydantic import BaseModel, ConfigDict, Field

from schemas.validators import UtcDatetime


class PreferencesUpdate(BaseModel):
    """
    Schema for saving preferences.

    Fields are optional here so that missing values reach the service layer,
    which reports the offending field by name.
    """

    model_config = ConfigDict(populate_by_name=True)

    assets: list[str] | None = None
    investor_type: str | None = Field(default=None, alias="investorType")
    content: list[str] | None = None


class PreferencesSavedResponse(BaseModel):
    """Response after saving preferences."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    updated_at: UtcDatetime = Field(alias="updatedAt")


class PreferencesOut(BaseModel):
    """Stored preferences as returned to the client."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    assets: list[str]
    investor_type: str = Field(alias="investorType")
    content: list[str]
    updated_at: UtcDatetime = Field(alias="updatedAt")


class PreferencesResponse(BaseModel):
    """Wrapper so "never saved" is a null value rather than an error."""

    preferences: PreferencesOut | None
