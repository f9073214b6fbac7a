from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserPreferences(BaseModel):
    model_config = ConfigDict(extra="allow")

    theme: str = "hedge-rose"
    showHidden: bool = False
    startupPath: str = ""


class AudioPreferences(BaseModel):
    model_config = ConfigDict(extra="allow")

    track: str = ""
    volume: float = Field(default=0.3, ge=0.0, le=1.0)
    player: str = ""


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    schemaVersion: int = 1
    userPreferences: UserPreferences = Field(default_factory=UserPreferences)
    audio: AudioPreferences = Field(default_factory=AudioPreferences)
