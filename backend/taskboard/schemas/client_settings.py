"""Client preference response schemas."""

from __future__ import annotations

from sqlmodel import SQLModel


class SettingsSaved(SQLModel):
    success: bool = True
