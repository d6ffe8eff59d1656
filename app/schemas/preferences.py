"""
Pydantic schemas for view preferences and local backups.
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.schemas.application import ApplicationRecord
from app.schemas.analytics import TimeRange


class DashboardPrefs(BaseModel):
    """Which dashboard panels are shown."""
    show_trends: bool = True
    show_status: bool = True
    show_companies: bool = True
    show_response: bool = True
    show_stats: bool = True
    show_insights: bool = True


class DateRangeSetting(BaseModel):
    start: str = ""
    end: str = ""


class ViewSettings(BaseModel):
    """List/dashboard view state captured alongside a backup."""
    view_mode: Literal["list", "dashboard"] = "list"
    selected_time_range: TimeRange = "month"
    insight_filter: Literal["all", "success", "improvement"] = "all"
    selected_tags: list[str] = Field(default_factory=list)
    date_range: DateRangeSetting = Field(default_factory=DateRangeSetting)


class BackupSnapshot(BaseModel):
    timestamp: datetime
    applications: list[ApplicationRecord] = Field(default_factory=list)
    settings: ViewSettings = Field(default_factory=ViewSettings)


class BackupRequest(BaseModel):
    settings: Optional[ViewSettings] = None


class BackupResponse(BaseModel):
    timestamp: datetime
    applications: int


class RestoreResponse(BaseModel):
    timestamp: datetime
    restored: int
    failed: int
    first_error: Optional[str] = None
    settings: ViewSettings
