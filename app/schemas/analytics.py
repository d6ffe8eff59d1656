"""
Pydantic schemas for dashboard statistics and trend series.
"""
from typing import Literal
from pydantic import BaseModel, Field

TimeRange = Literal["week", "month", "year", "all"]
ExportFormat = Literal["csv", "json", "pdf"]


class CompanyCount(BaseModel):
    name: str
    count: int


class PositionCount(BaseModel):
    position: str
    count: int


class DateCount(BaseModel):
    date: str = Field(..., description="ISO calendar date (YYYY-MM-DD)")
    count: int


class ReminderCompletion(BaseModel):
    completed: int = 0
    total: int = 0


class DashboardStats(BaseModel):
    """Summary statistics over the time-windowed, non-deleted applications."""
    total_applications: int = 0
    status_distribution: dict[str, int] = Field(default_factory=dict)
    response_rate: float = 0.0
    interview_rate: float = 0.0
    offer_rate: float = 0.0
    average_response_time: float = Field(0.0, description="Days from creation to applied")
    average_interview_time: float = Field(0.0, description="Days from applied to interview")
    top_companies: list[CompanyCount] = Field(default_factory=list)
    top_positions: list[PositionCount] = Field(default_factory=list)
    success_insights: list[str] = Field(default_factory=list)
    improvement_insights: list[str] = Field(default_factory=list)
    application_trend: list[DateCount] = Field(default_factory=list)
    tag_distribution: dict[str, int] = Field(default_factory=dict)
    reminder_completion: ReminderCompletion = Field(default_factory=ReminderCompletion)

    class Config:
        json_schema_extra = {
            "example": {
                "total_applications": 4,
                "status_distribution": {"applied": 3, "interview": 1},
                "response_rate": 33.33,
                "interview_rate": 0.0,
                "offer_rate": 0.0,
                "average_response_time": 2.5,
                "average_interview_time": 0.0,
                "top_companies": [{"name": "Acme", "count": 3}],
                "top_positions": [],
                "success_insights": ["Quick response times from companies"],
                "improvement_insights": [],
                "application_trend": [{"date": "2026-10-01", "count": 4}],
                "tag_distribution": {"remote": 2},
                "reminder_completion": {"completed": 1, "total": 2}
            }
        }


class TrendPoint(BaseModel):
    """One day-wide bucket of the trend series."""
    date: str = Field(..., description="ISO calendar date (YYYY-MM-DD)")
    applications: int = 0
    responses: int = 0
    interviews: int = 0


class TrendResponse(BaseModel):
    time_range: TimeRange
    points: list[TrendPoint]
