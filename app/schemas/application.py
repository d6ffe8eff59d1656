"""
Pydantic schemas for tracked job applications.

`ApplicationRecord` is the value that moves between the record store, the
tracker and the analytics stages; the remaining classes are request/response
bodies for the application endpoints.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_ensure_utc)]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationStatus(str, Enum):
    DRAFT = "draft"
    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


TimelineEventType = Literal[
    "status_change", "note_added", "reminder_added", "reminder_completed", "custom"
]

SortField = Literal["created_at", "updated_at"]
SortOrder = Literal["asc", "desc"]


class StatusTransition(BaseModel):
    """Explicit from/to payload carried by status-change timeline events."""
    from_status: Optional[ApplicationStatus] = None
    to_status: ApplicationStatus


class Note(BaseModel):
    id: str
    content: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class Reminder(BaseModel):
    id: str
    title: str
    due_date: UtcDatetime
    completed: bool = False
    created_at: UtcDatetime
    updated_at: UtcDatetime


class TimelineEvent(BaseModel):
    id: str
    type: TimelineEventType
    title: str
    description: Optional[str] = None
    date: UtcDatetime
    created_at: UtcDatetime
    transition: Optional[StatusTransition] = None


class ApplicationRecord(BaseModel):
    """A single tracked application with its notes, reminders, tags and timeline."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: str
    resume_details: str = ""
    job_description: str = ""
    generated_resume: Optional[str] = None
    generated_cover_letter: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.DRAFT
    company_name: Optional[str] = None
    position: Optional[str] = None
    notes: list[Note] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    timeline: list[TimelineEvent] = Field(default_factory=list)
    created_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime = Field(default_factory=utc_now)
    deleted: bool = False


class DateRange(BaseModel):
    """Inclusive created_at window; an unset bound is open on that side."""
    start: Optional[UtcDatetime] = None
    end: Optional[UtcDatetime] = None


# ============================================
# Request / response bodies
# ============================================

class ApplicationCreate(BaseModel):
    """Schema for creating a new application."""
    resume_details: str = Field(..., min_length=1, description="Free-text résumé details")
    job_description: str = Field(..., min_length=1, description="Job description text")
    company_name: Optional[str] = Field(None, max_length=255)
    position: Optional[str] = Field(None, max_length=255)
    status: ApplicationStatus = Field(default=ApplicationStatus.DRAFT)
    tags: list[str] = Field(default_factory=list)


class ApplicationUpdate(BaseModel):
    """Schema for a partial update; only provided fields change."""
    resume_details: Optional[str] = Field(None, min_length=1)
    job_description: Optional[str] = Field(None, min_length=1)
    generated_resume: Optional[str] = None
    generated_cover_letter: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=255)
    position: Optional[str] = Field(None, max_length=255)
    status: Optional[ApplicationStatus] = None
    tags: Optional[list[str]] = None


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationRecord]
    total: int

    class Config:
        json_schema_extra = {
            "example": {
                "applications": [],
                "total": 0
            }
        }


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)


class ReminderCreate(BaseModel):
    title: str = Field(..., min_length=1)
    due_date: UtcDatetime


class TagRequest(BaseModel):
    tag: str = Field(..., min_length=1, max_length=64)


class TimelineEventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class BulkStatusRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)
    status: ApplicationStatus


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class BulkItemResult(BaseModel):
    id: str
    ok: bool
    error: Optional[str] = None


class BulkResult(BaseModel):
    """Per-item outcome of a bulk operation; successes are never rolled back."""
    items: list[BulkItemResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.ok)

    @property
    def first_error(self) -> Optional[str]:
        for item in self.items:
            if not item.ok:
                return item.error
        return None


class BulkResultResponse(BaseModel):
    items: list[BulkItemResult]
    succeeded: int
    failed: int
    first_error: Optional[str] = None

    @classmethod
    def from_result(cls, result: BulkResult) -> "BulkResultResponse":
        return cls(
            items=result.items,
            succeeded=result.succeeded,
            failed=result.failed,
            first_error=result.first_error,
        )


class GenerationResponse(BaseModel):
    application_id: str
    generated_resume: str
    generated_cover_letter: str
    provider: str
