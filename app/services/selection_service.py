"""
Filter and sort stage for the application list.

Pure functions over an in-memory list of records: nothing here touches the
store, and the input list is never reordered in place.
"""
from typing import AbstractSet, Iterable, List, Optional

from app.schemas.application import (
    ApplicationRecord,
    DateRange,
    SortField,
    SortOrder,
)

ALL_STATUSES = "all"


def matches_search(application: ApplicationRecord, search_text: str) -> bool:
    """Case-insensitive substring match across the record's searchable text."""
    needle = search_text.lower()
    fields = [
        application.resume_details,
        application.job_description,
        application.company_name or "",
        application.position or "",
    ]
    if any(needle in field.lower() for field in fields):
        return True
    if any(needle in note.content.lower() for note in application.notes):
        return True
    if any(needle in reminder.title.lower() for reminder in application.reminders):
        return True
    return any(needle in tag.lower() for tag in application.tags)


def in_date_range(application: ApplicationRecord, date_range: Optional[DateRange]) -> bool:
    if date_range is None:
        return True
    if date_range.start is not None and application.created_at < date_range.start:
        return False
    if date_range.end is not None and application.created_at > date_range.end:
        return False
    return True


def select_applications(
    applications: Iterable[ApplicationRecord],
    search_text: str = "",
    status_filter: str = ALL_STATUSES,
    tag_filter: AbstractSet[str] = frozenset(),
    date_range: Optional[DateRange] = None,
    sort_field: SortField = "created_at",
    sort_order: SortOrder = "desc",
) -> List[ApplicationRecord]:
    """
    Filter and sort applications for display.

    Soft-deleted records are dropped first. Search, status, tag and date
    filters are then applied in that order; an empty search, the "all"
    status, an empty tag set and an unset date bound each pass everything
    through. Sorting is stable on the chosen timestamp only, so records with
    equal timestamps keep their relative input order.
    """
    selected = [a for a in applications if not a.deleted]

    if search_text:
        selected = [a for a in selected if matches_search(a, search_text)]

    status_value = getattr(status_filter, "value", status_filter)
    if status_value and status_value != ALL_STATUSES:
        selected = [a for a in selected if a.status.value == status_value]

    if tag_filter:
        selected = [a for a in selected if any(tag in tag_filter for tag in a.tags)]

    selected = [a for a in selected if in_date_range(a, date_range)]

    return sorted(
        selected,
        key=lambda a: getattr(a, sort_field),
        reverse=sort_order == "desc",
    )
