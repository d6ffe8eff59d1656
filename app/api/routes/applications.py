"""
Application endpoints for the job tracker.

CRUD, bulk actions, notes, reminders, tags, timeline, AI generation and PDF
export for the authenticated user's applications.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.errors import to_http_exception
from app.core.dependencies import get_generation_service, get_tracker
from app.core.exceptions import JobGenieError
from app.schemas.application import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationRecord,
    ApplicationUpdate,
    BulkDeleteRequest,
    BulkResultResponse,
    BulkStatusRequest,
    DateRange,
    GenerationResponse,
    Note,
    NoteCreate,
    Reminder,
    ReminderCreate,
    SortField,
    SortOrder,
    TagRequest,
    TimelineEvent,
    TimelineEventCreate,
)
from app.services.export_service import ExportService
from app.services.generation_service import GenerationService
from app.services.selection_service import ALL_STATUSES, select_applications
from app.services.tracker_service import ApplicationTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


# ============================================
# ✅ CREATE / LIST
# ============================================

@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApplicationRecord)
def create_application(
    data: ApplicationCreate,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """
    Create a new application.

    The record starts with a single "Application Created" timeline event.
    """
    try:
        application_id = tracker.save_application(data.model_dump())
        return tracker.get(application_id)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    search: str = Query("", description="Case-insensitive search across text fields, notes, reminders and tags"),
    status_filter: str = Query(ALL_STATUSES, alias="status", description="Status value or 'all'"),
    tags: List[str] = Query([], description="Keep records carrying any of these tags"),
    start: Optional[datetime] = Query(None, description="Earliest created_at (inclusive)"),
    end: Optional[datetime] = Query(None, description="Latest created_at (inclusive)"),
    sort_field: SortField = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """List the user's non-deleted applications, filtered and sorted."""
    selected = select_applications(
        tracker.applications,
        search_text=search,
        status_filter=status_filter,
        tag_filter=frozenset(tags),
        date_range=DateRange(start=start, end=end),
        sort_field=sort_field,
        sort_order=sort_order,
    )
    logger.debug(f"Applications listed: user_id={tracker.owner_id}, total={len(selected)}")
    return ApplicationListResponse(applications=selected, total=len(selected))


@router.get("/tags", response_model=List[str])
def list_tags(tracker: ApplicationTracker = Depends(get_tracker)):
    """Every tag used on the user's applications, sorted."""
    return tracker.active_tags()


# ============================================
# ✅ BULK ACTIONS
# ============================================

@router.post("/bulk/status", response_model=BulkResultResponse)
def bulk_update_status(
    data: BulkStatusRequest,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Set one status on many applications; each id succeeds or fails on its own."""
    result = tracker.bulk_update_status(data.ids, data.status)
    return BulkResultResponse.from_result(result)


@router.post("/bulk/delete", response_model=BulkResultResponse)
def bulk_delete(
    data: BulkDeleteRequest,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    result = tracker.bulk_delete(data.ids)
    return BulkResultResponse.from_result(result)


# ============================================
# ✅ SINGLE APPLICATION
# ============================================

@router.get("/{application_id}", response_model=ApplicationRecord)
def get_application(
    application_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        application = tracker.get(application_id)
    except JobGenieError as e:
        raise to_http_exception(e)
    if application.deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return application


@router.patch("/{application_id}", response_model=ApplicationRecord)
def update_application(
    application_id: str,
    data: ApplicationUpdate,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """
    Partially update an application.

    Only fields present in the request body change. A new status appends a
    "Status Updated" event to the timeline.
    """
    try:
        return tracker.update_application(application_id, data.model_dump(exclude_unset=True))
    except JobGenieError as e:
        raise to_http_exception(e)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Soft delete: the record is hidden from lists and analytics but kept in the store."""
    try:
        tracker.delete_application(application_id)
    except JobGenieError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================
# ✅ NOTES / REMINDERS / TAGS / TIMELINE
# ============================================

@router.post("/{application_id}/notes", status_code=status.HTTP_201_CREATED, response_model=Note)
def add_note(
    application_id: str,
    data: NoteCreate,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.add_note(application_id, data.content)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.delete("/{application_id}/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    application_id: str,
    note_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        tracker.delete_note(application_id, note_id)
    except JobGenieError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{application_id}/reminders", status_code=status.HTTP_201_CREATED, response_model=Reminder)
def add_reminder(
    application_id: str,
    data: ReminderCreate,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.add_reminder(application_id, data.title, data.due_date)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.post("/{application_id}/reminders/{reminder_id}/toggle", response_model=Reminder)
def toggle_reminder(
    application_id: str,
    reminder_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Flip a reminder between completed and open."""
    try:
        return tracker.toggle_reminder(application_id, reminder_id)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.delete("/{application_id}/reminders/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reminder(
    application_id: str,
    reminder_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        tracker.delete_reminder(application_id, reminder_id)
    except JobGenieError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{application_id}/tags", response_model=List[str])
def add_tag(
    application_id: str,
    data: TagRequest,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.add_tag(application_id, data.tag)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.delete("/{application_id}/tags/{tag}", response_model=List[str])
def remove_tag(
    application_id: str,
    tag: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.remove_tag(application_id, tag)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.get("/{application_id}/timeline", response_model=List[TimelineEvent])
def get_timeline(
    application_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.get(application_id).timeline
    except JobGenieError as e:
        raise to_http_exception(e)


@router.post("/{application_id}/timeline", status_code=status.HTTP_201_CREATED, response_model=TimelineEvent)
def add_timeline_event(
    application_id: str,
    data: TimelineEventCreate,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    try:
        return tracker.add_timeline_event(application_id, data.title, data.description)
    except JobGenieError as e:
        raise to_http_exception(e)


# ============================================
# ✅ AI GENERATION / EXPORT
# ============================================

@router.post("/{application_id}/generate", response_model=GenerationResponse)
def generate_documents(
    application_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
    service: GenerationService = Depends(get_generation_service),
):
    """Generate a tailored résumé and cover letter and store them on the application."""
    try:
        return service.generate(tracker, application_id)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.get("/{application_id}/export")
def export_application(
    application_id: str,
    tracker: ApplicationTracker = Depends(get_tracker),
):
    """Download the application as a PDF document."""
    try:
        exported = ExportService().application_pdf(tracker.get(application_id))
    except JobGenieError as e:
        raise to_http_exception(e)
    return Response(
        content=exported.data,
        media_type=exported.content_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
