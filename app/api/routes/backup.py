"""
Backup/restore of the user's applications and dashboard preferences.

Both live in the local key/value cache under CACHE_DIR.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.errors import to_http_exception
from app.core.dependencies import get_cache, get_tracker
from app.core.exceptions import JobGenieError
from app.schemas.preferences import BackupRequest, BackupResponse, DashboardPrefs, RestoreResponse
from app.services.backup_service import BackupService, LocalCache, PreferencesService
from app.services.tracker_service import ApplicationTracker

router = APIRouter(tags=["Backup"])


@router.post("/backup", response_model=BackupResponse)
def create_backup(
    data: Optional[BackupRequest] = None,
    tracker: ApplicationTracker = Depends(get_tracker),
    cache: LocalCache = Depends(get_cache),
):
    """Write every application plus the current view settings to the local cache."""
    try:
        snapshot = BackupService(cache).create_backup(tracker, data.settings if data else None)
    except JobGenieError as e:
        raise to_http_exception(e)
    return BackupResponse(timestamp=snapshot.timestamp, applications=len(snapshot.applications))


@router.post("/backup/restore", response_model=RestoreResponse)
def restore_backup(
    tracker: ApplicationTracker = Depends(get_tracker),
    cache: LocalCache = Depends(get_cache),
):
    """
    Replay the last backup over the stored applications.

    Each record is restored on its own; failures are counted and the first
    error is reported, successful records stay restored.
    """
    try:
        snapshot, result = BackupService(cache).restore_backup(tracker)
    except JobGenieError as e:
        raise to_http_exception(e)
    return RestoreResponse(
        timestamp=snapshot.timestamp,
        restored=result.succeeded,
        failed=result.failed,
        first_error=result.first_error,
        settings=snapshot.settings,
    )


@router.get("/preferences", response_model=DashboardPrefs)
def get_preferences(
    tracker: ApplicationTracker = Depends(get_tracker),
    cache: LocalCache = Depends(get_cache),
):
    try:
        return PreferencesService(cache).load(tracker.owner_id)
    except JobGenieError as e:
        raise to_http_exception(e)


@router.put("/preferences", response_model=DashboardPrefs)
def save_preferences(
    prefs: DashboardPrefs,
    tracker: ApplicationTracker = Depends(get_tracker),
    cache: LocalCache = Depends(get_cache),
):
    try:
        return PreferencesService(cache).save(tracker.owner_id, prefs)
    except JobGenieError as e:
        raise to_http_exception(e)
