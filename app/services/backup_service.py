"""
Local durable cache, backups and view preferences.

The cache is an opaque key/value blob store: one JSON document per key in a
directory. Backups write the whole snapshot under a fixed key and read it
back verbatim; preferences are a save/load pair on their own key.
"""
import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from app.core.exceptions import BackupNotFoundError, StoreError
from app.schemas.application import BulkResult, utc_now
from app.schemas.preferences import BackupSnapshot, DashboardPrefs, ViewSettings
from app.services.tracker_service import ApplicationTracker

logger = logging.getLogger(__name__)

BACKUP_KEY = "jobgenie_backup"
PREFERENCES_KEY = "dashboardPrefs"

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class LocalCache:
    """Whole-blob key/value storage on the local filesystem."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def set(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(value), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            logger.error(f"Failed to write cache key {key}: {e}", exc_info=True)
            raise StoreError("Failed to write local cache") from e

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read cache key {key}: {e}", exc_info=True)
            raise StoreError("Failed to read local cache") from e


def _scoped(key: str, owner_id: str) -> str:
    return f"{key}.{owner_id}"


class BackupService:
    def __init__(self, cache: LocalCache):
        self.cache = cache

    def create_backup(
        self,
        tracker: ApplicationTracker,
        settings: Optional[ViewSettings] = None,
    ) -> BackupSnapshot:
        snapshot = BackupSnapshot(
            timestamp=utc_now(),
            applications=list(tracker.applications),
            settings=settings or ViewSettings(),
        )
        self.cache.set(_scoped(BACKUP_KEY, tracker.owner_id), snapshot.model_dump(mode="json"))
        logger.info(f"Backup created: user_id={tracker.owner_id}, applications={len(snapshot.applications)}")
        return snapshot

    def load_backup(self, owner_id: str) -> BackupSnapshot:
        key = _scoped(BACKUP_KEY, owner_id)
        raw = self.cache.get(key)
        if raw is None:
            raise BackupNotFoundError(key)
        try:
            return BackupSnapshot.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Backup for user_id={owner_id} is unreadable: {e}")
            raise StoreError("Backup is corrupted") from e

    def restore_backup(self, tracker: ApplicationTracker) -> tuple[BackupSnapshot, BulkResult]:
        """Replay every backed-up record through the tracker; partial failure is reported, not undone."""
        snapshot = self.load_backup(tracker.owner_id)
        result = tracker.restore_records(snapshot.applications)
        logger.info(
            f"Backup restored: user_id={tracker.owner_id}, "
            f"restored={result.succeeded}, failed={result.failed}"
        )
        return snapshot, result


class PreferencesService:
    def __init__(self, cache: LocalCache):
        self.cache = cache

    def load(self, owner_id: str) -> DashboardPrefs:
        raw = self.cache.get(_scoped(PREFERENCES_KEY, owner_id))
        if raw is None:
            return DashboardPrefs()
        try:
            return DashboardPrefs.model_validate(raw)
        except ValidationError:
            logger.warning(f"Ignoring unreadable preferences for user_id={owner_id}")
            return DashboardPrefs()

    def save(self, owner_id: str, prefs: DashboardPrefs) -> DashboardPrefs:
        self.cache.set(_scoped(PREFERENCES_KEY, owner_id), prefs.model_dump())
        return prefs
