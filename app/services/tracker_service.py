"""
Application tracker: the owner's in-memory snapshot plus every mutation on it.

Each operation runs to completion against the snapshot: the new record state
is computed first, written to the store, and only then committed locally, so
a store failure leaves the snapshot untouched. Every change that the timeline
audits appends its event in the same write.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from app.core.exceptions import (
    ApplicationNotFoundError,
    JobGenieError,
    NoteNotFoundError,
    ReminderNotFoundError,
)
from app.schemas.application import (
    ApplicationRecord,
    ApplicationStatus,
    BulkItemResult,
    BulkResult,
    Note,
    Reminder,
    StatusTransition,
    TimelineEvent,
    utc_now,
)
from app.services.application_store import ApplicationStore

logger = logging.getLogger(__name__)

CREATED_EVENT_TITLE = "Application Created"
STATUS_UPDATED_TITLE = "Status Updated"


def new_id() -> str:
    return uuid4().hex


def status_change_event(
    old: Optional[ApplicationStatus],
    new: ApplicationStatus,
    when: datetime,
) -> TimelineEvent:
    if old is None:
        return TimelineEvent(
            id=new_id(),
            type="status_change",
            title=CREATED_EVENT_TITLE,
            description=f"Created as {new.value}",
            date=when,
            created_at=when,
        )
    return TimelineEvent(
        id=new_id(),
        type="status_change",
        title=STATUS_UPDATED_TITLE,
        description=f"Changed from {old.value} to {new.value}",
        date=when,
        created_at=when,
        transition=StatusTransition(from_status=old, to_status=new),
    )


class ApplicationTracker:
    """Holds one owner's applications and applies mutations through the store."""

    def __init__(self, store: ApplicationStore, owner_id: str):
        self.store = store
        self.owner_id = owner_id
        self.applications: List[ApplicationRecord] = []

    # ------------------------------------------------------------------
    # snapshot
    # ------------------------------------------------------------------

    def load(self) -> List[ApplicationRecord]:
        self.applications = self.store.list_by_owner(self.owner_id)
        return self.applications

    def get(self, application_id: str) -> ApplicationRecord:
        for application in self.applications:
            if application.id == application_id:
                return application
        raise ApplicationNotFoundError(application_id)

    def active(self) -> List[ApplicationRecord]:
        return [a for a in self.applications if not a.deleted]

    def active_tags(self) -> List[str]:
        tags = set()
        for application in self.applications:
            tags.update(application.tags)
        return sorted(tags)

    def _replace(self, record: ApplicationRecord) -> None:
        self.applications = [
            record if a.id == record.id else a for a in self.applications
        ]

    # ------------------------------------------------------------------
    # create / update
    # ------------------------------------------------------------------

    def save_application(self, data: Dict[str, Any]) -> str:
        """Create a record with its initial timeline event; returns the store id."""
        now = utc_now()
        status = ApplicationStatus(data.get("status") or ApplicationStatus.DRAFT)
        record = ApplicationRecord.model_validate({
            **data,
            "user_id": self.owner_id,
            "status": status,
            "notes": data.get("notes") or [],
            "reminders": data.get("reminders") or [],
            "tags": list(dict.fromkeys(data.get("tags") or [])),
            "timeline": [status_change_event(None, status, now)],
            "created_at": now,
            "updated_at": now,
            "deleted": False,
        })
        application_id = self.store.create(self.owner_id, record)
        self.applications.append(record.model_copy(update={"id": application_id}))
        logger.info(f"Application created: id={application_id}, user_id={self.owner_id}, status={status.value}")
        return application_id

    def update_application(self, application_id: str, changes: Dict[str, Any]) -> ApplicationRecord:
        """
        Apply a partial update.

        A status that differs from the current one appends a status_change
        event; the same status is a no-op for the timeline. updated_at is
        always refreshed.
        """
        current = self.get(application_id)
        changes = dict(changes)
        changes.pop("id", None)
        changes.pop("user_id", None)
        now = utc_now()

        if "status" in changes and changes["status"] is None:
            del changes["status"]
        if "status" in changes:
            new_status = ApplicationStatus(changes["status"])
            changes["status"] = new_status
            if new_status != current.status:
                timeline = changes.get("timeline", current.timeline)
                changes["timeline"] = [*timeline, status_change_event(current.status, new_status, now)]

        if "tags" in changes and changes["tags"] is not None:
            changes["tags"] = list(dict.fromkeys(changes["tags"]))

        changes["updated_at"] = max(now, current.created_at)
        updated = ApplicationRecord.model_validate({**current.model_dump(), **changes})

        self.store.update(application_id, {k: getattr(updated, k) for k in changes})
        self._replace(updated)
        logger.info(f"Application updated: id={application_id}, fields={sorted(changes)}")
        return updated

    def delete_application(self, application_id: str) -> ApplicationRecord:
        """Soft delete; the record stays in the store."""
        return self.update_application(application_id, {"deleted": True})

    # ------------------------------------------------------------------
    # notes / reminders / tags / timeline
    # ------------------------------------------------------------------

    def add_note(self, application_id: str, content: str) -> Note:
        application = self.get(application_id)
        now = utc_now()
        note = Note(id=new_id(), content=content, created_at=now, updated_at=now)
        event = TimelineEvent(
            id=new_id(), type="note_added", title="Note Added",
            description=content, date=now, created_at=now,
        )
        self.update_application(application_id, {
            "notes": [*application.notes, note],
            "timeline": [*application.timeline, event],
        })
        return note

    def delete_note(self, application_id: str, note_id: str) -> None:
        application = self.get(application_id)
        if not any(n.id == note_id for n in application.notes):
            raise NoteNotFoundError(note_id)
        self.update_application(application_id, {
            "notes": [n for n in application.notes if n.id != note_id],
        })

    def add_reminder(self, application_id: str, title: str, due_date: datetime) -> Reminder:
        application = self.get(application_id)
        now = utc_now()
        reminder = Reminder(
            id=new_id(), title=title, due_date=due_date,
            completed=False, created_at=now, updated_at=now,
        )
        event = TimelineEvent(
            id=new_id(), type="reminder_added", title="Reminder Added",
            description=title, date=now, created_at=now,
        )
        self.update_application(application_id, {
            "reminders": [*application.reminders, reminder],
            "timeline": [*application.timeline, event],
        })
        return reminder

    def toggle_reminder(self, application_id: str, reminder_id: str) -> Reminder:
        application = self.get(application_id)
        reminder = next((r for r in application.reminders if r.id == reminder_id), None)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)

        now = utc_now()
        toggled = reminder.model_copy(update={"completed": not reminder.completed, "updated_at": now})
        event = TimelineEvent(
            id=new_id(),
            type="reminder_completed",
            title="Reminder Reopened" if reminder.completed else "Reminder Completed",
            description=reminder.title,
            date=now,
            created_at=now,
        )
        self.update_application(application_id, {
            "reminders": [toggled if r.id == reminder_id else r for r in application.reminders],
            "timeline": [*application.timeline, event],
        })
        return toggled

    def delete_reminder(self, application_id: str, reminder_id: str) -> None:
        application = self.get(application_id)
        if not any(r.id == reminder_id for r in application.reminders):
            raise ReminderNotFoundError(reminder_id)
        self.update_application(application_id, {
            "reminders": [r for r in application.reminders if r.id != reminder_id],
        })

    def add_tag(self, application_id: str, tag: str) -> List[str]:
        application = self.get(application_id)
        updated = self.update_application(application_id, {"tags": [*application.tags, tag]})
        return updated.tags

    def remove_tag(self, application_id: str, tag: str) -> List[str]:
        # Removing a tag that is not present is not an error
        application = self.get(application_id)
        updated = self.update_application(application_id, {
            "tags": [t for t in application.tags if t != tag],
        })
        return updated.tags

    def add_timeline_event(
        self,
        application_id: str,
        title: str,
        description: Optional[str] = None,
    ) -> TimelineEvent:
        application = self.get(application_id)
        now = utc_now()
        event = TimelineEvent(
            id=new_id(), type="custom", title=title,
            description=description, date=now, created_at=now,
        )
        self.update_application(application_id, {"timeline": [*application.timeline, event]})
        return event

    # ------------------------------------------------------------------
    # bulk
    # ------------------------------------------------------------------

    def _bulk(self, ids: Iterable[str], changes: Dict[str, Any]) -> BulkResult:
        result = BulkResult()
        for application_id in ids:
            try:
                self.update_application(application_id, changes)
            except JobGenieError as e:
                logger.warning(f"Bulk item failed: id={application_id}, error={e}")
                result.items.append(BulkItemResult(id=application_id, ok=False, error=str(e)))
            else:
                result.items.append(BulkItemResult(id=application_id, ok=True))
        logger.info(f"Bulk update finished: succeeded={result.succeeded}, failed={result.failed}")
        return result

    def bulk_update_status(self, ids: Iterable[str], status: ApplicationStatus) -> BulkResult:
        return self._bulk(ids, {"status": status})

    def bulk_delete(self, ids: Iterable[str]) -> BulkResult:
        return self._bulk(ids, {"deleted": True})

    def restore_records(self, records: Iterable[ApplicationRecord]) -> BulkResult:
        """Replay whole records (e.g. from a backup) as independent updates."""
        result = BulkResult()
        for record in records:
            values = record.model_dump(exclude={"id", "user_id", "created_at"})
            try:
                self.update_application(record.id, values)
            except JobGenieError as e:
                logger.warning(f"Restore item failed: id={record.id}, error={e}")
                result.items.append(BulkItemResult(id=record.id or "", ok=False, error=str(e)))
            else:
                result.items.append(BulkItemResult(id=record.id or "", ok=True))
        return result
