"""
Tests for tracker mutations against the SQLite-backed record store.
"""
from datetime import timedelta

import pytest

from app.core.exceptions import (
    ApplicationNotFoundError,
    NoteNotFoundError,
    ReminderNotFoundError,
    StoreError,
)
from app.schemas.application import ApplicationStatus, utc_now
from app.services.application_store import ApplicationStore
from app.services.tracker_service import ApplicationTracker


class FailingStore(ApplicationStore):
    """Store whose updates fail for the given ids (all ids when none are given)."""

    def __init__(self, db, failing_ids=None):
        super().__init__(db)
        self.failing_ids = failing_ids

    def update(self, application_id, partial):
        if self.failing_ids is None or application_id in self.failing_ids:
            raise StoreError("Failed to update application")
        super().update(application_id, partial)


@pytest.fixture
def tracker(db_session):
    return ApplicationTracker(ApplicationStore(db_session), owner_id="1")


def _create(tracker, **fields):
    data = {"resume_details": "Ten years of Python", "job_description": "Senior backend engineer"}
    data.update(fields)
    return tracker.save_application(data)


def test_create_starts_timeline_with_created_event(tracker):
    application_id = _create(tracker, company_name="Acme")

    record = tracker.get(application_id)
    assert record.status == ApplicationStatus.DRAFT
    assert len(record.timeline) == 1
    assert record.timeline[0].type == "status_change"
    assert record.timeline[0].title == "Application Created"
    assert record.user_id == "1"


def test_status_changes_append_one_event_each(tracker):
    """draft -> applied adds one event; applied -> applied adds none."""
    application_id = _create(tracker)

    tracker.update_application(application_id, {"status": "applied"})
    record = tracker.get(application_id)
    assert len(record.timeline) == 2
    event = record.timeline[1]
    assert event.type == "status_change"
    assert event.title == "Status Updated"
    assert event.transition.from_status == ApplicationStatus.DRAFT
    assert event.transition.to_status == ApplicationStatus.APPLIED
    assert event.description == "Changed from draft to applied"

    tracker.update_application(application_id, {"status": ApplicationStatus.APPLIED})
    assert len(tracker.get(application_id).timeline) == 2


def test_update_persists_and_reloads(tracker, db_session):
    application_id = _create(tracker)
    tracker.update_application(application_id, {"status": "interview", "position": "Staff Engineer"})
    tracker.add_note(application_id, "Recruiter call went well")

    reloaded = ApplicationTracker(ApplicationStore(db_session), owner_id="1")
    reloaded.load()
    record = reloaded.get(application_id)

    assert record.status == ApplicationStatus.INTERVIEW
    assert record.position == "Staff Engineer"
    assert [n.content for n in record.notes] == ["Recruiter call went well"]
    assert record.timeline[1].transition.to_status == ApplicationStatus.INTERVIEW


def test_updated_at_never_precedes_created_at(tracker):
    application_id = _create(tracker)
    record = tracker.update_application(application_id, {"company_name": "Beta"})

    assert record.updated_at >= record.created_at


def test_add_then_remove_tag_leaves_no_tags(tracker):
    application_id = _create(tracker)

    assert tracker.add_tag(application_id, "remote") == ["remote"]
    assert tracker.remove_tag(application_id, "remote") == []
    # second removal is not an error
    assert tracker.remove_tag(application_id, "remote") == []


def test_tags_are_a_set(tracker):
    application_id = _create(tracker, tags=["remote", "remote"])
    assert tracker.get(application_id).tags == ["remote"]

    tracker.add_tag(application_id, "remote")
    tracker.add_tag(application_id, "python")

    assert tracker.get(application_id).tags == ["remote", "python"]
    assert tracker.active_tags() == ["python", "remote"]


def test_notes_and_reminders(tracker):
    application_id = _create(tracker)

    note = tracker.add_note(application_id, "Sent portfolio")
    reminder = tracker.add_reminder(application_id, "Follow up", utc_now() + timedelta(days=7))
    toggled = tracker.toggle_reminder(application_id, reminder.id)

    record = tracker.get(application_id)
    assert toggled.completed is True
    assert [e.type for e in record.timeline] == [
        "status_change", "note_added", "reminder_added", "reminder_completed",
    ]
    assert record.timeline[-1].title == "Reminder Completed"

    reopened = tracker.toggle_reminder(application_id, reminder.id)
    assert reopened.completed is False
    assert tracker.get(application_id).timeline[-1].title == "Reminder Reopened"

    tracker.delete_note(application_id, note.id)
    tracker.delete_reminder(application_id, reminder.id)
    record = tracker.get(application_id)
    assert record.notes == []
    assert record.reminders == []


def test_custom_timeline_event(tracker):
    application_id = _create(tracker)

    event = tracker.add_timeline_event(application_id, "Onsite scheduled", "Tuesday 10am")

    assert event.type == "custom"
    assert tracker.get(application_id).timeline[-1].title == "Onsite scheduled"


def test_missing_targets_raise_not_found(tracker):
    application_id = _create(tracker)

    with pytest.raises(ApplicationNotFoundError):
        tracker.update_application("missing", {"status": "applied"})
    with pytest.raises(ApplicationNotFoundError):
        tracker.add_note("missing", "text")
    with pytest.raises(NoteNotFoundError):
        tracker.delete_note(application_id, "missing")
    with pytest.raises(ReminderNotFoundError):
        tracker.toggle_reminder(application_id, "missing")
    with pytest.raises(ReminderNotFoundError):
        tracker.delete_reminder(application_id, "missing")


def test_store_failure_leaves_snapshot_unchanged(tracker, db_session):
    application_id = _create(tracker)
    before = tracker.get(application_id)
    tracker.store = FailingStore(db_session)

    with pytest.raises(StoreError):
        tracker.update_application(application_id, {"status": "applied"})

    assert tracker.get(application_id) == before


def test_soft_delete_keeps_record_in_store(tracker, db_session):
    application_id = _create(tracker)

    tracker.delete_application(application_id)

    assert tracker.get(application_id).deleted is True
    assert tracker.active() == []
    reloaded = ApplicationStore(db_session).list_by_owner("1")
    assert [(r.id, r.deleted) for r in reloaded] == [(application_id, True)]


def test_bulk_status_reports_each_item(tracker):
    first = _create(tracker)
    second = _create(tracker)

    result = tracker.bulk_update_status([first, "missing", second], ApplicationStatus.APPLIED)

    assert result.succeeded == 2
    assert result.failed == 1
    assert result.first_error == "Application not found"
    assert [item.ok for item in result.items] == [True, False, True]
    assert tracker.get(first).status == ApplicationStatus.APPLIED
    assert tracker.get(second).status == ApplicationStatus.APPLIED


def test_bulk_failure_does_not_roll_back_other_items(tracker, db_session):
    first = _create(tracker)
    second = _create(tracker)
    tracker.store = FailingStore(db_session, failing_ids={second})

    result = tracker.bulk_delete([first, second])

    assert result.succeeded == 1
    assert result.first_error == "Failed to update application"
    assert tracker.get(first).deleted is True
    assert tracker.get(second).deleted is False


def test_restore_records_replays_snapshot(tracker):
    application_id = _create(tracker, company_name="Acme")
    snapshot = list(tracker.applications)
    tracker.update_application(application_id, {"company_name": "Changed", "status": "offer"})

    result = tracker.restore_records(snapshot)

    assert result.succeeded == 1
    record = tracker.get(application_id)
    assert record.company_name == "Acme"
    assert record.status == ApplicationStatus.DRAFT
