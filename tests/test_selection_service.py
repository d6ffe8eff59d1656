"""
Tests for the application list filter/sort stage.
"""
from datetime import timedelta

from app.schemas.application import ApplicationStatus, DateRange, Note, Reminder
from app.services.selection_service import select_applications

from conftest import NOW


def test_deleted_records_are_dropped(make_application):
    kept = make_application(company_name="Acme")
    gone = make_application(company_name="Acme", deleted=True)

    result = select_applications([kept, gone])

    assert [a.id for a in result] == [kept.id]


def test_search_is_case_insensitive_across_fields(make_application):
    """Search reaches notes, reminder titles and tags, not only the main text fields."""
    by_company = make_application(company_name="ACME Corp")
    by_note = make_application(notes=[Note(id="n1", content="Call acme recruiter", created_at=NOW, updated_at=NOW)])
    by_reminder = make_application(reminders=[
        Reminder(id="r1", title="Acme follow-up", due_date=NOW, created_at=NOW, updated_at=NOW)
    ])
    by_tag = make_application(tags=["acme-referral"])
    other = make_application(company_name="Beta")

    result = select_applications([by_company, by_note, by_reminder, by_tag, other], search_text="aCmE")

    assert {a.id for a in result} == {by_company.id, by_note.id, by_reminder.id, by_tag.id}


def test_empty_search_passes_everything(make_application):
    records = [make_application(), make_application()]
    assert len(select_applications(records, search_text="")) == 2


def test_status_filter_and_all_sentinel(make_application):
    applied = make_application(status=ApplicationStatus.APPLIED)
    offer = make_application(status=ApplicationStatus.OFFER)

    assert select_applications([applied, offer], status_filter="offer") == [offer]
    assert select_applications([applied, offer], status_filter=ApplicationStatus.APPLIED) == [applied]
    assert len(select_applications([applied, offer], status_filter="all")) == 2


def test_tag_filter_matches_any_tag(make_application):
    remote = make_application(tags=["remote", "python"])
    onsite = make_application(tags=["onsite"])
    untagged = make_application()

    result = select_applications([remote, onsite, untagged], tag_filter={"remote", "contract"})
    assert result == [remote]

    assert len(select_applications([remote, onsite, untagged], tag_filter=set())) == 3


def test_single_day_date_range_is_inclusive(make_application):
    """start == end keeps only records created exactly at that instant."""
    exact = make_application(created_at=NOW)
    before = make_application(created_at=NOW - timedelta(seconds=1))
    after = make_application(created_at=NOW + timedelta(seconds=1))

    result = select_applications([before, exact, after], date_range=DateRange(start=NOW, end=NOW))

    assert result == [exact]


def test_open_ended_date_range(make_application):
    old = make_application(created_at=NOW - timedelta(days=10))
    recent = make_application(created_at=NOW)

    result = select_applications([old, recent], date_range=DateRange(start=NOW - timedelta(days=1)))

    assert result == [recent]


def test_sort_by_created_at_desc_by_default(make_application):
    first = make_application(created_at=NOW - timedelta(days=2))
    second = make_application(created_at=NOW - timedelta(days=1))
    third = make_application(created_at=NOW)

    assert select_applications([second, first, third]) == [third, second, first]
    assert select_applications([second, first, third], sort_order="asc") == [first, second, third]


def test_sort_by_updated_at(make_application):
    stale = make_application(created_at=NOW, updated_at=NOW)
    touched = make_application(created_at=NOW - timedelta(days=5), updated_at=NOW + timedelta(hours=1))

    assert select_applications([stale, touched], sort_field="updated_at") == [touched, stale]


def test_sort_is_stable_for_equal_timestamps(make_application):
    records = [make_application(created_at=NOW, company_name=name) for name in ("A", "B", "C")]

    assert [a.company_name for a in select_applications(records)] == ["A", "B", "C"]
    assert [a.company_name for a in select_applications(records, sort_order="asc")] == ["A", "B", "C"]


def test_input_is_not_reordered(make_application):
    records = [
        make_application(created_at=NOW - timedelta(days=1)),
        make_application(created_at=NOW),
    ]
    original = list(records)

    select_applications(records)

    assert records == original
