"""
Tests for the per-day trend series.
"""
from datetime import timedelta

import pytest

from app.schemas.application import ApplicationStatus
from app.services.analytics_service import build_trend
from app.services.tracker_service import status_change_event

from conftest import NOW


@pytest.mark.parametrize("time_range, expected", [("week", 7), ("month", 30), ("year", 365)])
def test_bucket_count_per_range(time_range, expected, make_application):
    points = build_trend([make_application()], time_range, now=NOW)

    assert len(points) == expected
    assert points[-1].date == "2026-10-15"


def test_all_range_spans_back_to_earliest_record(make_application):
    records = [
        make_application(created_at=NOW - timedelta(days=10, hours=12)),
        make_application(created_at=NOW - timedelta(days=2)),
    ]

    points = build_trend(records, "all", now=NOW)

    assert len(points) == 11
    assert points[0].applications == 1


def test_all_range_with_no_records_has_one_bucket(make_application):
    assert len(build_trend([], "all", now=NOW)) == 1
    assert len(build_trend([make_application(deleted=True)], "all", now=NOW)) == 1


def test_points_are_oldest_first_and_consecutive():
    points = build_trend([], "week", now=NOW)

    assert [p.date for p in points] == [
        "2026-10-09", "2026-10-10", "2026-10-11", "2026-10-12",
        "2026-10-13", "2026-10-14", "2026-10-15",
    ]


def test_applications_land_in_their_creation_bucket(make_application):
    records = [
        make_application(created_at=NOW),
        make_application(created_at=NOW - timedelta(hours=1)),
        make_application(created_at=NOW - timedelta(days=2)),
        make_application(created_at=NOW - timedelta(days=30)),
        make_application(created_at=NOW, deleted=True),
    ]

    points = build_trend(records, "week", now=NOW)

    assert points[-1].applications == 2
    assert points[-3].applications == 1
    assert sum(p.applications for p in points) == 3


def test_responses_and_interviews_count_on_event_day(make_application):
    created = NOW - timedelta(days=5)
    record = make_application(
        status=ApplicationStatus.INTERVIEW,
        created_at=created,
        timeline=[
            status_change_event(None, ApplicationStatus.DRAFT, created),
            status_change_event(ApplicationStatus.DRAFT, ApplicationStatus.APPLIED, NOW - timedelta(days=3)),
            status_change_event(ApplicationStatus.APPLIED, ApplicationStatus.INTERVIEW, NOW - timedelta(days=1)),
        ],
    )

    points = build_trend([record], "week", now=NOW)

    assert points[-6].applications == 1
    assert points[-4].responses == 1
    assert points[-2].interviews == 1
    assert sum(p.responses for p in points) == 1
    assert sum(p.interviews for p in points) == 1


def test_events_of_records_created_out_of_range_are_ignored(make_application):
    created = NOW - timedelta(days=20)
    record = make_application(
        status=ApplicationStatus.APPLIED,
        created_at=created,
        timeline=[
            status_change_event(None, ApplicationStatus.DRAFT, created),
            status_change_event(ApplicationStatus.DRAFT, ApplicationStatus.APPLIED, NOW),
        ],
    )

    points = build_trend([record], "week", now=NOW)

    assert sum(p.responses for p in points) == 0
