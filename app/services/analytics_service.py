"""
Dashboard analytics: summary statistics and the per-day trend series.

Both entry points are pure functions of the records and a reference instant,
so callers (and tests) can pin `now`.
"""
import logging
import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from app.schemas.analytics import (
    CompanyCount,
    DashboardStats,
    DateCount,
    PositionCount,
    ReminderCompletion,
    TimeRange,
    TrendPoint,
)
from app.schemas.application import (
    ApplicationRecord,
    ApplicationStatus,
    TimelineEvent,
    utc_now,
)
from app.services.tracker_service import CREATED_EVENT_TITLE

logger = logging.getLogger(__name__)

DAY = timedelta(days=1)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
RANGE_DAYS: Dict[str, int] = {"week": 7, "month": 30, "year": 365}
TOP_N = 5

HIGH_RESPONSE_RATE = 50
GOOD_INTERVIEW_RATE = 30
QUICK_RESPONSE_DAYS = 7


# ============================================
# Timeline lookups
# ============================================

def find_created_event(timeline: Iterable[TimelineEvent]) -> Optional[TimelineEvent]:
    for event in timeline:
        if event.type == "status_change" and event.title == CREATED_EVENT_TITLE:
            return event
    return None


def find_transition_event(
    timeline: Iterable[TimelineEvent],
    status: ApplicationStatus,
) -> Optional[TimelineEvent]:
    """
    First status-change event that moved the record into `status`.

    Events with an explicit transition payload are matched on it; older
    events without one fall back to "to <status>" in the description.
    """
    for event in timeline:
        if event.type != "status_change":
            continue
        if event.transition is not None:
            if event.transition.to_status == status:
                return event
        elif event.description and f"to {status.value}" in event.description:
            return event
    return None


def window_start(time_range: TimeRange, now: datetime) -> datetime:
    if time_range == "all":
        return EPOCH
    return now - timedelta(days=RANGE_DAYS[time_range])


def _rate(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return min(100.0, numerator / denominator * 100)


# ============================================
# Summary statistics
# ============================================

def summarize(
    applications: Iterable[ApplicationRecord],
    time_range: TimeRange = "month",
    now: Optional[datetime] = None,
) -> DashboardStats:
    """
    Compute dashboard statistics over non-deleted applications created
    within the time window.

    response_rate is interview count over applied count, interview_rate is
    offer count over interview count and offer_rate is offer count over
    applied count, each as a percentage and 0 when the denominator is 0.
    """
    now = now or utc_now()
    cutoff = window_start(time_range, now)
    windowed = [a for a in applications if not a.deleted and a.created_at >= cutoff]

    status_distribution: Dict[str, int] = {}
    companies: Counter = Counter()
    positions: Counter = Counter()
    per_day: Counter = Counter()
    tags: Dict[str, int] = {}
    reminders = ReminderCompletion()

    total_response_time = timedelta(0)
    total_interview_time = timedelta(0)
    response_count = 0
    interview_count = 0

    for application in windowed:
        status = application.status.value
        status_distribution[status] = status_distribution.get(status, 0) + 1

        if application.company_name:
            companies[application.company_name] += 1
        if application.position:
            positions[application.position] += 1

        per_day[application.created_at.date().isoformat()] += 1

        for tag in application.tags:
            tags[tag] = tags.get(tag, 0) + 1

        for reminder in application.reminders:
            reminders.total += 1
            if reminder.completed:
                reminders.completed += 1

        created_event = find_created_event(application.timeline)
        applied_event = find_transition_event(application.timeline, ApplicationStatus.APPLIED)
        interview_event = find_transition_event(application.timeline, ApplicationStatus.INTERVIEW)

        if created_event and applied_event:
            total_response_time += applied_event.date - created_event.date
            response_count += 1
        if applied_event and interview_event:
            total_interview_time += interview_event.date - applied_event.date
            interview_count += 1

    applied = status_distribution.get(ApplicationStatus.APPLIED.value, 0)
    interviews = status_distribution.get(ApplicationStatus.INTERVIEW.value, 0)
    offers = status_distribution.get(ApplicationStatus.OFFER.value, 0)

    stats = DashboardStats(
        total_applications=len(windowed),
        status_distribution=status_distribution,
        response_rate=_rate(interviews, applied),
        interview_rate=_rate(offers, interviews),
        offer_rate=_rate(offers, applied),
        average_response_time=(total_response_time / response_count / DAY) if response_count else 0.0,
        average_interview_time=(total_interview_time / interview_count / DAY) if interview_count else 0.0,
        top_companies=[CompanyCount(name=n, count=c) for n, c in companies.most_common(TOP_N)],
        top_positions=[PositionCount(position=p, count=c) for p, c in positions.most_common(TOP_N)],
        application_trend=[DateCount(date=d, count=per_day[d]) for d in sorted(per_day)],
        tag_distribution=tags,
        reminder_completion=reminders,
    )
    _add_insights(stats)

    logger.debug(f"Stats computed: range={time_range}, total={stats.total_applications}")
    return stats


def _add_insights(stats: DashboardStats) -> None:
    if stats.response_rate > HIGH_RESPONSE_RATE:
        stats.success_insights.append("High response rate indicates strong application materials")
    else:
        stats.improvement_insights.append("Consider reviewing and improving application materials")

    if stats.interview_rate > GOOD_INTERVIEW_RATE:
        stats.success_insights.append("Good interview conversion rate")
    else:
        stats.improvement_insights.append("Focus on interview preparation and follow-up")

    if stats.average_response_time < QUICK_RESPONSE_DAYS:
        stats.success_insights.append("Quick response times from companies")
    else:
        stats.improvement_insights.append("Consider following up on applications after 1 week")


# ============================================
# Trend series
# ============================================

def bucket_count(
    applications: Iterable[ApplicationRecord],
    time_range: TimeRange,
    now: datetime,
) -> int:
    if time_range != "all":
        return RANGE_DAYS[time_range]
    created = [a.created_at for a in applications if not a.deleted]
    if not created:
        return 1
    return max(1, math.ceil((now - min(created)) / DAY))


def build_trend(
    applications: Iterable[ApplicationRecord],
    time_range: TimeRange = "month",
    now: Optional[datetime] = None,
) -> List[TrendPoint]:
    """
    One bucket per calendar day, oldest first, ending today.

    An application lands in the bucket of its creation day; if that bucket is
    in range, its first move to applied and first move to interview also
    count as a response and an interview on the days they happened.
    """
    now = now or utc_now()
    applications = list(applications)
    days = bucket_count(applications, time_range, now)

    points = [
        TrendPoint(date=(now - (days - i - 1) * DAY).date().isoformat())
        for i in range(days)
    ]

    def bucket_index(moment: datetime) -> Optional[int]:
        days_ago = (now - moment) // DAY
        if 0 <= days_ago < days:
            return days - days_ago - 1
        return None

    for application in applications:
        if application.deleted:
            continue
        index = bucket_index(application.created_at)
        if index is None:
            continue
        points[index].applications += 1

        response_event = find_transition_event(application.timeline, ApplicationStatus.APPLIED)
        if response_event:
            response_index = bucket_index(response_event.date)
            if response_index is not None:
                points[response_index].responses += 1

        interview_event = find_transition_event(application.timeline, ApplicationStatus.INTERVIEW)
        if interview_event:
            interview_index = bucket_index(interview_event.date)
            if interview_index is not None:
                points[interview_index].interviews += 1

    return points
