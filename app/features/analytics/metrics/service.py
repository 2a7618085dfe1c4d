"""
Pipeline analytics over a user's saved jobs.

All functions are pure and operate on already-fetched records. Statuses are
compared after normalisation ("Phone Screen", "phone-screen" and
"phone_screen" are the same stage), and every day count is a whole-day
difference truncated toward zero unless noted otherwise.
"""

from __future__ import annotations

import math
import statistics
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from app.features.analytics.domain.models import (
    ConversionRates,
    InterviewRecord,
    JobAnalytics,
    JobRecord,
    MonthlyCount,
    OfferRecord,
    StatusChange,
    UpcomingDeadline,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

FUNNEL_STAGES = ("interested", "applied", "phone_screen", "interview", "offer", "rejected")

_STATUS_ALIASES = {
    "wishlist": "interested",
    "saved": "interested",
    "interviewing": "interview",
    "accepted": "offer",
    "withdrawn": "rejected",
}

# Progress rank; rejected jobs were applied to but went no further
_STAGE_RANK = {
    "interested": 0,
    "applied": 1,
    "rejected": 1,
    "phone_screen": 2,
    "interview": 3,
    "offer": 4,
}

_RESPONSE_STATUSES = frozenset({"phone_screen", "interview", "offer", "rejected"})

_MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SECONDS_PER_DAY = 86400


def normalize_status(status: str | None) -> str:
    if not status:
        return ""
    key = status.strip().lower().replace("-", "_").replace(" ", "_")
    return _STATUS_ALIASES.get(key, key)


def _rank(status: str | None) -> int:
    return _STAGE_RANK.get(normalize_status(status), -1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _whole_days(later: datetime, earlier: datetime) -> int:
    return int((_as_utc(later) - _as_utc(earlier)).total_seconds() / SECONDS_PER_DAY)


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return int(math.floor(numerator / denominator * 100 + 0.5))


def _first_change(history: Iterable[StatusChange], status: str) -> StatusChange | None:
    return next((change for change in history if normalize_status(change.status) == status), None)


def _month_label(value: datetime) -> str:
    return f"{_MONTH_LABELS[value.month - 1]} {value.year}"


def attach_status_history(
    jobs: Sequence[JobRecord], history: Iterable[StatusChange]
) -> list[JobRecord]:
    """
    Give each job its status changes in chronological order.

    Rows from the history table replace whatever the job carried inline; jobs
    without table rows keep their own status_history.
    """
    by_job: dict[str, list[StatusChange]] = defaultdict(list)
    for change in history:
        if change.job_id:
            by_job[change.job_id].append(change)

    attached = []
    for job in jobs:
        changes = by_job.get(job.id)
        if changes:
            ordered = sorted(changes, key=lambda change: _as_utc(change.changed_at))
            job = job.model_copy(update={"status_history": ordered})
        attached.append(job)
    return attached


def calculate_applications_sent(jobs: Iterable[JobRecord]) -> int:
    return sum(1 for job in jobs if _rank(job.status) >= _STAGE_RANK["applied"])


def calculate_interviews_scheduled(interviews: Iterable[InterviewRecord]) -> int:
    return sum(1 for interview in interviews if interview.scheduled_start or interview.interview_date)


def calculate_offers_received(
    jobs: Iterable[JobRecord], offers: Sequence[OfferRecord] | None = None
) -> int:
    """Offer count; an explicit offers list wins over job statuses."""
    if offers is not None:
        return len(offers)
    return sum(1 for job in jobs if normalize_status(job.status) == "offer")


def calculate_conversion_rates(jobs: Iterable[JobRecord]) -> ConversionRates:
    applied = interviewed = offered = 0
    for job in jobs:
        rank = _rank(job.status)
        if rank >= _STAGE_RANK["applied"]:
            applied += 1
        if rank >= _STAGE_RANK["interview"]:
            interviewed += 1
        if rank >= _STAGE_RANK["offer"]:
            offered += 1

    return ConversionRates(
        applied_to_interview=_percent(interviewed, applied),
        interview_to_offer=_percent(offered, interviewed),
        applied_to_offer=_percent(offered, applied),
    )


def calculate_median_time_to_response(
    jobs: Iterable[JobRecord], status_history: Iterable[StatusChange]
) -> int | None:
    """
    Median days between applying and the first response for each job.

    A response is the first change after "applied" into phone screen,
    interview, offer or rejected. Returns None when no job has both.
    """
    job_ids = {job.id for job in jobs}
    by_job: dict[str, list[StatusChange]] = defaultdict(list)
    for change in status_history:
        if change.job_id in job_ids:
            by_job[change.job_id].append(change)

    response_days: list[int] = []
    for changes in by_job.values():
        ordered = sorted(changes, key=lambda change: _as_utc(change.changed_at))
        applied = _first_change(ordered, "applied")
        if applied is None:
            continue
        response = next(
            (
                change
                for change in ordered
                if normalize_status(change.status) in _RESPONSE_STATUSES
                and _as_utc(change.changed_at) > _as_utc(applied.changed_at)
            ),
            None,
        )
        if response is not None:
            response_days.append(_whole_days(response.changed_at, applied.changed_at))

    if not response_days:
        return None
    return int(math.floor(statistics.median(response_days) + 0.5))


def calculate_average_time_in_stage(jobs: Iterable[JobRecord]) -> dict[str, int]:
    """Average whole days spent in each status before the next change."""
    stage_days: dict[str, list[int]] = defaultdict(list)
    for job in jobs:
        history = job.status_history
        for previous, current in zip(history, history[1:]):
            stage_days[normalize_status(previous.status)].append(
                _whole_days(current.changed_at, previous.changed_at)
            )

    return {
        stage: int(math.floor(sum(days) / len(days) + 0.5))
        for stage, days in stage_days.items()
    }


def calculate_deadline_adherence(jobs: Iterable[JobRecord]) -> int:
    """Percent of jobs with a deadline that were applied to on or before it."""
    with_deadline = [job for job in jobs if job.application_deadline]
    if not with_deadline:
        return 100

    met = 0
    for job in with_deadline:
        applied = _first_change(job.status_history, "applied")
        if applied and _as_utc(applied.changed_at) <= _as_utc(job.application_deadline):
            met += 1
    return _percent(met, len(with_deadline))


def calculate_time_to_offer(jobs: Iterable[JobRecord]) -> int | None:
    """Average days from applied to offer across jobs currently at offer."""
    durations = []
    for job in jobs:
        if normalize_status(job.status) != "offer":
            continue
        applied = _first_change(job.status_history, "applied")
        offer = _first_change(job.status_history, "offer")
        if applied and offer:
            durations.append(_whole_days(offer.changed_at, applied.changed_at))

    if not durations:
        return None
    return int(math.floor(sum(durations) / len(durations) + 0.5))


def get_upcoming_deadlines(
    jobs: Iterable[JobRecord], days: int = 30, *, now: datetime | None = None
) -> list[UpcomingDeadline]:
    now = _as_utc(now) if now else datetime.now(UTC)
    horizon = now + timedelta(days=days)

    upcoming = []
    for job in jobs:
        if not job.application_deadline or job.is_archived:
            continue
        deadline = _as_utc(job.application_deadline)
        if not now <= deadline <= horizon:
            continue
        upcoming.append(
            UpcomingDeadline(
                job_id=job.id,
                job_title=job.job_title,
                company=job.company_name or "Unknown",
                deadline=deadline,
                # Partial days count as a full day left
                days_until=math.ceil((deadline - now).total_seconds() / SECONDS_PER_DAY),
            )
        )

    return sorted(upcoming, key=lambda item: item.days_until)


def get_monthly_applications(
    jobs: Iterable[JobRecord], months: int = 6, *, now: datetime | None = None
) -> list[MonthlyCount]:
    """Applications per calendar month for the last N months, oldest first."""
    now = _as_utc(now) if now else datetime.now(UTC)

    buckets: dict[str, int] = {}
    for offset in range(months - 1, -1, -1):
        year, month_index = divmod(now.year * 12 + now.month - 1 - offset, 12)
        buckets[f"{_MONTH_LABELS[month_index]} {year}"] = 0

    for job in jobs:
        applied = _first_change(job.status_history, "applied")
        if applied is None:
            continue
        label = _month_label(_as_utc(applied.changed_at))
        if label in buckets:
            buckets[label] += 1

    return [MonthlyCount(month=label, count=count) for label, count in buckets.items()]


def calculate_funnel_counts(jobs: Iterable[JobRecord]) -> dict[str, int]:
    """Jobs per current funnel stage; unknown statuses are not counted."""
    counts = Counter(normalize_status(job.status) for job in jobs)
    return {stage: counts.get(stage, 0) for stage in FUNNEL_STAGES}


def calculate_response_rate(jobs: Iterable[JobRecord]) -> int:
    """Percent of applied jobs that heard back (screen, interview, offer or rejection)."""
    applied = responded = 0
    for job in jobs:
        if _rank(job.status) < _STAGE_RANK["applied"]:
            continue
        applied += 1
        if normalize_status(job.status) in _RESPONSE_STATUSES:
            responded += 1
    return _percent(responded, applied)


def build_job_analytics(
    jobs: Sequence[JobRecord],
    *,
    deadline_window_days: int = 30,
    months: int = 6,
    now: datetime | None = None,
) -> JobAnalytics:
    """Dashboard summary for a user's jobs."""
    by_status = Counter(normalize_status(job.status) for job in jobs)

    analytics = JobAnalytics(
        total=len(jobs),
        by_status=dict(by_status),
        response_rate=calculate_response_rate(jobs),
        avg_time_in_stage=calculate_average_time_in_stage(jobs),
        deadline_adherence=calculate_deadline_adherence(jobs),
        time_to_offer=calculate_time_to_offer(jobs),
        upcoming_deadlines=get_upcoming_deadlines(jobs, deadline_window_days, now=now),
        monthly_applications=get_monthly_applications(jobs, months, now=now),
    )
    logger.debug(
        "Job analytics built",
        total=analytics.total,
        response_rate=analytics.response_rate,
        upcoming=len(analytics.upcoming_deadlines),
    )
    return analytics
