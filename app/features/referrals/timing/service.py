"""
Referral request timing heuristic.

Additive scoring, not a statistical model. Factors are evaluated in a fixed
order and each one adds a reasoning line plus points to a confidence
accumulator, so the reasoning list follows that order.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from app.features.referrals.domain.models import (
    ConfidenceLevel,
    FollowUpDecision,
    TimingSuggestion,
)
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

HIGH_CONFIDENCE_SCORE = 70
MEDIUM_CONFIDENCE_SCORE = 50

FOLLOW_UP_MIN_DAYS = 5
FOLLOW_UP_MAX_DAYS = 14


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _whole_days(later: datetime, earlier: datetime) -> int:
    """Full days between two instants, truncated toward zero."""
    return int((_as_utc(later) - _as_utc(earlier)).total_seconds() / 86400)


def _confidence_level(score: int) -> ConfidenceLevel:
    if score >= HIGH_CONFIDENCE_SCORE:
        return "high"
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return "medium"
    return "low"


def calculate_optimal_referral_timing(
    relationship_strength: int,
    last_contacted_at: datetime | None,
    job_deadline: datetime | None,
    job_created_at: datetime,
    *,
    now: datetime | None = None,
) -> TimingSuggestion:
    """
    Recommend when to send a referral request and when to follow up.

    Args:
        relationship_strength: 1 (weak) to 5 (strong)
        last_contacted_at: Last interaction with the contact, if any
        job_deadline: Application deadline, if any
        job_created_at: When the job was saved
        now: Reference time (defaults to the current UTC time)

    Returns:
        TimingSuggestion with send/follow-up times, ordered reasoning and a
        high/medium/low confidence bucket
    """
    now = _as_utc(now) if now else datetime.now(UTC)
    reasoning: list[str] = []
    confidence_score = 0

    # Relationship strength sets the base delay
    if relationship_strength >= 4:
        days_from_now = 1
        reasoning.append("Strong relationship (4-5) - can reach out immediately")
        confidence_score += 40
    elif relationship_strength == 3:
        days_from_now = 2
        reasoning.append("Moderate relationship (3) - wait 2 days to prepare approach")
        confidence_score += 30
    else:
        days_from_now = 5
        reasoning.append("Weak relationship (1-2) - wait 5 days and warm up connection first")
        confidence_score += 20

    # Recency of last contact adds to the delay
    if last_contacted_at:
        days_since_contact = _whole_days(now, last_contacted_at)
        if days_since_contact < 7:
            reasoning.append("Recent contact (within week) - good timing")
            confidence_score += 30
        elif days_since_contact < 30:
            reasoning.append("Contact within month - acceptable timing")
            days_from_now += 1
            confidence_score += 20
        elif days_since_contact < 90:
            reasoning.append("Contact within 3 months - consider reconnecting first")
            days_from_now += 3
            confidence_score += 10
        else:
            reasoning.append(
                "No recent contact (90+ days) - strongly recommend warming up connection first"
            )
            days_from_now += 7
    else:
        reasoning.append("No interaction history - establish rapport before asking")
        days_from_now += 5

    # Deadline pressure can only shorten the delay
    if job_deadline:
        days_until_deadline = _whole_days(job_deadline, now)
        if days_until_deadline < 7:
            days_from_now = min(days_from_now, 1)
            reasoning.append(f"Urgent: Only {days_until_deadline} days until deadline")
            confidence_score += 20
        elif days_until_deadline < 14:
            days_from_now = min(days_from_now, 2)
            reasoning.append("Deadline within 2 weeks - send soon")
            confidence_score += 15
        else:
            reasoning.append("Sufficient time before deadline")
            confidence_score += 10
    elif _whole_days(now, job_created_at) > 14:
        reasoning.append("Job opportunity is aging - consider sending soon")
        days_from_now = max(1, days_from_now - 2)

    optimal_send_time = now + timedelta(days=days_from_now)
    follow_up_days = 5 if relationship_strength >= 4 else 7
    follow_up_time = optimal_send_time + timedelta(days=follow_up_days)

    confidence = _confidence_level(confidence_score)
    logger.debug(
        "Referral timing calculated",
        relationship_strength=relationship_strength,
        days_from_now=days_from_now,
        confidence_score=confidence_score,
        confidence=confidence,
    )

    return TimingSuggestion(
        optimal_send_time=optimal_send_time,
        follow_up_time=follow_up_time,
        reasoning=reasoning,
        confidence=confidence,
        confidence_score=confidence_score,
    )


def should_follow_up(
    status: str,
    sent_at: datetime | None,
    follow_up_at: datetime | None,
    *,
    now: datetime | None = None,
) -> FollowUpDecision:
    """
    Decide whether a sent referral request is due for a follow-up.

    follow_up_at is accepted so stored request rows can be passed through
    as-is; the decision depends only on how long ago the request was sent.
    """
    if status != "sent":
        return FollowUpDecision(should_follow_up=False, reason="Request not yet sent")

    if not sent_at:
        return FollowUpDecision(should_follow_up=False, reason="Send date unknown")

    now = _as_utc(now) if now else datetime.now(UTC)
    days_since_sent = _whole_days(now, sent_at)

    if days_since_sent < FOLLOW_UP_MIN_DAYS:
        return FollowUpDecision(
            should_follow_up=False,
            reason=f"Wait {FOLLOW_UP_MIN_DAYS - days_since_sent} more days before following up",
        )

    if days_since_sent <= FOLLOW_UP_MAX_DAYS:
        return FollowUpDecision(
            should_follow_up=True,
            reason=f"{days_since_sent} days since request - good time to follow up",
        )

    return FollowUpDecision(
        should_follow_up=True,
        reason=f"{days_since_sent} days since request - overdue for follow-up",
    )
