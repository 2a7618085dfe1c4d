"""
Domain models for referral requests.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ConfidenceLevel = Literal["high", "medium", "low"]


class ReferralTimingInput(BaseModel):
    """Signals used to time a referral request to a contact."""

    relationship_strength: int = Field(..., ge=1, le=5)
    last_contacted_at: datetime | None = None
    job_deadline: datetime | None = None
    job_created_at: datetime


@dataclass(slots=True)
class TimingSuggestion:
    optimal_send_time: datetime
    follow_up_time: datetime
    confidence: ConfidenceLevel
    confidence_score: int
    reasoning: list[str] = field(default_factory=list)


@dataclass(slots=True)
class FollowUpDecision:
    should_follow_up: bool
    reason: str
