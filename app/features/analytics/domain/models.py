"""
Domain models for job search analytics.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _coerce_datetime(value: Any) -> Any:
    # Deadline columns are plain dates; treat them as midnight UTC
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date.fromisoformat(value), time.min, tzinfo=UTC)
    return value


class StatusChange(BaseModel):
    """One status transition, from application_status_history or jobs.status_history."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: str = Field(validation_alias=AliasChoices("status", "to_status"))
    changed_at: datetime = Field(validation_alias=AliasChoices("changed_at", "changedAt"))
    job_id: str | None = None

    normalize_changed_at = field_validator("changed_at", mode="before")(_coerce_datetime)


class JobRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    job_title: str = ""
    company_name: str = ""
    status: str = "interested"
    application_deadline: datetime | None = None
    is_archived: bool = False
    created_at: datetime | None = None
    status_updated_at: datetime | None = None
    status_history: list[StatusChange] = Field(default_factory=list)

    normalize_dates = field_validator(
        "application_deadline", "created_at", "status_updated_at", mode="before"
    )(_coerce_datetime)

    @field_validator("is_archived", mode="before")
    @classmethod
    def null_is_not_archived(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("status_history", mode="before")
    @classmethod
    def null_history(cls, value: Any) -> Any:
        return [] if value is None else value


class InterviewRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    job_id: str | None = None
    scheduled_start: datetime | None = None
    interview_date: datetime | None = None


class OfferRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    job_id: str | None = None


@dataclass(slots=True)
class ConversionRates:
    applied_to_interview: int
    interview_to_offer: int
    applied_to_offer: int


@dataclass(slots=True)
class UpcomingDeadline:
    job_id: str
    job_title: str
    company: str
    deadline: datetime
    days_until: int


@dataclass(slots=True)
class MonthlyCount:
    month: str
    count: int


@dataclass(slots=True)
class JobAnalytics:
    total: int
    by_status: dict[str, int]
    response_rate: int
    avg_time_in_stage: dict[str, int]
    deadline_adherence: int
    time_to_offer: int | None
    upcoming_deadlines: list[UpcomingDeadline] = field(default_factory=list)
    monthly_applications: list[MonthlyCount] = field(default_factory=list)
