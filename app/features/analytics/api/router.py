"""
Analytics routes: dashboard summary and pipeline funnel.
"""

from dataclasses import asdict
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from app.auth.verify import current_user_id
from app.config import settings
from app.db.helpers import DatabaseError
from app.features.analytics.domain.models import (
    InterviewRecord,
    JobRecord,
    OfferRecord,
    StatusChange,
)
from app.features.analytics.metrics.service import (
    attach_status_history,
    build_job_analytics,
    calculate_applications_sent,
    calculate_conversion_rates,
    calculate_funnel_counts,
    calculate_interviews_scheduled,
    calculate_median_time_to_response,
    calculate_offers_received,
)
from app.features.analytics.repository import AnalyticsRepository
from app.infrastructure.observability.logging import get_logger

router = APIRouter(prefix="/analytics", tags=["analytics"])
logger = get_logger(__name__)


class ConversionRatesResponse(BaseModel):
    applied_to_interview: int
    interview_to_offer: int
    applied_to_offer: int


class UpcomingDeadlineResponse(BaseModel):
    job_id: str
    job_title: str
    company: str
    deadline: datetime
    days_until: int


class MonthlyCountResponse(BaseModel):
    month: str
    count: int


class JobAnalyticsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    response_rate: int
    avg_time_in_stage: dict[str, int]
    deadline_adherence: int
    time_to_offer: int | None
    upcoming_deadlines: list[UpcomingDeadlineResponse]
    monthly_applications: list[MonthlyCountResponse]
    applications_sent: int
    interviews_scheduled: int
    offers_received: int
    conversion_rates: ConversionRatesResponse
    median_time_to_response: int | None


class FunnelResponse(BaseModel):
    stages: dict[str, int]
    conversion_rates: ConversionRatesResponse


def _service_unavailable(exc: DatabaseError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Analytics data temporarily unavailable ({exc.operation})",
    )


async def _load_jobs(user_id: str, include_archived: bool) -> tuple[list[JobRecord], list[StatusChange]]:
    job_rows = await AnalyticsRepository.fetch_jobs(user_id, include_archived)
    history_rows = await AnalyticsRepository.fetch_status_history(user_id)

    history = [StatusChange.model_validate(row) for row in history_rows]
    jobs = [JobRecord.model_validate(row) for row in job_rows]
    return attach_status_history(jobs, history), history


@router.get("/jobs", response_model=JobAnalyticsResponse)
async def get_job_analytics(
    include_archived: bool = Query(default=False),
    user_id: str = Depends(current_user_id),
) -> JobAnalyticsResponse:
    try:
        jobs, history = await _load_jobs(user_id, include_archived)
        interview_rows = await AnalyticsRepository.fetch_interviews(user_id)
        offer_rows = await AnalyticsRepository.fetch_offers(user_id)
    except DatabaseError as e:
        logger.error("Analytics lookup failed", user_id=user_id, error=str(e))
        raise _service_unavailable(e) from e

    interviews = [InterviewRecord.model_validate(row) for row in interview_rows]
    offers = [OfferRecord.model_validate(row) for row in offer_rows]

    summary = build_job_analytics(
        jobs,
        deadline_window_days=settings.UPCOMING_DEADLINE_WINDOW_DAYS,
        months=settings.MONTHLY_APPLICATIONS_WINDOW,
    )

    logger.info("Job analytics served", user_id=user_id, total=summary.total)
    return JobAnalyticsResponse(
        **asdict(summary),
        applications_sent=calculate_applications_sent(jobs),
        interviews_scheduled=calculate_interviews_scheduled(interviews),
        offers_received=calculate_offers_received(jobs, offers if offers else None),
        conversion_rates=asdict(calculate_conversion_rates(jobs)),
        median_time_to_response=calculate_median_time_to_response(jobs, history),
    )


@router.get("/funnel", response_model=FunnelResponse)
async def get_funnel(
    include_archived: bool = Query(default=False),
    user_id: str = Depends(current_user_id),
) -> FunnelResponse:
    try:
        job_rows = await AnalyticsRepository.fetch_jobs(user_id, include_archived)
    except DatabaseError as e:
        logger.error("Funnel lookup failed", user_id=user_id, error=str(e))
        raise _service_unavailable(e) from e

    jobs = [JobRecord.model_validate(row) for row in job_rows]
    return FunnelResponse(
        stages=calculate_funnel_counts(jobs),
        conversion_rates=asdict(calculate_conversion_rates(jobs)),
    )
