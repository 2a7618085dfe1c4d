"""
Job matching routes.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from app.auth.verify import current_user_id
from app.db.helpers import DatabaseError
from app.features.job_matching.domain.models import Job, MatchScore, Profile
from app.features.job_matching.repository import JobMatchRepository
from app.features.job_matching.scoring.service import calculate_job_match
from app.infrastructure.observability.logging import get_logger
from app.infrastructure.tracking import EventTracker, get_event_tracker

router = APIRouter(prefix="/job-matching", tags=["job-matching"])
logger = get_logger(__name__)


class MatchRequest(BaseModel):
    job: Job
    profile: Profile | None = None


class MatchScoreResponse(BaseModel):
    job_id: str | None = None
    overall_score: int
    skills_score: int
    experience_score: int
    education_score: int
    location_score: int
    strengths: list[str]
    gaps: list[str]
    recommendations: list[str]


def _to_response(score: MatchScore, job_id: str | None = None) -> MatchScoreResponse:
    return MatchScoreResponse(job_id=job_id, **asdict(score))


async def _load_profile(user_id: str) -> Profile:
    row = await JobMatchRepository.fetch_profile(user_id)
    # A missing profile scores like an empty one
    return Profile.model_validate(row) if row else Profile()


@router.post("/score", response_model=MatchScoreResponse)
async def score_job(
    payload: MatchRequest,
    user_id: str = Depends(current_user_id),
) -> MatchScoreResponse:
    """Score a job posting; the stored profile is used when none is sent."""
    profile = payload.profile
    if profile is None:
        try:
            profile = await _load_profile(user_id)
        except DatabaseError as e:
            logger.error("Profile lookup failed", user_id=user_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Profile data temporarily unavailable",
            ) from e

    score = calculate_job_match(payload.job, profile)
    return _to_response(score)


@router.get("/jobs/{job_id}/score", response_model=MatchScoreResponse)
async def score_saved_job(
    job_id: str,
    user_id: str = Depends(current_user_id),
    tracker: EventTracker = Depends(get_event_tracker),
) -> MatchScoreResponse:
    try:
        job_row = await JobMatchRepository.fetch_job(user_id, job_id)
        if not job_row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
        profile = await _load_profile(user_id)
    except DatabaseError as e:
        logger.error("Job match lookup failed", user_id=user_id, job_id=job_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Job data temporarily unavailable",
        ) from e

    score = calculate_job_match(Job.model_validate(job_row), profile)
    logger.info(
        "Job match scored",
        user_id=user_id,
        job_id=job_id,
        overall_score=score.overall_score,
    )
    await tracker.track(
        "job_match_scored",
        category="jobs",
        user_id=user_id,
        properties={"job_id": job_id, "overall_score": score.overall_score},
    )
    return _to_response(score, job_id)
