"""
Referral request routes: send timing and follow-up checks.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ValidationError

from app.auth.verify import current_user_id
from app.db.helpers import DatabaseError
from app.features.referrals.domain.models import ReferralTimingInput
from app.features.referrals.repository import ReferralRepository
from app.features.referrals.timing.service import (
    calculate_optimal_referral_timing,
    should_follow_up,
)
from app.infrastructure.observability.logging import get_logger
from app.infrastructure.tracking import EventTracker, get_event_tracker

router = APIRouter(prefix="/referrals", tags=["referrals"])
logger = get_logger(__name__)


class TimingSuggestionResponse(BaseModel):
    optimal_send_time: datetime
    follow_up_time: datetime
    reasoning: list[str]
    confidence: str
    confidence_score: int


class FollowUpResponse(BaseModel):
    request_id: str
    should_follow_up: bool
    reason: str


async def _load_request(user_id: str, request_id: str) -> dict:
    try:
        row = await ReferralRepository.fetch_request_context(user_id, request_id)
    except DatabaseError as e:
        logger.error("Referral lookup failed", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Referral data temporarily unavailable",
        ) from e
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Referral request not found")
    return row


@router.post("/timing", response_model=TimingSuggestionResponse)
async def suggest_timing(
    payload: ReferralTimingInput,
    user_id: str = Depends(current_user_id),
    tracker: EventTracker = Depends(get_event_tracker),
) -> TimingSuggestionResponse:
    """Timing for an ad-hoc request that has not been saved yet."""
    suggestion = calculate_optimal_referral_timing(
        payload.relationship_strength,
        payload.last_contacted_at,
        payload.job_deadline,
        payload.job_created_at,
    )
    await tracker.track(
        "referral_timing_suggested",
        category="network",
        user_id=user_id,
        properties={"confidence": suggestion.confidence},
    )
    return TimingSuggestionResponse(
        optimal_send_time=suggestion.optimal_send_time,
        follow_up_time=suggestion.follow_up_time,
        reasoning=suggestion.reasoning,
        confidence=suggestion.confidence,
        confidence_score=suggestion.confidence_score,
    )


@router.get("/{request_id}/timing", response_model=TimingSuggestionResponse)
async def get_request_timing(
    request_id: str,
    user_id: str = Depends(current_user_id),
) -> TimingSuggestionResponse:
    row = await _load_request(user_id, request_id)
    try:
        timing_input = ReferralTimingInput.model_validate(row)
    except ValidationError as e:
        logger.warning(
            "Stored referral request has invalid timing inputs",
            request_id=request_id,
            errors=e.error_count(),
        )
        raise HTTPException(
            status_code=422,
            detail="Referral request data is incomplete or out of range",
        ) from e

    suggestion = calculate_optimal_referral_timing(
        timing_input.relationship_strength,
        timing_input.last_contacted_at,
        timing_input.job_deadline,
        timing_input.job_created_at,
    )

    try:
        await ReferralRepository.save_schedule(
            user_id, request_id, suggestion.optimal_send_time, suggestion.follow_up_time
        )
    except DatabaseError as e:
        # The suggestion is still useful even if it could not be stored
        logger.warning("Failed to store referral schedule", request_id=request_id, error=str(e))

    logger.info(
        "Referral timing served",
        user_id=user_id,
        request_id=request_id,
        confidence=suggestion.confidence,
    )
    return TimingSuggestionResponse(
        optimal_send_time=suggestion.optimal_send_time,
        follow_up_time=suggestion.follow_up_time,
        reasoning=suggestion.reasoning,
        confidence=suggestion.confidence,
        confidence_score=suggestion.confidence_score,
    )


@router.get("/{request_id}/follow-up", response_model=FollowUpResponse)
async def get_follow_up_status(
    request_id: str,
    user_id: str = Depends(current_user_id),
) -> FollowUpResponse:
    row = await _load_request(user_id, request_id)
    decision = should_follow_up(row["status"], row.get("sent_at"), row.get("follow_up_at"))
    return FollowUpResponse(
        request_id=request_id,
        should_follow_up=decision.should_follow_up,
        reason=decision.reason,
    )
