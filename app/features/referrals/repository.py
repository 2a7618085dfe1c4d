"""
Repository helpers for referral requests.
"""

from datetime import datetime

from app.db.helpers import execute_query, fetch_one, with_db_retry
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class ReferralRepository:
    """Reads referral requests with the contact and job signals the timing needs."""

    @staticmethod
    @with_db_retry()
    async def fetch_request_context(user_id: str, request_id: str) -> dict | None:
        return await fetch_one(
            """
            SELECT rr.id::text AS id,
                   rr.status,
                   rr.last_action_at AS sent_at,
                   rr.next_followup_at AS follow_up_at,
                   LEAST(GREATEST(COALESCE(c.relationship_strength, 1), 1), 5)
                       AS relationship_strength,
                   c.last_contacted_at,
                   j.application_deadline AS job_deadline,
                   COALESCE(j.created_at, rr.created_at, NOW()) AS job_created_at
            FROM referral_requests rr
            JOIN contacts c ON c.id = rr.contact_id
            JOIN jobs j ON j.id = rr.job_id
            WHERE rr.user_id = %s
              AND rr.id::text = %s
            """,
            (user_id, request_id),
        )

    @staticmethod
    async def save_schedule(
        user_id: str, request_id: str, optimal_send_time: datetime, follow_up_time: datetime
    ) -> bool:
        updated = await execute_query(
            """
            UPDATE referral_requests
            SET optimal_send_time = %s,
                next_followup_at = %s,
                updated_at = NOW()
            WHERE user_id = %s
              AND id::text = %s
            """,
            (optimal_send_time, follow_up_time, user_id, request_id),
        )
        logger.debug("Referral schedule saved", request_id=request_id, updated=updated)
        return updated > 0
