"""
Repository helpers for job search analytics.
"""

from app.db.helpers import fetch_all, with_db_retry
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class AnalyticsRepository:
    """Reads the job pipeline tables for a single user."""

    @staticmethod
    @with_db_retry()
    async def fetch_jobs(user_id: str, include_archived: bool = False) -> list[dict]:
        return await fetch_all(
            """
            SELECT id::text AS id,
                   job_title,
                   company_name,
                   status,
                   application_deadline,
                   COALESCE(is_archived, false) AS is_archived,
                   created_at,
                   status_updated_at,
                   status_history
            FROM jobs
            WHERE user_id = %s
              AND (%s OR COALESCE(is_archived, false) = false)
            ORDER BY created_at
            """,
            (user_id, include_archived),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_status_history(user_id: str) -> list[dict]:
        return await fetch_all(
            """
            SELECT job_id::text AS job_id,
                   to_status,
                   changed_at
            FROM application_status_history
            WHERE user_id = %s
            ORDER BY changed_at
            """,
            (user_id,),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_interviews(user_id: str) -> list[dict]:
        return await fetch_all(
            """
            SELECT id::text AS id,
                   job_id::text AS job_id,
                   scheduled_start,
                   interview_date
            FROM interviews
            WHERE user_id = %s
            """,
            (user_id,),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_offers(user_id: str) -> list[dict]:
        return await fetch_all(
            """
            SELECT id::text AS id,
                   job_id::text AS job_id
            FROM offers
            WHERE user_id = %s
            """,
            (user_id,),
        )
