"""
Repository helpers for job postings and the profile fields used in matching.
"""

from app.db.helpers import fetch_one, with_db_retry
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class JobMatchRepository:
    """Reads a single job and the caller's profile, both scoped to the user."""

    @staticmethod
    @with_db_retry()
    async def fetch_job(user_id: str, job_id: str) -> dict | None:
        return await fetch_one(
            """
            SELECT id::text AS id,
                   job_title,
                   COALESCE(job_description, '') AS job_description,
                   company_name,
                   location,
                   salary_min,
                   salary_max
            FROM jobs
            WHERE user_id = %s
              AND id::text = %s
            """,
            (user_id, job_id),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_profile(user_id: str) -> dict | None:
        row = await fetch_one(
            """
            SELECT COALESCE(skills, '[]'::jsonb) AS skills,
                   COALESCE(employment_history, '[]'::jsonb) AS employment_history,
                   COALESCE(education, '[]'::jsonb) AS education,
                   experience_level,
                   location
            FROM profiles
            WHERE user_id = %s
            """,
            (user_id,),
        )
        if row is None:
            logger.debug("No profile found for job matching", user_id=user_id)
        return row
