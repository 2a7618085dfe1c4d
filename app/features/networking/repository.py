"""
Repository helpers for the user's contacts and their relationship edges.
"""

from app.db.helpers import fetch_all, fetch_one, with_db_retry
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_CONTACT_COLUMNS = """
    id::text AS id,
    name,
    company,
    role,
    school,
    graduation_year,
    COALESCE(is_influencer, false) AS is_influencer,
    COALESCE(is_industry_leader, false) AS is_industry_leader,
    influence_score
"""


class ContactRepository:
    """Thin wrappers over the contacts and contact_connections tables."""

    @staticmethod
    @with_db_retry()
    async def fetch_contacts(user_id: str) -> list[dict]:
        return await fetch_all(
            f"""
            SELECT {_CONTACT_COLUMNS}
            FROM contacts
            WHERE user_id = %s
            ORDER BY created_at, id
            """,
            (user_id,),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_connections(user_id: str) -> list[dict]:
        """Edges visible to the user, in insertion order."""
        return await fetch_all(
            """
            SELECT contact_id_a::text AS contact_id_a,
                   contact_id_b::text AS contact_id_b,
                   relationship_type
            FROM contact_connections
            WHERE user_id = %s
            ORDER BY created_at, id
            """,
            (user_id,),
        )

    @staticmethod
    @with_db_retry()
    async def fetch_contacts_by_ids(contact_ids: list[str]) -> list[dict]:
        """Resolve contacts referenced by edges, including ones owned by other users."""
        if not contact_ids:
            return []
        rows = await fetch_all(
            f"""
            SELECT {_CONTACT_COLUMNS}
            FROM contacts
            WHERE id::text = ANY(%s)
            """,
            (contact_ids,),
        )
        logger.debug("Resolved edge contacts", requested=len(contact_ids), found=len(rows))
        return rows
