"""
Networking routes: connection paths and contact discovery.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from app.auth.verify import current_user_id
from app.db.helpers import DatabaseError
from app.features.networking.domain.models import ConnectionEdge, Contact
from app.features.networking.pathfinding.service import (
    filter_alumni,
    filter_influencers,
    find_connection_path,
)
from app.features.networking.repository import ContactRepository
from app.infrastructure.observability.logging import get_logger
from app.infrastructure.tracking import EventTracker, get_event_tracker

router = APIRouter(prefix="/network", tags=["network"])
logger = get_logger(__name__)


class ConnectionPathResponse(BaseModel):
    found: bool
    target_contact_id: str
    degree: int | None = None
    path_description: str | None = None
    target: Contact | None = None
    path: list[Contact] = []


class ContactListResponse(BaseModel):
    contacts: list[Contact]
    count: int


def _service_unavailable(exc: DatabaseError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Contact data temporarily unavailable ({exc.operation})",
    )


@router.get("/contacts/{contact_id}/path", response_model=ConnectionPathResponse)
async def get_connection_path(
    contact_id: str,
    user_id: str = Depends(current_user_id),
    tracker: EventTracker = Depends(get_event_tracker),
) -> ConnectionPathResponse:
    try:
        contact_rows = await ContactRepository.fetch_contacts(user_id)
        edge_rows = await ContactRepository.fetch_connections(user_id)
        edges = [ConnectionEdge.model_validate(row) for row in edge_rows]

        own_ids = {row["id"] for row in contact_rows}
        referenced = sorted(
            ({edge.contact_id_a for edge in edges} | {edge.contact_id_b for edge in edges})
            - own_ids
        )
        known_rows = await ContactRepository.fetch_contacts_by_ids(referenced)
    except DatabaseError as e:
        logger.error("Connection path lookup failed", user_id=user_id, error=str(e))
        raise _service_unavailable(e) from e

    contacts = [Contact.model_validate(row) for row in contact_rows]
    known = [Contact.model_validate(row) for row in known_rows]

    result = find_connection_path(contacts, contact_id, edges, known_contacts=known)
    logger.info(
        "Connection path requested",
        user_id=user_id,
        target_contact_id=contact_id,
        found=result is not None,
        degree=result.degree if result else None,
    )
    await tracker.track(
        "connection_path_viewed",
        category="network",
        user_id=user_id,
        properties={"found": result is not None, "degree": result.degree if result else None},
    )

    if result is None:
        return ConnectionPathResponse(found=False, target_contact_id=contact_id)

    return ConnectionPathResponse(
        found=True,
        target_contact_id=contact_id,
        degree=result.degree,
        path_description=result.path_description,
        target=result.target,
        path=result.path,
    )


@router.get("/alumni", response_model=ContactListResponse)
async def list_alumni(
    school: list[str] = Query(...),
    user_id: str = Depends(current_user_id),
) -> ContactListResponse:
    try:
        rows = await ContactRepository.fetch_contacts(user_id)
    except DatabaseError as e:
        raise _service_unavailable(e) from e

    alumni = filter_alumni([Contact.model_validate(row) for row in rows], school)
    return ContactListResponse(contacts=alumni, count=len(alumni))


@router.get("/influencers", response_model=ContactListResponse)
async def list_influencers(
    min_score: float = Query(default=50, ge=0, le=100),
    user_id: str = Depends(current_user_id),
) -> ContactListResponse:
    try:
        rows = await ContactRepository.fetch_contacts(user_id)
    except DatabaseError as e:
        raise _service_unavailable(e) from e

    influencers = filter_influencers([Contact.model_validate(row) for row in rows], min_score)
    return ContactListResponse(contacts=influencers, count=len(influencers))
