"""
Connection path discovery over the user's relationship graph.

Breadth-first search starting from every direct contact at once, bounded
at three hops, so the first time the target is dequeued the hop count is
minimal.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

from app.features.networking.domain.models import ConnectionEdge, ConnectionPath, Contact
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

MAX_DEGREE = 3
UNKNOWN_CONTACT_NAME = "Unknown"


def find_connection_path(
    user_contacts: Sequence[Contact],
    target_contact_id: str,
    all_connections: Iterable[ConnectionEdge],
    *,
    known_contacts: Iterable[Contact] | None = None,
) -> ConnectionPath | None:
    """
    Find the shortest chain (up to 3 hops) from the user's contacts to a target.

    Args:
        user_contacts: The user's direct contacts, in BFS start order
        target_contact_id: Contact to reach
        all_connections: Relationship edges; (a, b) and (b, a) are equivalent
        known_contacts: Extra contacts used only to resolve intermediate hops
            that are not in user_contacts. Hops that resolve nowhere are
            left out of the returned path.

    Returns:
        ConnectionPath, or None when no path exists within 3 hops.
        For a direct contact the path is [target]; otherwise it holds the
        resolved hops before the target.
    """
    for contact in user_contacts:
        if contact.id == target_contact_id:
            return ConnectionPath(
                target=contact,
                path=[contact],
                degree=1,
                path_description=build_path_description([contact], 1),
            )

    adjacency = _build_adjacency(all_connections)

    lookup: dict[str, Contact] = {}
    for contact in known_contacts or ():
        lookup[contact.id] = contact
    for contact in user_contacts:
        lookup[contact.id] = contact

    queue: deque[tuple[str, list[str], int]] = deque()
    visited: set[str] = set()
    for contact in user_contacts:
        queue.append((contact.id, [contact.id], 1))
        visited.add(contact.id)

    while queue:
        node_id, id_path, depth = queue.popleft()
        if depth > MAX_DEGREE:
            continue

        if node_id == target_contact_id:
            # The path runs from the first hop up to the node adjacent to the target
            path = [lookup[cid] for cid in id_path[:-1] if cid in lookup]
            target = lookup.get(target_contact_id) or Contact(
                id=target_contact_id, name=UNKNOWN_CONTACT_NAME
            )
            logger.debug(
                "Connection path found",
                target_contact_id=target_contact_id,
                degree=depth,
                resolved_hops=len(path),
            )
            return ConnectionPath(
                target=target,
                path=path,
                degree=depth,
                path_description=build_path_description(path, depth),
            )

        for neighbor_id in adjacency.get(node_id, ()):
            if neighbor_id not in visited:
                visited.add(neighbor_id)
                queue.append((neighbor_id, [*id_path, neighbor_id], depth + 1))

    logger.debug("No connection path within range", target_contact_id=target_contact_id)
    return None


def _build_adjacency(edges: Iterable[ConnectionEdge]) -> dict[str, list[str]]:
    adjacency: dict[str, list[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.contact_id_a, []).append(edge.contact_id_b)
        adjacency.setdefault(edge.contact_id_b, []).append(edge.contact_id_a)
    return adjacency


def build_path_description(path: Sequence[Contact], degree: int) -> str:
    if degree == 1:
        return "Direct connection"
    if degree == 2 and path:
        return f"2nd degree via {path[0].name}"
    if degree == 3 and len(path) >= 2:
        return f"3rd degree via {path[0].name} → {path[1].name}"
    return f"{degree}-degree connection"


def filter_alumni(contacts: Iterable[Contact], user_schools: Iterable[str]) -> list[Contact]:
    """Contacts whose school contains any of the user's schools (case-insensitive)."""
    schools = [school.lower() for school in user_schools if school]
    return [
        contact
        for contact in contacts
        if contact.school and any(school in contact.school.lower() for school in schools)
    ]


def filter_influencers(
    contacts: Iterable[Contact], min_influence_score: float = 50
) -> list[Contact]:
    """Influencers and industry leaders at or above the score, highest first."""
    matches = [
        contact
        for contact in contacts
        if (contact.is_influencer or contact.is_industry_leader)
        and (contact.influence_score or 0) >= min_influence_score
    ]
    return sorted(matches, key=lambda contact: contact.influence_score or 0, reverse=True)
