"""
Domain models for the networking feature.

Contacts and connection edges arrive as rows from the contacts and
contact_connections tables; they are validated once here so the path
finder can rely on their shape.
"""

from dataclasses import dataclass, field

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Contact(BaseModel):
    """A person in the user's professional network."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    company: str | None = None
    role: str | None = None

    # Discovery attributes (alumni / influencer filters)
    school: str | None = None
    graduation_year: int | None = None
    is_influencer: bool = False
    is_industry_leader: bool = False
    influence_score: float | None = None


class ConnectionEdge(BaseModel):
    """Undirected relationship between two contacts."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    contact_id_a: str = Field(..., validation_alias=AliasChoices("contact_id_a", "contact_a"))
    contact_id_b: str = Field(..., validation_alias=AliasChoices("contact_id_b", "contact_b"))
    relationship_type: str | None = None


@dataclass(slots=True)
class ConnectionPath:
    """Shortest known route from the user's network to a target contact."""

    target: Contact
    degree: int
    path_description: str
    path: list[Contact] = field(default_factory=list)
