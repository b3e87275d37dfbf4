"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation of the two JSON contracts (roster service, Jikan) right
  where the payload enters the core; a malformed body becomes a
  `ValidationError` instead of a crash further down.
- Self-documenting fields (`Field`) without coupling the core to I/O libraries.

Note:
- These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

UNKNOWN_PLAYER_NAME = "(unknown)"


class RosterDocument(BaseModel):
    """One user's roster as served by the fake API (`{name?, cards?}`)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    player_name: str | None = Field(
        default=None,
        alias="name",
        description="Display name of the roster owner; may be absent or null.",
    )
    entity_ids: list[int] | None = Field(
        default=None,
        alias="cards",
        description="Character ids in roster order; absent means no entities.",
    )

    @property
    def display_name(self) -> str:
        return self.player_name if self.player_name is not None else UNKNOWN_PLAYER_NAME


class CharacterJpg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image_url: str


class CharacterImages(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jpg: CharacterJpg


class CharacterData(BaseModel):
    """Payload of a Jikan `/characters/{id}` response."""

    model_config = ConfigDict(extra="ignore")

    mal_id: int
    name: str
    images: CharacterImages


class CharacterEnvelope(BaseModel):
    """Jikan response envelope; `data` is legally null for unknown ids."""

    model_config = ConfigDict(extra="ignore")

    data: CharacterData | None = None


class EntityDetail(BaseModel):
    """A resolved character, ready to be rendered as a card."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Character id (Jikan `mal_id`).")
    display_name: str = Field(..., description="Name shown on the card.")
    image_url: str = Field(..., description="JPG image reference; loading it is up to the renderer.")

    @classmethod
    def from_character(cls, character: CharacterData) -> EntityDetail:
        return cls(
            id=character.mal_id,
            display_name=character.name,
            image_url=character.images.jpg.image_url,
        )


class ResolutionErrorKind(str, Enum):
    """Scope of a resolution failure."""

    ROSTER_UNAVAILABLE = "RosterUnavailable"
    ENTITY_UNAVAILABLE = "EntityUnavailable"


class ErrorCause(str, Enum):
    """What made a single fetch unusable."""

    TRANSPORT = "TransportError"
    PARSE = "ParseError"
    NOT_FOUND = "NotFound"


class ResolutionError(BaseModel):
    """A typed failure emitted by the resolver in place of an entity.

    `RosterUnavailable` ends the resolution; `EntityUnavailable` only skips
    one card.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResolutionErrorKind
    cause: ErrorCause
    user_id: int
    entity_id: int | None = None
    message: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.message
