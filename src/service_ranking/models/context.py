"""Per-search request context."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator

ANY = "any"


@dataclass(frozen=True)
class RequestContext:
    """
    Search request built by the caller for a single search.

    Attributes:
        query: Free-text query as typed by the user
        role: Requesting role (e.g. "自然人", "法人") or "any"
        locality: Requesting locality (e.g. "长沙") or "any"
        channel: Concrete device/app channel; eligibility is a hard constraint
        weight_popularity: Whether satisfaction and high-frequency signals count
    """
    query: str
    channel: str
    role: str = ANY
    locality: str = ANY
    weight_popularity: bool = False

    def __post_init__(self) -> None:
        """Validate context parameters."""
        if not isinstance(self.query, str):
            raise ValueError("Query must be a string")
        if not self.channel or not self.channel.strip():
            raise ValueError("Channel is required")
        if self.channel.strip().lower() == ANY:
            raise ValueError("Channel must be a concrete value, not 'any'")
        object.__setattr__(self, "channel", self.channel.strip())
        object.__setattr__(self, "role", (self.role or ANY).strip() or ANY)
        object.__setattr__(self, "locality", (self.locality or ANY).strip() or ANY)


class RequestContextModel(BaseModel):
    """Pydantic model for request validation in API contexts."""

    query: str = Field(..., min_length=1, description="Search query text")
    channel: str = Field(..., min_length=1, description="Requesting channel")
    role: str = Field(ANY, description="Requesting role or 'any'")
    locality: str = Field(ANY, description="Requesting locality or 'any'")
    weight_popularity: bool = Field(False, description="Weight popularity signals")

    @field_validator('query')
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Ensure query text is not just whitespace."""
        if not v.strip():
            raise ValueError('Query text cannot be empty or whitespace only')
        return v.strip()

    @field_validator('channel')
    @classmethod
    def validate_channel(cls, v: str) -> str:
        """Ensure the channel is concrete."""
        if not v.strip() or v.strip().lower() == ANY:
            raise ValueError('Channel must be a concrete value')
        return v.strip()

    def to_context(self) -> RequestContext:
        """Convert to RequestContext dataclass."""
        return RequestContext(
            query=self.query,
            channel=self.channel,
            role=self.role,
            locality=self.locality,
            weight_popularity=self.weight_popularity
        )
