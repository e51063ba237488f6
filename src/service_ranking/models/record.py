"""Service record data model with validation."""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.text_processing import TextProcessor

_text = TextProcessor()


@dataclass(frozen=True)
class ServiceRecord:
    """
    One government service entry in the catalogue.

    Attributes:
        id: Unique, stable service identifier
        name: Canonical display name, the primary matched text
        short_name: Optional abbreviated name
        description: Optional long description
        tags: Optional free-text tags
        target_audience: Eligible roles (empty = universal)
        jurisdiction: Owning administrative unit (blank = universal)
        channels: Publishing channels (empty = all channels)
        is_high_frequency: Whether the service is flagged high-frequency
        satisfaction: Optional quality signal on an arbitrary positive scale
    """
    id: str
    name: str
    short_name: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    target_audience: FrozenSet[str] = field(default_factory=frozenset)
    jurisdiction: str = ""
    channels: FrozenSet[str] = field(default_factory=frozenset)
    is_high_frequency: bool = False
    satisfaction: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate and freeze record fields."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Service record ID cannot be empty")
        # Set-valued fields accept a delimited string or any iterable
        object.__setattr__(self, "target_audience", _text.split_values(self.target_audience))
        object.__setattr__(self, "channels", _text.split_values(self.channels))
        object.__setattr__(self, "satisfaction", _text.parse_satisfaction(self.satisfaction))
        object.__setattr__(self, "name", self.name or "")
        object.__setattr__(self, "jurisdiction", self.jurisdiction or "")

    @property
    def display_text(self) -> str:
        """Description for external scorers, falling back to the name."""
        return self.description or self.name


class ServiceRecordModel(BaseModel):
    """Pydantic model for service records arriving from catalogue exports."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, alias="事项编码", description="Service identifier")
    name: str = Field("", alias="事项名称", description="Service name")
    short_name: Optional[str] = Field(None, alias="事项简称")
    description: Optional[str] = Field(None, alias="事项描述")
    tags: Optional[str] = Field(None, alias="标签")
    target_audience: FrozenSet[str] = Field(default_factory=frozenset, alias="服务对象")
    jurisdiction: str = Field("", alias="所属市州单位")
    channels: FrozenSet[str] = Field(default_factory=frozenset, alias="发布渠道")
    is_high_frequency: bool = Field(False, alias="是否高频事项")
    satisfaction: Optional[float] = Field(None, alias="满意度")

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v: Any) -> str:
        """Ensure the identifier is not just whitespace; numeric codes become strings."""
        value = "" if v is None else str(v).strip()
        if not value:
            raise ValueError('Service ID cannot be empty or whitespace only')
        return value

    @field_validator('name', 'jurisdiction', mode='before')
    @classmethod
    def blank_to_empty(cls, v: Any) -> str:
        return _text.collapse_whitespace(v) if v else ""

    @field_validator('short_name', 'description', 'tags', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        cleaned = _text.collapse_whitespace(v) if v else ""
        return cleaned or None

    @field_validator('target_audience', 'channels', mode='before')
    @classmethod
    def split_multi_valued(cls, v: Any) -> FrozenSet[str]:
        return _text.split_values(v)

    @field_validator('is_high_frequency', mode='before')
    @classmethod
    def parse_flag(cls, v: Any) -> bool:
        return _text.parse_flag(v)

    @field_validator('satisfaction', mode='before')
    @classmethod
    def parse_satisfaction(cls, v: Any) -> Optional[float]:
        return _text.parse_satisfaction(v)

    def to_record(self) -> ServiceRecord:
        """Convert to ServiceRecord dataclass."""
        return ServiceRecord(
            id=self.id,
            name=self.name,
            short_name=self.short_name,
            description=self.description,
            tags=self.tags,
            target_audience=self.target_audience,
            jurisdiction=self.jurisdiction,
            channels=self.channels,
            is_high_frequency=self.is_high_frequency,
            satisfaction=self.satisfaction
        )
