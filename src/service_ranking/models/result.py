"""Search term, score and result data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .record import ServiceRecord


class Provenance(str, Enum):
    """Origin of an expanded search term."""
    VERBATIM = "verbatim"
    THESAURUS = "thesaurus"
    EXTERNAL = "external"


@dataclass(frozen=True)
class ExpandedTerm:
    """A search term together with where it came from."""
    term: str
    provenance: Provenance

    def to_dict(self) -> Dict[str, str]:
        return {"term": self.term, "provenance": self.provenance.value}


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Per-signal contribution to a candidate's aggregate score.

    Attributes:
        lexical: Literal term hits in name, short name and tags
        thesaurus: Bonus for a thesaurus-sourced term hit
        semantic: Scaled external semantic relevance
        role: Role match bonus or mismatch penalty
        locality: Locality match bonus or mismatch penalty
        popularity: High-frequency and satisfaction contribution
        total: Sum of all of the above
    """
    lexical: float = 0.0
    thesaurus: float = 0.0
    semantic: float = 0.0
    role: float = 0.0
    locality: float = 0.0
    popularity: float = 0.0
    total: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "total",
            self.lexical + self.thesaurus + self.semantic
            + self.role + self.locality + self.popularity
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "lexical": round(self.lexical, 4),
            "thesaurus": round(self.thesaurus, 4),
            "semantic": round(self.semantic, 4),
            "role": round(self.role, 4),
            "locality": round(self.locality, 4),
            "popularity": round(self.popularity, 4),
            "total": round(self.total, 4),
        }


@dataclass(frozen=True)
class ScoredCandidate:
    """An eligible record with its breakdown, before ranking."""
    record: ServiceRecord
    breakdown: ScoreBreakdown
    matched_terms: List[ExpandedTerm]
    semantic_score: float = 0.0


@dataclass
class RankedResult:
    """
    Ranked search result with score breakdown and match explanation.

    Attributes:
        record: The matched service record
        breakdown: Per-signal score breakdown
        matched_terms: Expanded terms found in the record text
        reasons: Human-readable reasons for the placement
        rank: Result ranking position (1-based)
    """
    record: ServiceRecord
    breakdown: ScoreBreakdown
    matched_terms: List[ExpandedTerm]
    reasons: List[str]
    rank: int

    def __post_init__(self) -> None:
        """Validate ranked result."""
        if self.rank <= 0:
            raise ValueError("Rank must be positive")

    @property
    def score(self) -> float:
        return self.breakdown.total

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "record": {
                "id": self.record.id,
                "name": self.record.name,
                "jurisdiction": self.record.jurisdiction,
                "target_audience": sorted(self.record.target_audience),
                "is_high_frequency": self.record.is_high_frequency,
            },
            "breakdown": self.breakdown.to_dict(),
            "matched_terms": [term.to_dict() for term in self.matched_terms],
            "reasons": list(self.reasons),
            "rank": self.rank,
        }


@dataclass
class SearchResponse:
    """Ranked results plus the terms that were searched for."""
    results: List[RankedResult]
    terms: List[ExpandedTerm]
    cleaned_query: str = ""
    locked_entity: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "terms": [term.to_dict() for term in self.terms],
            "cleaned_query": self.cleaned_query,
            "locked_entity": self.locked_entity,
        }
