"""Boundary types for external semantic scoring and query-intent analysis."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from ..models.record import ServiceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringCandidate:
    """The slice of a record that is sent to an external scorer."""
    id: str
    name: str
    description: Optional[str] = None

    @classmethod
    def from_record(cls, record: ServiceRecord) -> "ScoringCandidate":
        return cls(id=record.id, name=record.name, description=record.display_text)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description or self.name}


@runtime_checkable
class SemanticScorer(Protocol):
    """
    Anything that can rate candidates against a query.

    Implementations return a relevance in [0, 1] per candidate id. Ids that
    are missing from the result score 0. Implementations may raise
    ScorerError; callers absorb it.
    """

    async def score(
        self,
        query: str,
        candidates: Sequence[ScoringCandidate]
    ) -> Mapping[str, float]:
        ...


@dataclass(frozen=True)
class IntentAnalysis:
    """Keywords, role and locality inferred from a query by an external model."""
    keywords: List[str] = field(default_factory=list)
    role: Optional[str] = None
    locality: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IntentAnalysis":
        """
        Build an analysis from a loosely-typed model response.

        Accepts "target" as an alias of "role" and treats "null"/"all" as absent.
        """
        keywords = payload.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [keywords]
        role = payload.get("role", payload.get("target"))
        locality = payload.get("locality", payload.get("location"))
        return cls(
            keywords=[str(k).strip() for k in keywords if k and str(k).strip()],
            role=_optional_value(role),
            locality=_optional_value(locality),
        )


@runtime_checkable
class QueryAnalyzer(Protocol):
    """Anything that can extract keywords and intent from a raw query."""

    async def analyze(self, query: str) -> IntentAnalysis:
        ...


def _optional_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in {"null", "none", "all", "any"}:
        return None
    return text


def sanitize_scores(scores: Optional[Mapping[Any, Any]]) -> Dict[str, float]:
    """
    Coerce an external score map into clean floats in [0, 1].

    Non-numeric and non-finite values are dropped (and therefore score 0);
    out-of-range values are clamped. Anything other than a mapping yields
    no scores.
    """
    if not scores:
        return {}
    if not isinstance(scores, Mapping):
        logger.warning(f"Ignoring semantic scores of type {type(scores).__name__}")
        return {}

    cleaned: Dict[str, float] = {}
    for key, value in scores.items():
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric semantic score for '{key}': {value!r}")
            continue
        if not math.isfinite(number):
            logger.warning(f"Ignoring non-finite semantic score for '{key}'")
            continue
        cleaned[str(key)] = min(1.0, max(0.0, number))
    return cleaned
