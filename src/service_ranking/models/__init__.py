"""Data models for service ranking."""

from .record import ServiceRecord, ServiceRecordModel
from .context import RequestContext, RequestContextModel, ANY
from .result import (
    Provenance,
    ExpandedTerm,
    ScoreBreakdown,
    ScoredCandidate,
    RankedResult,
    SearchResponse
)

__all__ = [
    "ServiceRecord",
    "ServiceRecordModel",
    "RequestContext",
    "RequestContextModel",
    "ANY",
    "Provenance",
    "ExpandedTerm",
    "ScoreBreakdown",
    "ScoredCandidate",
    "RankedResult",
    "SearchResponse",
]
