"""
Contextual Relevance Ranking for Government Services

Ranks a catalogue of government-service records against a free-text query,
enforcing channel visibility as a hard constraint while softly preferring
role, locality, popularity and externally supplied semantic relevance.
"""

from .api.service import ServiceSearchService
from .core.engine import RelevanceEngine
from .core.lexicon import Lexicon, default_lexicon
from .core.policy import ScoringPolicy
from .core.thesaurus import Thesaurus
from .core.semantic import SemanticScorer, QueryAnalyzer, IntentAnalysis, ScoringCandidate
from .models.record import ServiceRecord, ServiceRecordModel
from .models.context import RequestContext, RequestContextModel
from .models.result import (
    Provenance,
    ExpandedTerm,
    ScoreBreakdown,
    RankedResult,
    SearchResponse
)

__version__ = "1.0.0"

__all__ = [
    "ServiceSearchService",
    "RelevanceEngine",
    "Lexicon",
    "default_lexicon",
    "ScoringPolicy",
    "Thesaurus",
    "SemanticScorer",
    "QueryAnalyzer",
    "IntentAnalysis",
    "ScoringCandidate",
    "ServiceRecord",
    "ServiceRecordModel",
    "RequestContext",
    "RequestContextModel",
    "Provenance",
    "ExpandedTerm",
    "ScoreBreakdown",
    "RankedResult",
    "SearchResponse",
]
