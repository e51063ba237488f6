"""Core ranking components."""

from .engine import RelevanceEngine, QueryPlan
from .thesaurus import Thesaurus
from .lexicon import Lexicon, default_lexicon
from .policy import ScoringPolicy, ScoringPolicyModel
from .normalizer import QueryNormalizer, NormalizedQuery
from .expander import TermExpander
from .eligibility import EligibilityFilter
from .scorer import ContextualScorer
from .ranker import Ranker
from .semantic import (
    ScoringCandidate,
    SemanticScorer,
    IntentAnalysis,
    QueryAnalyzer,
    sanitize_scores
)
from .embeddings import TfidfSemanticScorer
from .exceptions import (
    ServiceSearchError,
    ValidationError,
    ConfigurationError,
    ScorerError,
    SearchError
)

__all__ = [
    "RelevanceEngine",
    "QueryPlan",
    "Thesaurus",
    "Lexicon",
    "default_lexicon",
    "ScoringPolicy",
    "ScoringPolicyModel",
    "QueryNormalizer",
    "NormalizedQuery",
    "TermExpander",
    "EligibilityFilter",
    "ContextualScorer",
    "Ranker",
    "ScoringCandidate",
    "SemanticScorer",
    "IntentAnalysis",
    "QueryAnalyzer",
    "sanitize_scores",
    "TfidfSemanticScorer",
    "ServiceSearchError",
    "ValidationError",
    "ConfigurationError",
    "ScorerError",
    "SearchError",
]
