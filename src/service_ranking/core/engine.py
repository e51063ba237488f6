"""Relevance engine: the caller-facing entry point for ranking a catalogue."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from ..models.context import RequestContext
from ..models.record import ServiceRecord
from ..models.result import ExpandedTerm, RankedResult, SearchResponse
from ..utils.text_processing import TextProcessor
from .eligibility import EligibilityFilter
from .expander import TermExpander
from .lexicon import Lexicon, default_lexicon
from .normalizer import NormalizedQuery, QueryNormalizer
from .policy import ScoringPolicy
from .ranker import Ranker
from .scorer import ContextualScorer
from .semantic import sanitize_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryPlan:
    """Normalized query and the terms it expands to."""
    normalized: NormalizedQuery
    terms: List[ExpandedTerm]

    @property
    def is_empty(self) -> bool:
        return self.normalized.is_empty


class RelevanceEngine:
    """
    Contextual relevance ranking over an in-memory service catalogue.

    The engine is synchronous and keeps no state between searches; the
    lexicon and policy it is built with are immutable, so one engine can
    serve concurrent searches.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        policy: Optional[ScoringPolicy] = None
    ):
        """
        Initialize the relevance engine.

        Args:
            lexicon: Thesaurus and word lists (defaults to the built-in lexicon)
            policy: Scoring weights (defaults to ScoringPolicy())
        """
        self.lexicon = lexicon or default_lexicon()
        self.policy = policy or ScoringPolicy()

        text_processor = TextProcessor()
        self.normalizer = QueryNormalizer(self.lexicon, text_processor)
        self.expander = TermExpander(self.lexicon.thesaurus)
        self.eligibility = EligibilityFilter(text_processor)
        self.scorer = ContextualScorer(self.lexicon, self.policy, text_processor)
        self.ranker = Ranker(self.policy)

    def plan(self, query: str, external_terms: Iterable[str] = ()) -> QueryPlan:
        """
        Normalize and expand a query.

        Returns an empty term list for a blank query.
        """
        normalized = self.normalizer.normalize(query)
        if normalized.is_empty:
            return QueryPlan(normalized=normalized, terms=[])

        terms = self.expander.expand(normalized.cleaned, normalized.raw, external_terms)
        return QueryPlan(normalized=normalized, terms=terms)

    def candidates(
        self,
        context: RequestContext,
        catalogue: Iterable[ServiceRecord],
        locked_entity: Optional[str] = None
    ) -> List[ServiceRecord]:
        """Eligible records for this context, in catalogue order."""
        return self.eligibility.filter(catalogue, context.channel, locked_entity)

    def rank(
        self,
        context: RequestContext,
        plan: QueryPlan,
        candidates: Iterable[ServiceRecord],
        external_scores: Optional[Mapping[str, float]] = None,
        limit: Optional[int] = None
    ) -> List[RankedResult]:
        """
        Score and rank already-eligible candidates.

        Missing or malformed external scores count as 0.
        """
        if plan.is_empty:
            return []

        scores = sanitize_scores(external_scores)
        scored = self.scorer.score_all(candidates, context, plan.terms, scores)
        return self.ranker.rank(scored, context, limit=limit)

    def search(
        self,
        context: RequestContext,
        catalogue: Iterable[ServiceRecord],
        external_scores: Optional[Mapping[str, float]] = None,
        external_terms: Iterable[str] = (),
        limit: Optional[int] = None
    ) -> SearchResponse:
        """
        Rank the catalogue for a request.

        Args:
            context: Request context
            catalogue: Service records in catalogue order
            external_scores: Semantic relevance per record id, in [0, 1]
            external_terms: Model-sourced keywords to add to the search terms
            limit: Optional maximum number of results

        Returns:
            SearchResponse with ranked results and the expanded terms. A
            blank query yields an empty response rather than every record.
        """
        plan = self.plan(context.query, external_terms)
        if plan.is_empty:
            logger.debug("Blank query; returning no results")
            return SearchResponse(results=[], terms=[])

        candidates = self.candidates(context, catalogue, plan.normalized.locked_entity)
        results = self.rank(context, plan, candidates, external_scores, limit=limit)

        logger.debug(
            f"Query '{plan.normalized.raw}' ranked {len(results)} of "
            f"{len(candidates)} eligible records"
        )
        return SearchResponse(
            results=results,
            terms=plan.terms,
            cleaned_query=plan.normalized.cleaned,
            locked_entity=plan.normalized.locked_entity,
        )
