"""High-level async API service for ranking government services."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any, AsyncContextManager, Dict, List, Mapping, Optional

from ..core.embeddings import TfidfSemanticScorer
from ..core.engine import QueryPlan, RelevanceEngine
from ..core.exceptions import SearchError, ServiceSearchError, ValidationError
from ..core.lexicon import Lexicon
from ..core.policy import ScoringPolicy
from ..core.semantic import IntentAnalysis, QueryAnalyzer, ScoringCandidate, SemanticScorer
from ..models.context import RequestContext
from ..models.record import ServiceRecord
from ..models.result import SearchResponse
from ..utils.logging_config import StructuredLogger, setup_logging
from ..utils.validators import validate_context, validate_record, validate_records_batch

logger = logging.getLogger(__name__)


class ServiceSearchService:
    """
    High-level service interface for contextual service search.

    Owns the catalogue, awaits the external collaborators (semantic scorer
    and optional query analyzer) and hands their results to the synchronous
    relevance engine. Collaborator failures and timeouts never fail a search;
    they only remove that signal.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        policy: Optional[ScoringPolicy] = None,
        scorer: Optional[SemanticScorer] = None,
        analyzer: Optional[QueryAnalyzer] = None,
        use_local_scorer: bool = True,
        scorer_timeout: float = 10.0,
        max_scored_candidates: int = 30,
        log_level: str = "INFO"
    ):
        """
        Initialize service ranking service.

        Args:
            lexicon: Thesaurus and word lists for the engine
            policy: Scoring weights for the engine
            scorer: External semantic scorer
            analyzer: External query-intent analyzer
            use_local_scorer: Use a TF-IDF scorer when no scorer is given
            scorer_timeout: Seconds to wait for each collaborator call
            max_scored_candidates: Maximum candidates sent to the scorer
            log_level: Logging level
        """
        setup_logging(level=log_level)

        if scorer_timeout <= 0:
            raise ValueError("Scorer timeout must be positive")
        if max_scored_candidates <= 0:
            raise ValueError("Max scored candidates must be positive")

        self.engine = RelevanceEngine(lexicon=lexicon, policy=policy)
        self.analyzer = analyzer
        self.scorer_timeout = scorer_timeout
        self.max_scored_candidates = max_scored_candidates

        self._owns_scorer = scorer is None and use_local_scorer
        self.scorer = scorer or (TfidfSemanticScorer() if use_local_scorer else None)

        self._records: List[ServiceRecord] = []
        self._record_ids = set()
        self._initialized = False
        self._log = StructuredLogger(__name__)

        self._stats = {
            'total_searches': 0,
            'avg_search_time': 0.0,
            'scorer_failures': 0,
            'analyzer_failures': 0
        }

        logger.info("Service search service initialized")

    async def initialize(self, records: Optional[List[ServiceRecord]] = None) -> None:
        """
        Initialize the service and optionally load a catalogue.

        Args:
            records: Initial catalogue
        """
        try:
            if records:
                self._load(records)

            self._initialized = True
            logger.info(f"Service initialization complete with {len(self._records)} records")

        except Exception as e:
            logger.error(f"Failed to initialize service: {str(e)}")
            raise ServiceSearchError(f"Service initialization failed: {str(e)}")

    async def add_record(self, record: ServiceRecord) -> None:
        """
        Add a single record to the catalogue.

        Raises:
            ValidationError: If the record is invalid or its ID already exists
        """
        self._check_initialized()
        validate_record(record)
        self._load([record])
        logger.debug(f"Added record: {record.id}")

    async def add_records(self, records: List[ServiceRecord]) -> None:
        """
        Add multiple records to the catalogue, preserving their order.

        Raises:
            ValidationError: If any record is invalid or an ID repeats
        """
        self._check_initialized()
        self._load(records)
        logger.info(f"Added {len(records)} records")

    def _load(self, records: List[ServiceRecord]) -> None:
        validate_records_batch(records)
        clashes = [record.id for record in records if record.id in self._record_ids]
        if clashes:
            raise ValidationError(f"Duplicate service record ID found: {clashes[0]}")

        self._records.extend(records)
        self._record_ids.update(record.id for record in records)

    @property
    def records(self) -> List[ServiceRecord]:
        return list(self._records)

    async def search(
        self,
        context: RequestContext,
        limit: Optional[int] = None
    ) -> SearchResponse:
        """
        Rank the catalogue for a request.

        Args:
            context: Request context
            limit: Optional maximum number of results

        Returns:
            SearchResponse with ranked results and expanded terms

        Raises:
            ValidationError: If the context is invalid
            SearchError: If ranking fails unexpectedly
        """
        self._check_initialized()
        validate_context(context)

        start_time = asyncio.get_event_loop().time()
        log = self._log.with_context(
            channel=context.channel, role=context.role, locality=context.locality
        )

        try:
            plan = self.engine.plan(context.query)
            if plan.is_empty:
                log.info("Blank query; no search performed")
                return SearchResponse(results=[], terms=[])

            intent = await self._analyze(plan.normalized.raw, log)
            if intent.keywords:
                plan = self.engine.plan(context.query, intent.keywords)
            effective = self._apply_intent(context, intent)

            candidates = self.engine.candidates(
                effective, self._records, plan.normalized.locked_entity
            )
            scores = await self._score(plan, candidates, log)
            results = self.engine.rank(effective, plan, candidates, scores, limit=limit)

        except Exception as e:
            log.error(f"Search failed: {str(e)}", exc_info=True)
            raise SearchError(f"Search failed: {str(e)}")

        search_time = asyncio.get_event_loop().time() - start_time
        self._update_search_stats(search_time)

        log.info(
            f"Search '{plan.normalized.raw}' returned {len(results)} of "
            f"{len(candidates)} candidates in {search_time:.3f}s"
        )
        return SearchResponse(
            results=results,
            terms=plan.terms,
            cleaned_query=plan.normalized.cleaned,
            locked_entity=plan.normalized.locked_entity,
        )

    async def search_text(
        self,
        text: str,
        channel: str,
        role: str = "any",
        locality: str = "any",
        weight_popularity: bool = False,
        limit: Optional[int] = None
    ) -> SearchResponse:
        """
        Convenience method for a search built from plain arguments.

        Args:
            text: Search text
            channel: Requesting channel
            role: Requesting role or "any"
            locality: Requesting locality or "any"
            weight_popularity: Whether popularity signals count
            limit: Optional maximum number of results
        """
        try:
            context = RequestContext(
                query=text,
                channel=channel,
                role=role,
                locality=locality,
                weight_popularity=weight_popularity
            )
        except ValueError as e:
            raise ValidationError(str(e))

        return await self.search(context, limit=limit)

    async def _analyze(self, query: str, log: StructuredLogger) -> IntentAnalysis:
        """Ask the analyzer for intent; any failure yields an empty analysis."""
        if self.analyzer is None:
            return IntentAnalysis()

        try:
            intent = await asyncio.wait_for(
                self.analyzer.analyze(query), timeout=self.scorer_timeout
            )
        except asyncio.TimeoutError:
            self._stats['analyzer_failures'] += 1
            log.warning("Query analyzer timed out; continuing without intent")
            return IntentAnalysis()
        except Exception as e:
            self._stats['analyzer_failures'] += 1
            log.warning(f"Query analyzer failed; continuing without intent: {str(e)}")
            return IntentAnalysis()

        if isinstance(intent, Mapping):
            intent = IntentAnalysis.from_payload(intent)
        if not isinstance(intent, IntentAnalysis):
            self._stats['analyzer_failures'] += 1
            log.warning(f"Query analyzer returned {type(intent).__name__}; ignoring")
            return IntentAnalysis()

        log.debug(f"Intent keywords: {intent.keywords}")
        return intent

    def _apply_intent(self, context: RequestContext, intent: IntentAnalysis) -> RequestContext:
        """Fill an unspecified role or locality from the inferred intent."""
        lexicon = self.engine.lexicon
        changes: Dict[str, Any] = {}
        if lexicon.is_any(context.role) and intent.role and not lexicon.is_any(intent.role):
            changes['role'] = intent.role
        if lexicon.is_any(context.locality) and intent.locality and not lexicon.is_any(intent.locality):
            changes['locality'] = intent.locality
        return replace(context, **changes) if changes else context

    async def _score(
        self,
        plan: QueryPlan,
        candidates: List[ServiceRecord],
        log: StructuredLogger
    ) -> Mapping[str, float]:
        """Ask the scorer for semantic scores; any failure yields no scores."""
        if self.scorer is None or not candidates:
            return {}

        batch = [
            ScoringCandidate.from_record(record)
            for record in candidates[:self.max_scored_candidates]
        ]

        try:
            scores = await asyncio.wait_for(
                self.scorer.score(plan.normalized.raw, batch), timeout=self.scorer_timeout
            )
        except asyncio.TimeoutError:
            self._stats['scorer_failures'] += 1
            log.warning(f"Semantic scorer timed out after {self.scorer_timeout}s; scoring without it")
            return {}
        except Exception as e:
            self._stats['scorer_failures'] += 1
            log.warning(f"Semantic scorer failed; scoring without it: {str(e)}")
            return {}

        if not isinstance(scores, Mapping):
            self._stats['scorer_failures'] += 1
            log.warning(f"Semantic scorer returned {type(scores).__name__}; ignoring")
            return {}

        return scores

    def _update_search_stats(self, search_time: float) -> None:
        """Update search performance statistics."""
        self._stats['total_searches'] += 1

        total_searches = self._stats['total_searches']
        current_avg = self._stats['avg_search_time']
        self._stats['avg_search_time'] = (
            (current_avg * (total_searches - 1) + search_time) / total_searches
        )

    async def get_stats(self) -> Dict[str, Any]:
        """Get service and engine statistics."""
        self._check_initialized()

        return {
            'service': {
                'initialized': self._initialized,
                'scorer': type(self.scorer).__name__ if self.scorer else None,
                'analyzer': type(self.analyzer).__name__ if self.analyzer else None,
                'scorer_timeout': self.scorer_timeout,
                'max_scored_candidates': self.max_scored_candidates
            },
            'engine': {
                **self._stats,
                'total_records': len(self._records),
                'thesaurus_entries': len(self.engine.lexicon.thesaurus),
                'policy': self.engine.policy.to_dict()
            }
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform a health check."""
        if not self._initialized:
            return {
                'status': 'not_initialized',
                'message': 'Service not initialized'
            }

        is_ready = bool(self._records)
        return {
            'status': 'healthy' if is_ready else 'not_ready',
            'is_ready': is_ready,
            'stats': await self.get_stats(),
            'timestamp': asyncio.get_event_loop().time()
        }

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise ServiceSearchError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Clean up resources and close the service."""
        try:
            if self._owns_scorer and isinstance(self.scorer, TfidfSemanticScorer):
                await self.scorer.close()
            self._initialized = False
            logger.info("Service closed successfully")

        except Exception as e:
            logger.error(f"Error during service shutdown: {str(e)}")

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        records: Optional[List[ServiceRecord]] = None,
        **kwargs
    ) -> AsyncContextManager['ServiceSearchService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            records: Initial catalogue
            **kwargs: Additional service configuration

        Yields:
            Initialized service
        """
        service = cls(**kwargs)

        try:
            await service.initialize(records)
            yield service
        finally:
            await service.close()
