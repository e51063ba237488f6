"""Integration tests for the async search service and the local scorer."""

import logging

import pytest

from service_ranking.api.service import ServiceSearchService
from service_ranking.core.embeddings import TfidfSemanticScorer
from service_ranking.core.exceptions import ServiceSearchError, ValidationError
from service_ranking.core.semantic import IntentAnalysis, ScoringCandidate
from service_ranking.models.context import RequestContext
from service_ranking.models.record import ServiceRecord
from service_ranking.models.result import ExpandedTerm, Provenance
from service_ranking.utils.logging_config import StructuredLogger, setup_logging

from conftest import (
    FailingAnalyzer,
    FailingScorer,
    FixedAnalyzer,
    FixedScorer,
    SlowScorer
)


def ids(response):
    return [result.record.id for result in response.results]


class TestServiceSearchServiceIntegration:
    """Integration tests for the complete service."""

    async def test_full_workflow(self, sample_records):
        """Test service creation, catalogue loading and searching."""
        scorer = FixedScorer({"id_reissue": 0.9, "id_address": 0.2})

        async with ServiceSearchService.create(scorer=scorer, log_level="WARNING") as service:
            await service.add_records(sample_records)

            response = await service.search_text("身份证丢了", channel="Android", locality="长沙")

            assert ids(response) == ["id_reissue", "id_address"]
            assert response.results[0].breakdown.semantic == pytest.approx(900.0)
            assert response.results[1].breakdown.total == pytest.approx(400.0)
            assert response.locked_entity == "身份证"

            # Only the locked, channel-eligible candidates were sent for scoring
            assert [c.id for c in scorer.calls[0]] == ["id_reissue", "id_address"]

    async def test_scorer_failure_is_absorbed(self, sample_records):
        """Test a failing scorer only removes the semantic signal."""
        async with ServiceSearchService.create(
            records=sample_records, scorer=FailingScorer(), log_level="WARNING"
        ) as service:
            response = await service.search_text("身份证丢了", channel="Android")

            assert ids(response) == ["id_reissue"]
            assert response.results[0].breakdown.semantic == 0

            stats = await service.get_stats()
            assert stats['engine']['scorer_failures'] == 1

    async def test_scorer_timeout_is_absorbed(self, sample_records):
        """Test a scorer that never answers does not block the search."""
        async with ServiceSearchService.create(
            records=sample_records, scorer=SlowScorer(), scorer_timeout=0.05, log_level="WARNING"
        ) as service:
            response = await service.search_text("身份证丢了", channel="Android")

            assert ids(response) == ["id_reissue"]
            stats = await service.get_stats()
            assert stats['engine']['scorer_failures'] == 1

    async def test_scored_batch_is_capped(self, sample_records):
        """Test at most max_scored_candidates candidates are sent to the scorer."""
        scorer = FixedScorer({"health_check": 1.0})

        async with ServiceSearchService.create(
            records=sample_records, scorer=scorer, max_scored_candidates=2, log_level="WARNING"
        ) as service:
            response = await service.search_text("办证", channel="Android")

            assert len(scorer.calls[0]) == 2
            assert all(isinstance(c, ScoringCandidate) for c in scorer.calls[0])
            # health_check was beyond the cap, so it received no score
            assert "health_check" not in ids(response)

    async def test_analyzer_keywords_and_role(self, sample_records):
        """Test analyzer keywords become external terms and fill an unset role."""
        analyzer = FixedAnalyzer(IntentAnalysis(keywords=["退休审批"], role="自然人"))

        async with ServiceSearchService.create(
            records=sample_records, analyzer=analyzer, use_local_scorer=False, log_level="WARNING"
        ) as service:
            response = await service.search_text("养老", channel="Android")

            assert analyzer.queries == ["养老"]
            assert ExpandedTerm("退休审批", Provenance.EXTERNAL) in response.terms
            assert ids(response) == ["retirement"]
            assert response.results[0].breakdown.role == 50

    async def test_explicit_role_wins_over_analyzer(self, sample_records):
        """Test the user's chosen role is not replaced by the inferred one."""
        analyzer = FixedAnalyzer({"keywords": ["退休审批"], "target": "自然人"})

        async with ServiceSearchService.create(
            records=sample_records, analyzer=analyzer, use_local_scorer=False, log_level="WARNING"
        ) as service:
            response = await service.search_text("养老", channel="Android", role="法人")

            assert ids(response) == ["retirement"]
            assert response.results[0].breakdown.role == -500

    async def test_analyzer_failure_is_absorbed(self, search_service):
        """Test a failing analyzer falls back to the plain query."""
        search_service.analyzer = FailingAnalyzer()

        response = await search_service.search_text("身份证丢了", channel="Android")

        assert ids(response) == ["id_reissue"]
        stats = await search_service.get_stats()
        assert stats['engine']['analyzer_failures'] == 1

    async def test_blank_query(self, sample_records):
        """Test a blank query returns nothing and skips the scorer."""
        scorer = FixedScorer({"id_reissue": 1.0})

        async with ServiceSearchService.create(
            records=sample_records, scorer=scorer, log_level="WARNING"
        ) as service:
            response = await service.search(RequestContext(query="  ", channel="Android"))

            assert response.results == []
            assert response.terms == []
            assert scorer.calls == []

    async def test_channel_filter_is_hard(self, search_service):
        """Test web-only services are never returned on mobile."""
        response = await search_service.search_text("企业设立登记", channel="iOS")
        assert "company_setup" not in ids(response)

        response = await search_service.search_text("企业设立登记", channel="Web")
        assert ids(response)[0] == "company_setup"

    async def test_limit(self, search_service):
        """Test result limiting."""
        response = await search_service.search_text("登记", channel="Web", limit=1)
        assert len(response.results) <= 1

    async def test_invalid_channel(self, search_service):
        """Test that a non-concrete channel is a validation error."""
        with pytest.raises(ValidationError):
            await search_service.search_text("身份证", channel="any")

    async def test_duplicate_records_rejected(self, search_service, sample_records):
        """Test that record IDs stay unique across batches."""
        with pytest.raises(ValidationError, match="Duplicate"):
            await search_service.add_record(sample_records[0])

        with pytest.raises(ValidationError, match="Duplicate"):
            await search_service.add_records([
                ServiceRecord(id="new", name="护照补办"),
                ServiceRecord(id="new", name="护照换发"),
            ])

    async def test_uninitialized_service(self):
        """Test operations before initialize() fail."""
        service = ServiceSearchService(use_local_scorer=False, log_level="WARNING")

        with pytest.raises(ServiceSearchError, match="not initialized"):
            await service.search_text("身份证", channel="Web")

        health = await service.health_check()
        assert health['status'] == 'not_initialized'

    async def test_health_and_stats(self, search_service, sample_records):
        """Test health check and statistics."""
        health = await search_service.health_check()
        assert health['status'] == 'healthy'
        assert health['is_ready']

        await search_service.search_text("身份证丢了", channel="Android")
        await search_service.search_text("退休", channel="Android")

        stats = await search_service.get_stats()
        assert stats['engine']['total_records'] == len(sample_records)
        assert stats['engine']['total_searches'] == 2
        assert stats['engine']['policy']['thesaurus_bonus'] == 1000
        assert stats['service']['scorer'] is None

    async def test_empty_catalogue_not_ready(self):
        """Test health check with no records."""
        async with ServiceSearchService.create(use_local_scorer=False, log_level="WARNING") as service:
            health = await service.health_check()
            assert health['status'] == 'not_ready'

    async def test_local_scorer(self, sample_records):
        """Test the default TF-IDF scorer contributes semantic scores."""
        async with ServiceSearchService.create(records=sample_records, log_level="WARNING") as service:
            response = await service.search_text("居民身份证遗失补领", channel="Android")

            assert ids(response)[0] == "id_reissue"
            assert response.results[0].breakdown.semantic > 0

            stats = await service.get_stats()
            assert stats['service']['scorer'] == "TfidfSemanticScorer"


class TestTfidfSemanticScorer:
    """Test TF-IDF semantic scorer."""

    @pytest.fixture
    async def scorer(self):
        scorer = TfidfSemanticScorer()
        yield scorer
        await scorer.close()

    @pytest.fixture
    def candidates(self, sample_records):
        return [ScoringCandidate.from_record(record) for record in sample_records]

    async def test_scores_in_range(self, scorer, candidates):
        """Test every candidate gets a score in [0, 1]."""
        scores = await scorer.score("身份证遗失", candidates)

        assert set(scores) == {c.id for c in candidates}
        assert all(0.0 <= value <= 1.0 for value in scores.values())

    async def test_closest_text_scores_highest(self, scorer, candidates):
        """Test similar text outranks unrelated text."""
        scores = await scorer.score("身份证遗失补领", candidates)

        assert scores["id_reissue"] > scores["company_setup"]
        assert scores["id_reissue"] == max(scores.values())

    async def test_empty_inputs(self, scorer, candidates):
        """Test empty candidates or blank query return no scores."""
        assert await scorer.score("身份证", []) == {}
        assert await scorer.score("   ", candidates) == {}

    async def test_stats(self, scorer, candidates):
        """Test batch statistics."""
        await scorer.score("身份证", candidates)

        stats = scorer.get_stats()
        assert stats['total_batches'] == 1
        assert stats['total_candidates'] == len(candidates)


class ListHandler(logging.Handler):
    """Handler collecting formatted messages."""

    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


class TestLogging:
    """Test logging configuration and structured messages."""

    @pytest.fixture
    def handler(self):
        handler = ListHandler()
        logger = logging.getLogger("service_ranking.tests")
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        yield handler
        logger.removeHandler(handler)

    def test_fields_appended(self, handler):
        """Test bound fields render after the message in bind order."""
        log = StructuredLogger("service_ranking.tests").with_context(channel="Android", role="any")

        log.info("Search returned 2 results")
        assert handler.messages == ["Search returned 2 results [channel=Android role=any]"]

    def test_with_context_does_not_mutate_parent(self, handler):
        """Test child loggers leave the parent's fields alone."""
        parent = StructuredLogger("service_ranking.tests")
        parent.with_context(channel="Web").warning("child")
        parent.warning("parent")

        assert handler.messages == ["child [channel=Web]", "parent"]

    def test_setup_logging_levels(self):
        """Test package level and quietened third-party loggers."""
        setup_logging(level="DEBUG", include_timestamp=False)

        assert logging.getLogger("service_ranking").level == logging.DEBUG
        assert logging.getLogger("sklearn").level == logging.WARNING

    def test_unknown_level(self):
        """Test an unknown level name is rejected."""
        with pytest.raises(ValueError, match="Unknown logging level"):
            setup_logging(level="LOUD")
