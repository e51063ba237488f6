"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Dict, List, Mapping, Sequence

import pytest

from service_ranking.core.engine import RelevanceEngine
from service_ranking.core.exceptions import ScorerError
from service_ranking.core.lexicon import default_lexicon
from service_ranking.core.policy import ScoringPolicy
from service_ranking.core.semantic import IntentAnalysis, ScoringCandidate
from service_ranking.models.context import RequestContext
from service_ranking.models.record import ServiceRecord
from service_ranking.api.service import ServiceSearchService


class FixedScorer:
    """Semantic scorer returning a fixed score map and recording its calls."""

    def __init__(self, scores: Mapping[str, float]):
        self.scores = dict(scores)
        self.calls: List[Sequence[ScoringCandidate]] = []

    async def score(self, query: str, candidates: Sequence[ScoringCandidate]) -> Dict[str, float]:
        self.calls.append(list(candidates))
        ids = {candidate.id for candidate in candidates}
        return {key: value for key, value in self.scores.items() if key in ids}


class FailingScorer:
    """Semantic scorer that always fails."""

    async def score(self, query, candidates):
        raise ScorerError("model quota exceeded")


class SlowScorer:
    """Semantic scorer that never answers in time."""

    async def score(self, query, candidates):
        await asyncio.sleep(5)
        return {candidate.id: 1.0 for candidate in candidates}


class FixedAnalyzer:
    """Query analyzer returning a fixed analysis."""

    def __init__(self, analysis):
        self.analysis = analysis
        self.queries: List[str] = []

    async def analyze(self, query: str):
        self.queries.append(query)
        return self.analysis


class FailingAnalyzer:
    """Query analyzer that always fails."""

    async def analyze(self, query: str) -> IntentAnalysis:
        raise ConnectionError("analyzer unreachable")


@pytest.fixture
def sample_records() -> List[ServiceRecord]:
    """Create a small government-service catalogue for testing."""
    return [
        ServiceRecord(
            id="id_reissue",
            name="居民身份证遗失补领",
            description="居民身份证丢失后申请补领",
            target_audience={"自然人"},
            jurisdiction="长沙市公安局",
            channels={"Android", "iOS", "Web"},
            is_high_frequency=True,
            satisfaction=98.0
        ),
        ServiceRecord(
            id="id_address",
            name="居民身份证地址变更",
            description="户籍地址变动后变更身份证住址",
            target_audience={"自然人"},
            jurisdiction="长沙市公安局",
            channels={"Android", "iOS", "Web"}
        ),
        ServiceRecord(
            id="company_setup",
            name="企业设立登记",
            short_name="开办企业",
            target_audience={"法人"},
            jurisdiction="湖南省市场监督管理局",
            channels={"Web"}
        ),
        ServiceRecord(
            id="health_check",
            name="从业人员健康检查",
            tags="健康证 体检",
            jurisdiction="株洲市卫生健康委员会"
        ),
        ServiceRecord(
            id="ssc_loss",
            name="社会保障卡挂失",
            target_audience={"自然人"},
            jurisdiction="湖南省人力资源和社会保障厅",
            channels={"Android", "iOS"},
            is_high_frequency=True
        ),
        ServiceRecord(
            id="retirement",
            name="退休审批",
            target_audience={"自然人"}
        ),
    ]


@pytest.fixture
def lexicon():
    """Built-in lexicon."""
    return default_lexicon()


@pytest.fixture
def policy() -> ScoringPolicy:
    """Default scoring policy."""
    return ScoringPolicy()


@pytest.fixture
def engine(lexicon, policy) -> RelevanceEngine:
    """Relevance engine with the built-in lexicon and default policy."""
    return RelevanceEngine(lexicon=lexicon, policy=policy)


@pytest.fixture
def android_context() -> RequestContext:
    """Context for the lost identity card query on Android."""
    return RequestContext(query="身份证丢了", channel="Android")


@pytest.fixture
async def search_service(sample_records):
    """Initialized service with the sample catalogue and no semantic scorer."""
    async with ServiceSearchService.create(
        records=sample_records,
        use_local_scorer=False,
        log_level="WARNING"
    ) as service:
        yield service
