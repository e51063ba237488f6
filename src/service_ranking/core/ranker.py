"""Ranking, noise cutoff and match explanations."""

import logging
from typing import List, Optional, Sequence

from ..models.context import RequestContext
from ..models.result import Provenance, RankedResult, ScoredCandidate
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)


class Ranker:
    """Orders scored candidates and drops noise."""

    def __init__(self, policy: ScoringPolicy):
        self.policy = policy

    def rank(
        self,
        scored: Sequence[ScoredCandidate],
        context: RequestContext,
        limit: Optional[int] = None
    ) -> List[RankedResult]:
        """
        Rank scored candidates.

        Sorting is stable, so equal totals keep catalogue order. A candidate
        survives the cutoff if its total exceeds the threshold or it has a
        lexical or thesaurus hit, which keeps literal matches visible when
        every semantic score is low.

        Args:
            scored: Candidates in catalogue order
            context: Request context, used for explanations
            limit: Optional maximum number of results

        Returns:
            Ranked results with 1-based ranks
        """
        kept = [candidate for candidate in scored if self.passes_cutoff(candidate)]
        ordered = sorted(kept, key=lambda candidate: candidate.breakdown.total, reverse=True)

        if limit is not None:
            ordered = ordered[:max(limit, 0)]

        logger.debug(
            f"Ranked {len(scored)} candidates; {len(kept)} passed the cutoff, "
            f"returning {len(ordered)}"
        )

        return [
            RankedResult(
                record=candidate.record,
                breakdown=candidate.breakdown,
                matched_terms=list(candidate.matched_terms),
                reasons=self.explain(candidate, context),
                rank=rank,
            )
            for rank, candidate in enumerate(ordered, 1)
        ]

    def passes_cutoff(self, candidate: ScoredCandidate) -> bool:
        breakdown = candidate.breakdown
        return (
            breakdown.total > self.policy.cutoff_threshold
            or breakdown.lexical > 0
            or breakdown.thesaurus > 0
        )

    def explain(self, candidate: ScoredCandidate, context: RequestContext) -> List[str]:
        """Build human-readable reasons from a candidate's breakdown."""
        breakdown = candidate.breakdown
        record = candidate.record
        reasons: List[str] = []

        literal = [t.term for t in candidate.matched_terms if t.provenance == Provenance.VERBATIM]
        mapped = [t.term for t in candidate.matched_terms if t.provenance == Provenance.THESAURUS]
        external = [t.term for t in candidate.matched_terms if t.provenance == Provenance.EXTERNAL]

        if literal:
            reasons.append(f"Matches query: {', '.join(literal)}")
        if mapped:
            reasons.append(f"Matches official terms: {', '.join(mapped)}")
        if external:
            reasons.append(f"Matches suggested keywords: {', '.join(external)}")
        if breakdown.semantic > 0:
            reasons.append(f"Semantic relevance {candidate.semantic_score:.2f}")

        if breakdown.role > 0:
            reasons.append(f"Serves {context.role}")
        elif breakdown.role < 0:
            reasons.append(f"Not intended for {context.role}")

        if breakdown.locality > 0:
            reasons.append(f"Local service: {record.jurisdiction}")
        elif breakdown.locality < 0:
            reasons.append(f"Outside {context.locality}: {record.jurisdiction}")

        if breakdown.popularity > 0:
            if record.is_high_frequency:
                reasons.append("High-frequency service")
            if record.satisfaction:
                reasons.append(f"Satisfaction {record.satisfaction:g}")

        return reasons
