"""Contextual multi-signal scoring of eligible candidates."""

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.context import RequestContext
from ..models.record import ServiceRecord
from ..models.result import ExpandedTerm, Provenance, ScoreBreakdown, ScoredCandidate
from ..utils.text_processing import TextProcessor
from .lexicon import Lexicon
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)


class ContextualScorer:
    """
    Additive scorer combining lexical, thesaurus, semantic, role, locality
    and popularity signals.

    Mismatches on role or locality subtract a large penalty instead of
    excluding the record, so a lone mismatching record can still be found
    while never outranking a matching one at realistic semantic scores.
    """

    def __init__(
        self,
        lexicon: Lexicon,
        policy: ScoringPolicy,
        text_processor: Optional[TextProcessor] = None
    ):
        self.lexicon = lexicon
        self.policy = policy
        self.text_processor = text_processor or TextProcessor()

    def score_all(
        self,
        candidates: Iterable[ServiceRecord],
        context: RequestContext,
        terms: Sequence[ExpandedTerm],
        semantic_scores: Optional[Mapping[str, float]] = None
    ) -> List[ScoredCandidate]:
        """Score every candidate, keeping candidate order."""
        scores = semantic_scores or {}
        return [
            self.score(record, context, terms, scores.get(record.id, 0.0))
            for record in candidates
        ]

    def score(
        self,
        record: ServiceRecord,
        context: RequestContext,
        terms: Sequence[ExpandedTerm],
        semantic_score: float = 0.0
    ) -> ScoredCandidate:
        """
        Compute the score breakdown for one candidate.

        Args:
            record: Eligible service record
            context: Request context
            terms: Expanded search terms
            semantic_score: External relevance in [0, 1]

        Returns:
            ScoredCandidate with breakdown and matched terms
        """
        matched = self.matched_terms(record, terms)
        lexical, thesaurus = self._lexical_scores(record, matched)

        breakdown = ScoreBreakdown(
            lexical=lexical,
            thesaurus=thesaurus,
            semantic=semantic_score * self.policy.semantic_multiplier,
            role=self.role_score(record, context.role),
            locality=self.locality_score(record, context.locality),
            popularity=self.popularity_score(record) if context.weight_popularity else 0.0,
        )
        return ScoredCandidate(
            record=record,
            breakdown=breakdown,
            matched_terms=matched,
            semantic_score=semantic_score,
        )

    def matched_terms(
        self,
        record: ServiceRecord,
        terms: Sequence[ExpandedTerm]
    ) -> List[ExpandedTerm]:
        """Terms found as substrings of the record's name, short name or tags."""
        fields = (record.name, record.short_name, record.tags)
        return [
            term for term in terms
            if any(self.text_processor.contains(text, term.term) for text in fields)
        ]

    def _lexical_scores(
        self,
        record: ServiceRecord,
        matched: Sequence[ExpandedTerm]
    ) -> Tuple[float, float]:
        lexical = self.policy.lexical_hit * len(matched)

        name = self.text_processor.fold(record.name.strip())
        if name and any(self.text_processor.fold(term.term) == name for term in matched):
            lexical += self.policy.exact_name_bonus

        thesaurus = 0.0
        if any(term.provenance == Provenance.THESAURUS for term in matched):
            thesaurus = self.policy.thesaurus_bonus

        return lexical, thesaurus

    def role_score(self, record: ServiceRecord, role: str) -> float:
        """Bonus when the audience lists the role, penalty when it excludes it."""
        if self.lexicon.is_any(role) or not record.target_audience:
            return 0.0

        audience = [self.text_processor.fold(a) for a in record.target_audience if a]
        if not audience or any(self.lexicon.is_any(a) for a in audience):
            return 0.0

        variants = self.lexicon.role_variants(role)
        if any(variant in entry for variant in variants for entry in audience):
            return self.policy.role_match_bonus
        return -self.policy.role_penalty

    def locality_score(self, record: ServiceRecord, locality: str) -> float:
        """
        Bonus for a local service, zero for province-level or blank
        jurisdictions, penalty for another locality's service.
        """
        if self.lexicon.is_any(locality):
            return 0.0

        jurisdiction = record.jurisdiction.strip()
        if self.text_processor.contains(jurisdiction, locality.strip()):
            return self.policy.locality_match_bonus
        if not jurisdiction or self.lexicon.is_regional(jurisdiction):
            return 0.0
        return -self.policy.locality_penalty

    def popularity_score(self, record: ServiceRecord) -> float:
        score = 0.0
        if record.is_high_frequency:
            score += self.policy.high_frequency_bonus
        if record.satisfaction and record.satisfaction > 0:
            score += record.satisfaction * self.policy.satisfaction_weight
        return score
