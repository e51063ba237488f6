"""TF-IDF semantic scorer for use when no external model is available."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from ..utils.text_processing import TextProcessor
from .exceptions import ScorerError
from .semantic import ScoringCandidate

logger = logging.getLogger(__name__)


class TfidfSemanticScorer:
    """
    Local semantic scorer based on character n-gram TF-IDF similarity.

    Character n-grams work for unsegmented Chinese text as well as for
    space-delimited languages. The vectorizer is fitted per call on the
    candidate batch plus the query, since batches are small.
    """

    def __init__(
        self,
        ngram_range: Tuple[int, int] = (1, 2),
        max_features: int = 10000,
        analyzer: str = "char_wb",
        executor: Optional[ThreadPoolExecutor] = None
    ):
        """
        Initialize TF-IDF scorer.

        Args:
            ngram_range: Character n-gram range
            max_features: Maximum number of features to extract
            analyzer: scikit-learn analyzer ("char_wb", "char" or "word")
            executor: Thread pool executor for async operations
        """
        self.ngram_range = ngram_range
        self.max_features = max_features
        self.analyzer = analyzer
        self.text_processor = TextProcessor()

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2)

        self._stats = {'total_batches': 0, 'total_candidates': 0}

    async def score(
        self,
        query: str,
        candidates: Sequence[ScoringCandidate]
    ) -> Dict[str, float]:
        """
        Score candidates against the query.

        Args:
            query: Search query text
            candidates: Candidates to score

        Returns:
            Mapping of candidate id to similarity in [0, 1]

        Raises:
            ScorerError: If vectorization fails
        """
        if not candidates or not self.text_processor.collapse_whitespace(query):
            return {}

        try:
            scores = await asyncio.get_event_loop().run_in_executor(
                self._executor, self._score_sync, query, list(candidates)
            )
        except Exception as e:
            logger.error(f"TF-IDF scoring failed: {str(e)}")
            raise ScorerError(f"TF-IDF scoring failed: {str(e)}")

        self._stats['total_batches'] += 1
        self._stats['total_candidates'] += len(candidates)
        return scores

    def _score_sync(self, query: str, candidates: List[ScoringCandidate]) -> Dict[str, float]:
        """Vectorize and compare synchronously in the thread pool."""
        texts = [self._candidate_text(candidate) for candidate in candidates]
        texts.append(self.text_processor.collapse_whitespace(query))

        vectorizer = TfidfVectorizer(
            analyzer=self.analyzer,
            ngram_range=self.ngram_range,
            max_features=self.max_features,
            lowercase=True
        )
        try:
            matrix = vectorizer.fit_transform(texts)
        except ValueError as e:
            # Raised when no n-grams remain, e.g. punctuation-only input
            logger.debug(f"Empty TF-IDF vocabulary: {str(e)}")
            return {}

        similarities = cosine_similarity(matrix[-1], matrix[:-1]).flatten()
        similarities = np.clip(similarities, 0.0, 1.0)

        return {
            candidate.id: float(similarity)
            for candidate, similarity in zip(candidates, similarities)
        }

    def _candidate_text(self, candidate: ScoringCandidate) -> str:
        parts = [candidate.name]
        if candidate.description and candidate.description != candidate.name:
            parts.append(candidate.description)
        return self.text_processor.collapse_whitespace(" ".join(parts))

    def get_stats(self) -> Dict[str, object]:
        return {
            **self._stats,
            'config': {
                'ngram_range': self.ngram_range,
                'max_features': self.max_features,
                'analyzer': self.analyzer
            }
        }

    async def close(self) -> None:
        """Shut down the executor if this scorer created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
