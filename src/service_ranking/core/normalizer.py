"""Query normalization: filler removal and core-entity locking."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..utils.text_processing import TextProcessor
from .lexicon import Lexicon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedQuery:
    """Raw query, its cleaned form and the locked entity, if any."""
    raw: str
    cleaned: str
    locked_entity: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """An empty cleaned query means "no search", never "match everything"."""
        return not self.cleaned


class QueryNormalizer:
    """Strips filler phrases from queries and detects core entities."""

    def __init__(self, lexicon: Lexicon, text_processor: Optional[TextProcessor] = None):
        self.lexicon = lexicon
        self.text_processor = text_processor or TextProcessor()

    def normalize(self, raw_query: Optional[str]) -> NormalizedQuery:
        """
        Normalize a raw query.

        Filler phrases are removed by literal substring removal. When that
        leaves nothing, the trimmed raw query is kept instead.

        Args:
            raw_query: Query as typed by the user

        Returns:
            NormalizedQuery; cleaned is empty only for blank input
        """
        raw = self.text_processor.collapse_whitespace(raw_query)
        if not raw:
            return NormalizedQuery(raw="", cleaned="")

        cleaned = self.text_processor.remove_phrases(raw, self.lexicon.filler_phrases)
        if not cleaned:
            cleaned = raw

        locked = self.detect_entity(raw)
        if locked:
            logger.debug(f"Locked core entity '{locked}' for query '{raw}'")

        return NormalizedQuery(raw=raw, cleaned=cleaned, locked_entity=locked)

    def detect_entity(self, text: str) -> Optional[str]:
        """Return the longest core entity contained in text, earliest listed on ties."""
        best: Optional[str] = None
        for entity in self.lexicon.core_entities:
            if self.text_processor.contains(text, entity):
                if best is None or len(entity) > len(best):
                    best = entity
        return best
