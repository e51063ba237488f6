"""Term expansion from the query and the thesaurus."""

import logging
from typing import Dict, Iterable, List

from ..models.result import ExpandedTerm, Provenance
from .thesaurus import Thesaurus

logger = logging.getLogger(__name__)


class TermExpander:
    """
    Builds the ordered, de-duplicated set of search terms for a query.

    Order is verbatim terms, then thesaurus terms in definition order, then
    externally supplied terms. A term seen twice keeps its first provenance.
    """

    def __init__(self, thesaurus: Thesaurus):
        self.thesaurus = thesaurus

    def expand(
        self,
        cleaned_query: str,
        raw_query: str,
        external_terms: Iterable[str] = ()
    ) -> List[ExpandedTerm]:
        """
        Expand a query into provenance-tagged search terms.

        Args:
            cleaned_query: Query with filler phrases removed
            raw_query: Query as typed
            external_terms: Model-sourced keywords supplied by the caller

        Returns:
            Ordered list of unique expanded terms
        """
        collected: Dict[str, ExpandedTerm] = {}

        def add(term: str, provenance: Provenance) -> None:
            term = (term or "").strip()
            if term and term not in collected:
                collected[term] = ExpandedTerm(term=term, provenance=provenance)

        add(raw_query, Provenance.VERBATIM)
        add(cleaned_query, Provenance.VERBATIM)

        for term in self.thesaurus.lookup(raw_query, cleaned_query):
            add(term, Provenance.THESAURUS)

        for term in external_terms or ():
            if isinstance(term, str):
                add(term, Provenance.EXTERNAL)

        terms = list(collected.values())
        logger.debug(f"Expanded '{raw_query}' into {len(terms)} terms")
        return terms
