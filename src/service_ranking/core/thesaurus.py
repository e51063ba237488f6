"""Colloquial-to-official term thesaurus."""

from typing import Iterable, List, Mapping, Sequence, Tuple, Union

from .exceptions import ConfigurationError

ThesaurusSource = Union[Mapping[str, Sequence[str]], Iterable[Tuple[str, Sequence[str]]]]


class Thesaurus:
    """
    Immutable mapping from colloquial trigger fragments to official terms.

    Entries keep their definition order, which is also the order in which
    matched official terms are reported. Matching is literal substring
    containment, never fuzzy.
    """

    def __init__(self, entries: ThesaurusSource = ()):
        items = entries.items() if isinstance(entries, Mapping) else entries

        normalized: List[Tuple[str, Tuple[str, ...]]] = []
        seen = set()
        for trigger, terms in items:
            if not isinstance(trigger, str) or not trigger.strip():
                raise ConfigurationError("Thesaurus trigger cannot be empty")
            if isinstance(terms, str):
                raise ConfigurationError(
                    f"Thesaurus terms for '{trigger}' must be a list, not a string"
                )
            trigger = trigger.strip()
            if trigger in seen:
                raise ConfigurationError(f"Duplicate thesaurus trigger: {trigger}")
            seen.add(trigger)
            official = tuple(term.strip() for term in terms if term and term.strip())
            if not official:
                raise ConfigurationError(f"Thesaurus trigger '{trigger}' maps to no terms")
            normalized.append((trigger, official))

        self._entries: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(normalized)

    @property
    def entries(self) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, trigger: object) -> bool:
        return any(key == trigger for key, _ in self._entries)

    def __getitem__(self, trigger: str) -> Tuple[str, ...]:
        for key, terms in self._entries:
            if key == trigger:
                return terms
        raise KeyError(trigger)

    def triggers_in(self, *texts: str) -> List[str]:
        """Return the triggers contained in any of the given texts, in definition order."""
        folded = [text.casefold() for text in texts if text]
        return [
            key for key, _ in self._entries
            if any(key.casefold() in text for text in folded)
        ]

    def lookup(self, *texts: str) -> List[str]:
        """
        Collect the official terms for every trigger found in the texts.

        Args:
            texts: Query forms to scan (e.g. raw and cleaned query)

        Returns:
            Official terms in thesaurus-definition order, possibly repeated
            across triggers
        """
        terms: List[str] = []
        for trigger in self.triggers_in(*texts):
            terms.extend(self[trigger])
        return terms

    def to_dict(self) -> dict:
        return {key: list(terms) for key, terms in self._entries}

    def __repr__(self) -> str:
        return f"Thesaurus({len(self._entries)} entries)"
