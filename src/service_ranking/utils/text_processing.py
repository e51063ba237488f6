"""Text processing utilities for queries and catalogue fields."""

import re
from typing import Any, FrozenSet, Iterable, Optional


class TextProcessor:
    """Literal, deterministic text helpers shared by the ranking components."""

    def __init__(self):
        """Initialize text processor patterns."""
        self.whitespace_pattern = re.compile(r'\s+')
        # Multi-valued catalogue cells, e.g. "自然人,法人" or "PC端;移动端"
        self.separator_pattern = re.compile(r'[,，;；、|/]+')
        self.number_pattern = re.compile(r'[^0-9.]')
        self.truthy_values = {'是', 'y', 'yes', 'true', '1', 't'}

    def collapse_whitespace(self, text: Optional[str]) -> str:
        """Trim and collapse internal runs of whitespace to a single space."""
        if not text:
            return ""
        return self.whitespace_pattern.sub(' ', text).strip()

    def fold(self, text: Optional[str]) -> str:
        """Case-fold text for comparisons; None reads as empty."""
        if not text:
            return ""
        return text.casefold()

    def contains(self, haystack: Optional[str], needle: Optional[str]) -> bool:
        """Case-insensitive substring test; an empty needle never matches."""
        if not needle or not haystack:
            return False
        return self.fold(needle) in self.fold(haystack)

    def remove_phrases(self, text: str, phrases: Iterable[str]) -> str:
        """
        Remove every occurrence of the given phrases from text.

        Phrases are removed literally and case-insensitively in the order
        given, so callers should pass longer phrases first.

        Args:
            text: Text to strip
            phrases: Literal phrases to remove

        Returns:
            Text with phrases removed and whitespace collapsed
        """
        result = text or ""
        for phrase in phrases:
            if not phrase:
                continue
            result = re.sub(re.escape(phrase), '', result, flags=re.IGNORECASE)
        return self.collapse_whitespace(result)

    def split_values(self, value: Any) -> FrozenSet[str]:
        """
        Split a multi-valued cell into a set of trimmed values.

        Accepts either a delimited string or an iterable of strings.
        """
        if value is None:
            return frozenset()
        if isinstance(value, str):
            parts = self.separator_pattern.split(value)
        else:
            parts = [str(item) for item in value]
        return frozenset(part.strip() for part in parts if part and part.strip())

    def parse_flag(self, value: Any) -> bool:
        """Interpret catalogue yes/no markers ("是", "yes", "true", 1)."""
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).strip().lower() in self.truthy_values

    def parse_satisfaction(self, value: Any) -> Optional[float]:
        """
        Parse a satisfaction value such as 4.9, "98" or "98%".

        Returns:
            The numeric value, or None when nothing numeric remains
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        digits = self.number_pattern.sub('', str(value))
        if not digits:
            return None
        try:
            return float(digits)
        except ValueError:
            return None
