"""Multi-word containment matcher."""

from typing import Any, Dict, List, Optional

from ..contracts.matcher import IMatcher


class ExactMatcher(IMatcher):
    """
    Scores one point per query word found as a substring of the text.

    Words come from splitting the lowercased query on whitespace. Repeated
    words count once per occurrence in the query.
    """

    name = 'exact'

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @staticmethod
    def split_words(query: str) -> List[str]:
        return query.lower().split()

    def score(self, query: str, text: str) -> float:
        return float(sum(1 for word in self.split_words(query) if word in text))
