"""Order-preserving subsequence matcher."""

from typing import Any, Dict, Optional

from ..contracts.matcher import IMatcher


class FuzzyMatcher(IMatcher):
    """
    Walks query and text together, tolerating gaps in the text.

    Scoring:
    - each matched character adds 1 + the current run of consecutive matches
    - a mismatch resets the run and advances only the text
    - consuming the whole query adds `complete_bonus` (10)
    - `length_penalty` (0.1) per character of length difference is subtracted
    - the result is floored at 0
    """

    name = 'fuzzy'

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.complete_bonus = float(self.config.get('complete_bonus', 10))
        self.length_penalty = float(self.config.get('length_penalty', 0.1))

    def score(self, query: str, text: str) -> float:
        pattern = query.lower()
        text = text.lower()

        if not pattern.strip():
            return 0.0

        score = 0.0
        pattern_idx = 0
        text_idx = 0
        consecutive = 0

        while text_idx < len(text) and pattern_idx < len(pattern):
            if pattern[pattern_idx] == text[text_idx]:
                score += 1 + consecutive
                consecutive += 1
                pattern_idx += 1
            else:
                consecutive = 0
            text_idx += 1

        if pattern_idx == len(pattern):
            score += self.complete_bonus

        score -= abs(len(pattern) - len(text)) * self.length_penalty

        return max(0.0, score)
