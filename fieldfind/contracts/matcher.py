"""Abstract interface for query/text scoring."""

from abc import ABC, abstractmethod


class IMatcher(ABC):
    """
    Scores how well a query matches an index entry's text.

    A score of 0 (or less) means no match; the query engine drops those
    entries. Higher is better.
    """

    name: str = ''

    @abstractmethod
    def score(self, query: str, text: str) -> float:
        """
        Compute the match score.

        Args:
            query: Raw query string as typed by the caller
            text: Normalized (lowercase) entry text

        Returns:
            Non-negative score
        """
        pass
