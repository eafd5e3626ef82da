"""Abstract interface for saved filter persistence."""

from abc import ABC, abstractmethod
from typing import List

from ..models.filters import SavedFilter


class IFilterStore(ABC):
    """
    Persists saved filters, scoped per owning organization/user.

    Writes replace the scope's whole filter list (last write wins).
    """

    @abstractmethod
    def load_filters(self, scope_id: str) -> List[SavedFilter]:
        """
        Load all saved filters for a scope.

        Returns an empty list for unknown scopes.

        Raises:
            FilterStoreError: If the store cannot be read
        """
        pass

    @abstractmethod
    def persist_filters(self, scope_id: str, filters: List[SavedFilter]) -> bool:
        """
        Replace the scope's saved filters.

        Returns:
            True on success
        """
        pass

    def close(self) -> None:
        """Release connections. No-op by default."""
        pass
