"""In-memory saved filter store."""

from typing import Dict, List

from ..contracts.filter_store import IFilterStore
from ..models.filters import SavedFilter


class InMemoryFilterStore(IFilterStore):
    """Keeps serialized filters per scope in a dict. Survives engine restarts, not process restarts."""

    def __init__(self):
        self._scopes: Dict[str, List[dict]] = {}

    def load_filters(self, scope_id: str) -> List[SavedFilter]:
        return [SavedFilter.from_dict(item) for item in self._scopes.get(scope_id, [])]

    def persist_filters(self, scope_id: str, filters: List[SavedFilter]) -> bool:
        self._scopes[scope_id] = [saved.to_dict() for saved in filters]
        return True
