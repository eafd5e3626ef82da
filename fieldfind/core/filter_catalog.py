"""Saved filter CRUD and quick filter presets."""

import copy
import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from ..contracts.filter_store import IFilterStore
from ..models.filters import QuickFilter, SavedFilter
from ..models.search import DateRange, SearchOptions


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def default_quick_filters(now: Optional[datetime] = None) -> List[QuickFilter]:
    """Built-in presets. 'Recently Modified' covers the 7 days up to `now`."""
    now = now or _utcnow()
    return [
        QuickFilter('Incomplete Fields', {'completion_status': 'incomplete'}),
        QuickFilter('Recently Modified', {
            'date_range': DateRange(start=now - timedelta(days=7), end=now),
        }),
        QuickFilter('Has Attachments', {'has_attachments': True}),
        QuickFilter('Financial Data', {'sections': ['financials']}),
        QuickFilter('Contact Information', {'field_types': ['email', 'phone']}),
    ]


class FilterCatalog:
    """
    In-memory catalog of saved filters for one scope.

    Every change is written through to the filter store. Store failures are
    logged; the in-memory catalog stays authoritative for this session.
    """

    def __init__(
        self,
        store: Optional[IFilterStore] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.clock = clock
        self.scope_id = ''
        self._filters: Dict[str, SavedFilter] = {}

    def __len__(self) -> int:
        return len(self._filters)

    def load(self, scope_id: str) -> bool:
        """
        Load the scope's saved filters from the store.

        A failed read of a new scope leaves the catalog empty; a failed
        reload of the current scope keeps what is already held.

        Returns:
            True if the store was read successfully
        """
        if scope_id != self.scope_id:
            self._filters = {}
        self.scope_id = scope_id
        if self.store is None:
            return True

        try:
            filters = self.store.load_filters(scope_id)
        except Exception:
            logger.exception("Failed to load saved filters for scope %r", scope_id)
            return False

        self._filters = {saved.id: saved for saved in filters}
        logger.debug("Loaded %d saved filters for scope %r", len(self._filters), scope_id)
        return True

    def save_filter(self, name: str, options: SearchOptions, saved_by: str) -> str:
        """Store a snapshot of `options` under a new id and return the id."""
        filter_id = self._generate_id()

        self._filters[filter_id] = SavedFilter(
            id=filter_id,
            name=name,
            query=options.query,
            filters=options.filters(),
            saved_at=self.clock(),
            saved_by=saved_by,
        )
        self._persist()
        return filter_id

    def get_saved_filters(self) -> List[SavedFilter]:
        """Saved filters in insertion order."""
        return list(self._filters.values())

    def get_saved_filter(self, filter_id: str) -> Optional[SavedFilter]:
        return self._filters.get(filter_id)

    def apply_saved_filter(self, filter_id: str) -> Optional[SearchOptions]:
        """Rebuild SearchOptions from a saved filter, or None if unknown."""
        saved = self._filters.get(filter_id)
        if saved is None:
            return None

        return SearchOptions(query=saved.query, **copy.deepcopy(saved.filters))

    def delete_saved_filter(self, filter_id: str) -> bool:
        """Remove a saved filter. Returns False if the id is unknown."""
        if filter_id not in self._filters:
            return False

        del self._filters[filter_id]
        self._persist()
        return True

    def quick_filters(self) -> List[QuickFilter]:
        """Presets computed against the current clock."""
        return default_quick_filters(self.clock())

    def _generate_id(self) -> str:
        while True:
            filter_id = f"filter_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
            if filter_id not in self._filters:
                return filter_id

    def _persist(self) -> None:
        if self.store is None:
            return

        try:
            ok = self.store.persist_filters(self.scope_id, self.get_saved_filters())
        except Exception:
            logger.exception("Failed to save filters for scope %r", self.scope_id)
            return

        if not ok:
            logger.error("Filter store rejected write for scope %r", self.scope_id)
