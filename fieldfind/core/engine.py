"""Search engine facade: the caller-facing API."""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from .context import DEFAULT_WINDOW
from .filter_catalog import FilterCatalog
from .indexer import Indexer
from .query import QueryEngine
from .registry import ComponentRegistry
from .suggestions import MAX_SUGGESTIONS, suggest
from ..contracts.classifier import ITypeClassifier
from ..contracts.filter_store import IFilterStore
from ..contracts.matcher import IMatcher
from ..contracts.record_store import IRecordStore
from ..models.filters import QuickFilter, SavedFilter
from ..models.search import SearchOptions, SearchResult


logger = logging.getLogger(__name__)


class SearchEngine:
    """
    One engine per caller/session.

    Owns the index, the scope id and the saved filter catalog. All
    operations are synchronous; `initialize` and `refresh_index` are the
    only calls that read the record store.

    Usage:
        engine = SearchEngine(record_store=JsonRecordStore({'path': 'org.json'}))
        engine.initialize('org-42')
        results = engine.search(SearchOptions(query='health initiative'))
    """

    def __init__(
        self,
        record_store: Optional[IRecordStore] = None,
        filter_store: Optional[IFilterStore] = None,
        classifier: Optional[ITypeClassifier] = None,
        exact_matcher: Optional[IMatcher] = None,
        fuzzy_matcher: Optional[IMatcher] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.config = config or {}
        self.record_store = record_store
        self.scope_id = ''
        self.initialized = False

        self.indexer = Indexer(classifier)
        self.query_engine = QueryEngine(
            exact_matcher=exact_matcher,
            fuzzy_matcher=fuzzy_matcher,
            context_window=self.config.get('context_window', DEFAULT_WINDOW),
            highlight_marker=self.config.get('highlight_marker', '**'),
            section_names=self.config.get('section_names'),
        )
        self.catalog = FilterCatalog(filter_store)

        self.max_suggestions = self.config.get('max_suggestions', MAX_SUGGESTIONS)
        self.suggest_min_chars = self.config.get('suggest_min_chars', 0)

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        registry: Optional[ComponentRegistry] = None,
    ) -> 'SearchEngine':
        """
        Build an engine from a loaded YAML configuration.

        Components are read from config['components'] ('record_store',
        'filter_store', 'classifier', 'exact_matcher', 'fuzzy_matcher');
        engine settings from config['search'].
        """
        registry = registry or ComponentRegistry()
        components = config.get('components', {})

        return cls(
            record_store=registry.create_component('record_store', components),
            filter_store=registry.create_component('filter_store', components),
            classifier=registry.create_component('classifier', components),
            exact_matcher=registry.create_component('exact_matcher', components),
            fuzzy_matcher=registry.create_component('fuzzy_matcher', components),
            config=config.get('search', {}),
        )

    def initialize(self, scope_id: str) -> None:
        """Load the scope's saved filters and build the index."""
        self.scope_id = scope_id
        self.catalog.load(scope_id)
        self.refresh_index()
        self.initialized = True

    def refresh_index(self) -> bool:
        """
        Rebuild the index from the record store.

        Returns False (and keeps the previous index) if the store failed.
        """
        if self.record_store is None:
            logger.warning("No record store configured, index stays empty")
            self.indexer.built = True
            return False

        return self.indexer.refresh(self.record_store)

    def _ensure_index(self) -> None:
        if not self.indexer.built:
            self.refresh_index()

    def search(self, options: SearchOptions) -> List[SearchResult]:
        self._ensure_index()
        return self.query_engine.search(self.indexer.entries, options)

    def suggest(self, partial: str) -> List[str]:
        self._ensure_index()
        return suggest(
            self.indexer.entries,
            partial,
            limit=self.max_suggestions,
            min_chars=self.suggest_min_chars,
        )

    def save_filter(self, name: str, options: SearchOptions, saved_by: str) -> str:
        return self.catalog.save_filter(name, options, saved_by)

    def get_saved_filters(self) -> List[SavedFilter]:
        return self.catalog.get_saved_filters()

    def apply_saved_filter(self, filter_id: str) -> Optional[SearchOptions]:
        return self.catalog.apply_saved_filter(filter_id)

    def delete_saved_filter(self, filter_id: str) -> bool:
        return self.catalog.delete_saved_filter(filter_id)

    def get_quick_filters(self) -> List[QuickFilter]:
        return self.catalog.quick_filters()

    def get_statistics(self) -> dict:
        """
        Index statistics.

        Returns:
            Dict with keys: total_entries, total_documents, sections,
            type_distribution, saved_filters, fingerprint
        """
        entries = self.indexer.entries

        return {
            'scope_id': self.scope_id,
            'total_entries': len(entries),
            'total_documents': sum(1 for entry in entries if entry.is_document),
            'sections': dict(Counter(entry.section_id for entry in entries)),
            'type_distribution': dict(Counter(entry.type for entry in entries)),
            'saved_filters': len(self.catalog),
            'fingerprint': self.indexer.fingerprint,
        }

    def close(self) -> None:
        """Release collaborator resources."""
        if self.catalog.store is not None:
            self.catalog.store.close()
