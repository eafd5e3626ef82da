"""Query execution: filtering, scoring, result assembly and sorting."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from .context import DEFAULT_WINDOW, build_context
from .text import field_display_name, section_display_name
from ..contracts.matcher import IMatcher
from ..matchers.exact import ExactMatcher
from ..matchers.fuzzy import FuzzyMatcher
from ..models.entry import IndexEntry
from ..models.search import Page, SearchOptions, SearchResult


logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) == 0
    return False


def completion_status(entry: IndexEntry) -> str:
    """
    Completion status of an entry's value.

    - incomplete: None, blank string, empty list/mapping
    - partial: list/mapping with both blank and non-blank members
    - complete: anything else (documents are always complete)
    """
    if entry.is_document:
        return 'complete'

    value = entry.value
    if _is_blank(value):
        return 'incomplete'

    if isinstance(value, (list, tuple, Mapping)):
        members = value.values() if isinstance(value, Mapping) else value
        if any(_is_blank(member) for member in members):
            return 'partial'

    return 'complete'


def _passes_filters(entry: IndexEntry, options: SearchOptions) -> bool:
    if options.sections is not None and entry.section_id not in options.sections:
        return False

    if options.field_types is not None and entry.type not in options.field_types:
        return False

    if options.date_range is not None and not options.date_range.contains(entry.last_modified):
        return False

    if options.completion_status is not None and completion_status(entry) != options.completion_status:
        return False

    if options.modified_by is not None:
        if not entry.modified_by or entry.modified_by.lower() != options.modified_by.lower():
            return False

    if options.tags:
        wanted = {tag.lower() for tag in options.tags}
        if not wanted.intersection(tag.lower() for tag in entry.tags):
            return False

    if options.has_attachments is not None and bool(entry.attachments) != options.has_attachments:
        return False

    return True


class QueryEngine:
    """
    Runs searches over an index entry list.

    The matcher is chosen per call from `options.fuzzy_search`; both
    strategies can be swapped through the constructor.
    """

    def __init__(
        self,
        exact_matcher: Optional[IMatcher] = None,
        fuzzy_matcher: Optional[IMatcher] = None,
        context_window: int = DEFAULT_WINDOW,
        highlight_marker: str = '**',
        section_names: Optional[Dict[str, str]] = None,
    ):
        self.exact_matcher = exact_matcher or ExactMatcher()
        self.fuzzy_matcher = fuzzy_matcher or FuzzyMatcher()
        self.context_window = context_window
        self.highlight_marker = highlight_marker
        self.section_names = section_names

    def matcher_for(self, options: SearchOptions) -> IMatcher:
        return self.fuzzy_matcher if options.fuzzy_search else self.exact_matcher

    def search(self, entries: Iterable[IndexEntry], options: SearchOptions) -> List[SearchResult]:
        """
        Filter, score and sort index entries.

        Returns:
            Results ordered by options.sort_by, truncated to options.max_results
        """
        matcher = self.matcher_for(options)
        words = options.query.lower().split()
        context_term = words[0] if words else ''

        results = []
        for entry in entries:
            if not _passes_filters(entry, options):
                continue

            score = matcher.score(options.query, entry.text)
            if score <= 0:
                continue

            results.append(self._to_result(entry, score, context_term))

        self.sort_results(results, options.sort_by)

        if options.max_results:
            results = results[:options.max_results]

        logger.debug(
            "Search %r (%s, sort=%s) -> %d results",
            options.query, matcher.name, options.sort_by, len(results),
        )
        return results

    @staticmethod
    def sort_results(results: List[SearchResult], sort_by: str) -> None:
        """
        Sort in place.

        - section: lexicographic by section display name (stable)
        - date: newest first; undated results after dated ones, input order kept
        - relevance (default): highest score first
        """
        if sort_by == 'section':
            results.sort(key=lambda result: result.section_name)
        elif sort_by == 'date':
            dated = [result for result in results if result.last_modified is not None]
            undated = [result for result in results if result.last_modified is None]
            dated.sort(key=lambda result: result.last_modified, reverse=True)
            results[:] = dated + undated
        else:
            results.sort(key=lambda result: result.match_score, reverse=True)

    def _to_result(self, entry: IndexEntry, score: float, context_term: str) -> SearchResult:
        return SearchResult(
            id=entry.id,
            section_id=entry.section_id,
            section_name=section_display_name(entry.section_id, self.section_names),
            field_id=entry.field_id,
            field_name=field_display_name(entry.field_id),
            field_value=entry.value,
            field_type=entry.type,
            match_score=score,
            context=build_context(
                entry.text,
                context_term,
                self.context_window,
                self.highlight_marker,
            ),
            last_modified=entry.last_modified,
            modified_by=entry.modified_by,
            attachments=list(entry.attachments),
            tags=list(entry.tags),
        )


def paginate(results: List[SearchResult], page: int = 1, per_page: int = 10) -> Page:
    """
    Slice a result list into a page.

    Pages are 1-indexed; out-of-range pages are clamped to the valid range.
    """
    if per_page < 1:
        raise ValueError("per_page must be >= 1")

    total_pages = max(1, (len(results) + per_page - 1) // per_page)
    page = min(max(1, page), total_pages)

    start = (page - 1) * per_page
    return Page(
        results=results[start:start + per_page],
        page=page,
        per_page=per_page,
        total_results=len(results),
    )
