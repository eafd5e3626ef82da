"""Data models for fieldfind."""

from .entry import IndexEntry, DocumentDescriptor, parse_timestamp
from .search import DateRange, SearchOptions, SearchResult, Page
from .filters import SavedFilter, QuickFilter

__all__ = [
    "IndexEntry",
    "DocumentDescriptor",
    "parse_timestamp",
    "DateRange",
    "SearchOptions",
    "SearchResult",
    "Page",
    "SavedFilter",
    "QuickFilter",
]
