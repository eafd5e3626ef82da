"""Search request and result models."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entry import parse_timestamp


SORT_KEYS = ('relevance', 'date', 'section')
COMPLETION_STATUSES = ('complete', 'incomplete', 'partial')

# SearchOptions fields that make up a saved filter's 'filters' object
FILTER_FIELDS = (
    'sections',
    'field_types',
    'date_range',
    'completion_status',
    'modified_by',
    'tags',
    'has_attachments',
)


@dataclass
class DateRange:
    """Inclusive date range filter."""

    start: datetime
    end: datetime

    def __post_init__(self):
        """Normalize both ends to naive UTC, the form index timestamps use."""
        start = parse_timestamp(self.start)
        end = parse_timestamp(self.end)
        if start is None or end is None:
            raise ValueError(f"Invalid date range: {self.start!r} - {self.end!r}")
        self.start = start
        self.end = end

    def contains(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        return self.start <= moment <= self.end

    def to_dict(self) -> dict:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DateRange':
        return cls(start=data.get('start'), end=data.get('end'))


@dataclass
class SearchOptions:
    """
    A search request: query string plus optional filters.

    Unset filters are None and do not restrict the result set.
    """

    query: str = ''
    sections: Optional[List[str]] = None
    field_types: Optional[List[str]] = None
    date_range: Optional[DateRange] = None
    completion_status: Optional[str] = None  # 'complete', 'incomplete', 'partial'
    modified_by: Optional[str] = None
    tags: Optional[List[str]] = None
    has_attachments: Optional[bool] = None
    fuzzy_search: bool = False
    max_results: Optional[int] = None
    sort_by: str = 'relevance'  # 'relevance', 'date', 'section'

    def __post_init__(self):
        """Validate enumerated fields."""
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"Invalid sort_by: {self.sort_by}")

        if self.completion_status is not None and self.completion_status not in COMPLETION_STATUSES:
            raise ValueError(f"Invalid completion_status: {self.completion_status}")

        if self.max_results is not None and self.max_results < 0:
            raise ValueError("max_results must be >= 0")

    def filters(self) -> Dict[str, Any]:
        """Deep copy of the filter fields, keyed by field name."""
        return {name: copy.deepcopy(getattr(self, name)) for name in FILTER_FIELDS}

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        result = {'query': self.query}
        result.update(filters_to_dict(self.filters()))
        result['fuzzy_search'] = self.fuzzy_search
        result['max_results'] = self.max_results
        result['sort_by'] = self.sort_by
        return result

    @classmethod
    def from_dict(cls, data: dict) -> 'SearchOptions':
        """Create from dictionary."""
        filters = filters_from_dict(data)
        return cls(
            query=data.get('query', ''),
            fuzzy_search=bool(data.get('fuzzy_search', False)),
            max_results=data.get('max_results'),
            sort_by=data.get('sort_by') or 'relevance',
            **filters,
        )


def filters_to_dict(filters: Dict[str, Any]) -> dict:
    """Serialize a filters mapping (DateRange becomes ISO strings)."""
    result = {}
    for name in FILTER_FIELDS:
        value = filters.get(name)
        if isinstance(value, DateRange):
            value = value.to_dict()
        elif isinstance(value, list):
            value = list(value)
        result[name] = value
    return result


def filters_from_dict(data: dict) -> Dict[str, Any]:
    """Inverse of filters_to_dict. Missing keys come back as None."""
    result = {}
    for name in FILTER_FIELDS:
        value = data.get(name)
        if name == 'date_range' and isinstance(value, dict):
            value = DateRange.from_dict(value)
        elif isinstance(value, list):
            value = list(value)
        result[name] = value
    return result


@dataclass
class SearchResult:
    """Presentation-ready projection of a matched index entry."""

    id: str
    section_id: str
    section_name: str
    field_id: str
    field_name: str
    field_value: Any
    field_type: str
    match_score: float
    context: str
    last_modified: Optional[datetime] = None
    modified_by: Optional[str] = None
    attachments: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'section_id': self.section_id,
            'section_name': self.section_name,
            'field_id': self.field_id,
            'field_name': self.field_name,
            'field_value': self.field_value,
            'field_type': self.field_type,
            'match_score': self.match_score,
            'context': self.context,
            'last_modified': self.last_modified.isoformat() if self.last_modified else None,
            'modified_by': self.modified_by,
            'attachments': list(self.attachments),
            'tags': list(self.tags),
        }


@dataclass
class Page:
    """One page of a result list."""

    results: List[SearchResult]
    page: int  # 1-indexed
    per_page: int
    total_results: int

    @property
    def total_pages(self) -> int:
        if self.total_results == 0:
            return 1
        return (self.total_results + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
