"""Saved and quick filter models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from .search import filters_from_dict, filters_to_dict


@dataclass
class SavedFilter:
    """
    A named, persisted snapshot of a search.

    'filters' holds the SearchOptions filter fields (see FILTER_FIELDS);
    the query string is kept separately.
    """

    id: str
    name: str
    query: str
    filters: Dict[str, Any]
    saved_at: datetime
    saved_by: str

    def to_dict(self) -> dict:
        """Convert to dictionary for the filter store."""
        return {
            'id': self.id,
            'name': self.name,
            'query': self.query,
            'filters': filters_to_dict(self.filters),
            'saved_at': self.saved_at.isoformat(),
            'saved_by': self.saved_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SavedFilter':
        """Create from dictionary."""
        return cls(
            id=data['id'],
            name=data['name'],
            query=data.get('query', ''),
            filters=filters_from_dict(data.get('filters') or {}),
            saved_at=datetime.fromisoformat(data['saved_at']),
            saved_by=data.get('saved_by', ''),
        )


@dataclass
class QuickFilter:
    """Built-in filter preset. Not persisted."""

    label: str
    options: Dict[str, Any] = field(default_factory=dict)  # partial SearchOptions fields
