"""Autosuggestions drawn from the index."""

from typing import Iterable, List, Optional

from .text import SUGGESTION_SECTIONS, field_display_name
from ..models.entry import IndexEntry


MAX_SUGGESTIONS = 10
MAX_VALUE_LENGTH = 50


def suggest(
    entries: Iterable[IndexEntry],
    partial: str,
    limit: int = MAX_SUGGESTIONS,
    min_chars: int = 0,
    sections: Optional[List[str]] = None,
) -> List[str]:
    """
    Candidate completions for a partial query.

    Sources, in discovery order: field display names, string values shorter
    than 50 characters, then section names. Matching is case-insensitive
    substring; duplicates are dropped. An empty partial matches every
    candidate unless `min_chars` is raised.
    """
    if len(partial) < min_chars:
        return []

    needle = partial.lower()
    found = {}  # insertion-ordered set

    for entry in entries:
        field_name = field_display_name(entry.field_id)
        if needle in field_name.lower():
            found.setdefault(field_name, None)

        value = entry.value
        if isinstance(value, str) and len(value) < MAX_VALUE_LENGTH and needle in value.lower():
            found.setdefault(value, None)

    for section in (SUGGESTION_SECTIONS if sections is None else sections):
        if needle in section.lower():
            found.setdefault(section, None)

    return list(found)[:limit]
