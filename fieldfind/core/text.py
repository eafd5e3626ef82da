"""Text normalization and display-name helpers."""

import re
from collections.abc import Mapping
from typing import Any, Dict, Optional


SECTION_NAMES: Dict[str, str] = {
    'basicInfo': 'Basic Information',
    'narrative': 'Narrative',
    'governance': 'Governance',
    'management': 'Management',
    'financials': 'Financials',
    'programs': 'Programs',
    'impact': 'Impact',
    'compliance': 'Compliance',
    'technology': 'Technology',
    'communications': 'Communications',
    'riskManagement': 'Risk Management',
    'documents': 'Documents',
}

# Section names offered as autosuggestions
SUGGESTION_SECTIONS = [
    'Basic Information',
    'Narrative',
    'Governance',
    'Management',
    'Financials',
    'Programs',
    'Impact',
    'Compliance',
]

_UPPERCASE = re.compile(r'([A-Z])')


def extract_text(value: Any) -> str:
    """
    Flatten any value into a lowercase searchable string.

    Strings are lowercased, numbers and booleans stringified, lists joined
    element by element and mappings joined over their values (keys are not
    included). Input must be acyclic.
    """
    if value is None:
        return ''
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (list, tuple)):
        return ' '.join(extract_text(item) for item in value)
    if isinstance(value, Mapping):
        return ' '.join(extract_text(item) for item in value.values())
    return str(value).lower()


def field_display_name(field_id: Any) -> str:
    """
    camelCase to Title Case.

    Example: 'organizationLegalName' -> 'Organization Legal Name'
    """
    name = _UPPERCASE.sub(r' \1', str(field_id))
    if name:
        name = name[0].upper() + name[1:]
    return name.strip()


def section_display_name(section_id: str, names: Optional[Dict[str, str]] = None) -> str:
    """Human-readable section name, falling back to the id itself."""
    table = SECTION_NAMES if names is None else names
    return table.get(section_id, section_id)
