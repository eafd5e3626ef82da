"""Index entry and document descriptor models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp from a record store value.

    Accepts datetime objects, ISO-8601 strings (with or without a trailing
    'Z') and epoch milliseconds. Aware values are converted to naive UTC so
    every timestamp in the index compares against every other one.

    Returns None for anything that cannot be read as a timestamp.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith('Z'):
            raw = raw[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class IndexEntry:
    """
    One flattened, searchable unit.

    Built from a leaf field of the record tree or from a document. Entries
    are snapshots: the index replaces them wholesale on refresh.
    """

    id: str  # 'field_<path>' or 'doc_<n>'
    section_id: str
    field_id: str
    field_path: str
    value: Any
    type: str  # classifier output, or 'document'
    text: str  # normalized searchable text

    last_modified: Optional[datetime] = None
    modified_by: Optional[str] = None
    tags: Tuple[str, ...] = ()
    attachments: Tuple[str, ...] = ()

    @property
    def is_document(self) -> bool:
        return self.type == 'document'


@dataclass
class DocumentDescriptor:
    """Document reference supplied by the record store."""

    file_name: str
    id: Optional[str] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()
    uploaded_at: Optional[datetime] = None
    uploaded_by: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentDescriptor':
        """Create from a record store document dict (camelCase keys)."""
        tags = data.get('tags') or ()
        if isinstance(tags, str):
            tags = (tags,)

        doc_id = data.get('id')
        uploaded_by = data.get('uploadedBy')

        return cls(
            file_name=str(data.get('fileName') or ''),
            id=str(doc_id) if doc_id not in (None, '') else None,
            description=data.get('description'),
            tags=tuple(str(tag) for tag in tags),
            uploaded_at=parse_timestamp(
                data.get('uploadDate') or data.get('uploadedAt') or data.get('lastModified')
            ),
            uploaded_by=str(uploaded_by) if uploaded_by else None,
            raw=dict(data),
        )
