"""Flattens record trees and document lists into index entries."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional

from .checksums import compute_index_fingerprint
from .text import extract_text
from ..contracts.classifier import ITypeClassifier
from ..contracts.record_store import IRecordStore
from ..classifiers.rule_based import RuleBasedTypeClassifier
from ..models.entry import DocumentDescriptor, IndexEntry, parse_timestamp


logger = logging.getLogger(__name__)

DOCUMENTS_SECTION = 'documents'


def _as_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    return (str(value),)


class Indexer:
    """
    Builds and holds the flat index.

    The entry list is only ever replaced, never mutated: `refresh` builds a
    complete new list and swaps it in, so readers always see either the old
    or the new index.
    """

    def __init__(self, classifier: Optional[ITypeClassifier] = None):
        self.classifier = classifier or RuleBasedTypeClassifier()
        self._entries: List[IndexEntry] = []
        self._fingerprint = compute_index_fingerprint([])
        self.built = False

    @property
    def entries(self) -> List[IndexEntry]:
        return self._entries

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def build_index(
        self,
        record_tree: Mapping,
        documents: Optional[List[Dict[str, Any]]] = None,
        field_metadata: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> List[IndexEntry]:
        """
        Walk the record tree and document list.

        Pure: returns a new entry list and does not touch the held index.

        Args:
            record_tree: Nested key/value structure (sections -> fields)
            documents: Document descriptors (dicts with 'fileName', ...)
            field_metadata: Optional metadata keyed by dotted field path

        Returns:
            One IndexEntry per leaf value plus one per document
        """
        field_metadata = field_metadata or {}

        entries = list(self._walk(record_tree, '', '', field_metadata))
        for position, document in enumerate(documents or []):
            entries.append(self._document_entry(position, document))

        return entries

    def refresh(self, store: IRecordStore) -> bool:
        """
        Rebuild the held index from a record store.

        Store failures are logged and leave the previous index in place.

        Returns:
            True if a new index was swapped in
        """
        try:
            record_tree = store.get_record_tree() or {}
            documents = store.get_document_list() or []
            field_metadata = store.get_field_metadata() or {}
            entries = self.build_index(record_tree, documents, field_metadata)
        except Exception:
            logger.exception(
                "Failed to build search index, keeping previous index (%d entries)",
                len(self._entries),
            )
            return False

        fingerprint = compute_index_fingerprint(entries)
        if self.built and fingerprint == self._fingerprint:
            logger.debug("Index unchanged (%d entries)", len(entries))

        self._entries = entries
        self._fingerprint = fingerprint
        self.built = True

        logger.info(
            "Indexed %d entries (%d documents)",
            len(entries),
            sum(1 for entry in entries if entry.is_document),
        )
        return True

    def _walk(
        self,
        data: Mapping,
        section_id: str,
        path: str,
        field_metadata: Dict[str, Dict[str, Any]],
    ) -> Iterator[IndexEntry]:
        for key, value in data.items():
            key = str(key)
            field_path = f"{path}.{key}" if path else key

            if isinstance(value, Mapping):
                yield from self._walk(value, section_id or key, field_path, field_metadata)
                continue

            metadata = field_metadata.get(field_path) or {}
            yield IndexEntry(
                id=f"field_{field_path}",
                section_id=section_id or key,
                field_id=key,
                field_path=field_path,
                value=value,
                type=self.classifier.classify(value),
                text=extract_text(value),
                last_modified=parse_timestamp(metadata.get('lastModified')),
                modified_by=metadata.get('modifiedBy'),
                tags=_as_tuple(metadata.get('tags')),
                attachments=_as_tuple(metadata.get('attachments')),
            )

    def _document_entry(self, position: int, document: Dict[str, Any]) -> IndexEntry:
        descriptor = DocumentDescriptor.from_dict(document)
        field_id = descriptor.id or str(position)

        text = ' '.join([
            descriptor.file_name,
            descriptor.description or '',
            ' '.join(descriptor.tags),
        ]).lower()

        return IndexEntry(
            id=f"doc_{position}",
            section_id=DOCUMENTS_SECTION,
            field_id=field_id,
            field_path=f"{DOCUMENTS_SECTION}.{field_id}",
            value=document,
            type='document',
            text=text,
            last_modified=descriptor.uploaded_at,
            modified_by=descriptor.uploaded_by,
            tags=descriptor.tags,
            attachments=(descriptor.file_name,) if descriptor.file_name else (),
        )
