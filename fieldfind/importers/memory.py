"""In-memory record store."""

import copy
from typing import Any, Dict, List, Optional

from ..contracts.record_store import IRecordStore


class InMemoryRecordStore(IRecordStore):
    """Serves a record tree held in memory. Useful for tests and embedding."""

    def __init__(
        self,
        record_tree: Optional[Dict[str, Any]] = None,
        documents: Optional[List[Dict[str, Any]]] = None,
        field_metadata: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.record_tree = record_tree or {}
        self.documents = documents or []
        self.field_metadata = field_metadata or {}

    def get_record_tree(self) -> Dict[str, Any]:
        return copy.deepcopy(self.record_tree)

    def get_document_list(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self.documents)

    def get_field_metadata(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self.field_metadata)
