"""Abstract interface for the source of indexable records."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IRecordStore(ABC):
    """
    Supplies the nested record tree and the document list to index.

    Implementations may read files, databases or remote services. The
    indexer consumes the returned structures verbatim and never mutates them.
    """

    @abstractmethod
    def get_record_tree(self) -> Dict[str, Any]:
        """
        Return the nested key/value record tree.

        Raises:
            RecordStoreError: If the source cannot be read
        """
        pass

    @abstractmethod
    def get_document_list(self) -> List[Dict[str, Any]]:
        """
        Return document descriptors.

        Each dict has 'fileName' and optionally 'id', 'description', 'tags',
        'uploadDate' and 'uploadedBy'.
        """
        pass

    def get_field_metadata(self) -> Dict[str, Dict[str, Any]]:
        """
        Optional per-field metadata keyed by dotted field path.

        Recognized keys: 'lastModified', 'modifiedBy', 'tags', 'attachments'.
        """
        return {}
