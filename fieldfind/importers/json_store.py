"""File-backed record store (JSON or YAML export)."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..contracts.record_store import IRecordStore
from ..core.errors import RecordStoreError


logger = logging.getLogger(__name__)


class JsonRecordStore(IRecordStore):
    """
    Reads an application export file.

    Expected structure (JSON or YAML):
    - formData: nested sections -> fields record tree
    - documents: list of document descriptors
    - fieldMetadata: optional {field.path: {lastModified, modifiedBy, tags, attachments}}

    A file without a 'formData' key is treated as the record tree itself
    (minus the 'documents' and 'fieldMetadata' keys).
    """

    SUPPORTED_SUFFIXES = ['.json', '.yaml', '.yml']

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.path = Path(self.config.get('path', 'data/application.json'))
        self.tree_key = self.config.get('tree_key', 'formData')
        self.documents_key = self.config.get('documents_key', 'documents')
        self.metadata_key = self.config.get('metadata_key', 'fieldMetadata')

        self._cache: Optional[Dict[str, Any]] = None
        self._cache_stamp: Optional[Tuple[int, int]] = None

    def supports_file(self, path: Path) -> bool:
        return path.suffix.lower() in self.SUPPORTED_SUFFIXES

    def _read(self) -> Dict[str, Any]:
        """Parse the file, reusing the previous parse while it is unchanged."""
        if not self.path.exists():
            raise RecordStoreError(f"Source not found: {self.path}")

        if not self.supports_file(self.path):
            raise RecordStoreError(f"Unsupported source format: {self.path.suffix}")

        stat = self.path.stat()
        stamp = (stat.st_mtime_ns, stat.st_size)
        if self._cache is not None and stamp == self._cache_stamp:
            return self._cache

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                if self.path.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise RecordStoreError(f"Cannot read {self.path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RecordStoreError(f"Expected a mapping at the top of {self.path}")

        logger.debug("Loaded record source %s", self.path)
        self._cache = data
        self._cache_stamp = stamp
        return data

    def get_record_tree(self) -> Dict[str, Any]:
        data = self._read()

        if self.tree_key in data:
            tree = data[self.tree_key] or {}
        else:
            tree = {
                key: value
                for key, value in data.items()
                if key not in (self.documents_key, self.metadata_key)
            }

        if not isinstance(tree, dict):
            raise RecordStoreError(f"'{self.tree_key}' must be a mapping")
        return tree

    def get_document_list(self) -> List[Dict[str, Any]]:
        documents = self._read().get(self.documents_key) or []
        if not isinstance(documents, list):
            raise RecordStoreError(f"'{self.documents_key}' must be a list")
        return [doc for doc in documents if isinstance(doc, dict)]

    def get_field_metadata(self) -> Dict[str, Dict[str, Any]]:
        metadata = self._read().get(self.metadata_key) or {}
        if not isinstance(metadata, dict):
            raise RecordStoreError(f"'{self.metadata_key}' must be a mapping")
        return metadata
