"""Checksum utilities for index change detection."""

import hashlib
from typing import Iterable

from ..models.entry import IndexEntry


def compute_content_hash(content: str) -> str:
    """
    Compute SHA256 hash of content.

    Args:
        content: Text content to hash

    Returns:
        Hex string of SHA256 hash
    """
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def compute_index_fingerprint(entries: Iterable[IndexEntry]) -> str:
    """
    Order-independent fingerprint of an index.

    Two indexes built from the same record tree and document list have the
    same fingerprint regardless of insertion order.
    """
    sha256 = hashlib.sha256()

    for entry_id, entry_type, text in sorted((e.id, e.type, e.text) for e in entries):
        sha256.update(compute_content_hash(f"{entry_id}\x1f{entry_type}\x1f{text}").encode('ascii'))

    return sha256.hexdigest()
