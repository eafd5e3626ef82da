"""Record stores: sources of record trees and document lists."""

from .json_store import JsonRecordStore
from .memory import InMemoryRecordStore

__all__ = ["JsonRecordStore", "InMemoryRecordStore"]
