"""Saved filter stores."""

from .memory import InMemoryFilterStore
from .sqlite_filters import SQLiteFilterStore

__all__ = ["InMemoryFilterStore", "SQLiteFilterStore"]
