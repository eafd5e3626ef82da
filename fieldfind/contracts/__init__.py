"""Abstract contracts for pluggable components."""

from .classifier import ITypeClassifier
from .matcher import IMatcher
from .record_store import IRecordStore
from .filter_store import IFilterStore

__all__ = [
    "ITypeClassifier",
    "IMatcher",
    "IRecordStore",
    "IFilterStore",
]
