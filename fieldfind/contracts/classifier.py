"""Abstract interface for value type classification."""

from abc import ABC, abstractmethod
from typing import Any, List


class ITypeClassifier(ABC):
    """
    Infers a semantic type for a record value.

    Types:
    - empty: None / absent
    - boolean, number
    - date, email, phone, text: string flavours
    - array, object: containers
    """

    @abstractmethod
    def classify(self, value: Any) -> str:
        """
        Return the type name for a value.

        Must never raise: unrecognized shapes fall back to 'text' or 'object'.
        """
        pass

    def classify_batch(self, values: List[Any]) -> List[str]:
        """Classify several values."""
        return [self.classify(value) for value in values]
