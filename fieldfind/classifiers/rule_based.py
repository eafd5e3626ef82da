"""Rule-based value type classifier."""

import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..contracts.classifier import ITypeClassifier


DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}'
EMAIL_PATTERN = r'^[\w.+-]+@[\w.-]+\.[a-zA-Z]{2,}$'
PHONE_PATTERN = r'^\+?\d[\d\s\-().]+$'


def _string_matching(pattern: str) -> Callable[[Any], bool]:
    compiled = re.compile(pattern)
    return lambda value: isinstance(value, str) and compiled.search(value) is not None


class RuleBasedTypeClassifier(ITypeClassifier):
    """
    Ordered predicate table, first match wins.

    - None = empty
    - bool before number (bool is an int subclass)
    - date prefix, then email, then phone, then any other string = text
    - list/tuple = array, mapping = object
    - anything else = text
    """

    RULES: List[Tuple[Callable[[Any], bool], str]] = [
        (lambda value: value is None, 'empty'),
        (lambda value: isinstance(value, bool), 'boolean'),
        (lambda value: isinstance(value, (int, float)), 'number'),
        (_string_matching(DATE_PATTERN), 'date'),
        (_string_matching(EMAIL_PATTERN), 'email'),
        (_string_matching(PHONE_PATTERN), 'phone'),
        (lambda value: isinstance(value, str), 'text'),
        (lambda value: isinstance(value, (list, tuple)), 'array'),
        (lambda value: isinstance(value, Mapping), 'object'),
    ]

    FALLBACK_TYPE = 'text'

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.rules = list(self.RULES)

        # Extra string rules from config go ahead of the built-in string rules
        extra = self.config.get('extra_patterns') or {}
        if extra:
            custom = [(_string_matching(pattern), type_name) for type_name, pattern in extra.items()]
            # After empty/boolean/number
            self.rules[3:3] = custom

    def classify(self, value: Any) -> str:
        for predicate, type_name in self.rules:
            if predicate(value):
                return type_name
        return self.FALLBACK_TYPE

    def types(self) -> List[str]:
        """Distinct type names this classifier can produce, in rule order."""
        seen = []
        for _, type_name in self.rules:
            if type_name not in seen:
                seen.append(type_name)
        return seen
