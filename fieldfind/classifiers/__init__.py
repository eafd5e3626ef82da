"""Value type classifiers."""

from .rule_based import RuleBasedTypeClassifier

__all__ = ["RuleBasedTypeClassifier"]
