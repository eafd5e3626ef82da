"""Builds engine collaborators from dotted class paths in the YAML config."""

import importlib
import inspect
from typing import Any, Dict, Optional, Type

from ..contracts.classifier import ITypeClassifier
from ..contracts.filter_store import IFilterStore
from ..contracts.matcher import IMatcher
from ..contracts.record_store import IRecordStore


# Contract each configured component must satisfy
COMPONENT_CONTRACTS: Dict[str, Type] = {
    'record_store': IRecordStore,
    'filter_store': IFilterStore,
    'classifier': ITypeClassifier,
    'exact_matcher': IMatcher,
    'fuzzy_matcher': IMatcher,
}


def _construct(cls: Type, config: Dict[str, Any]) -> Any:
    """Call `cls` with a `config` dict, as keyword arguments, or bare."""
    params = [name for name in inspect.signature(cls.__init__).parameters if name != 'self']

    if 'config' in params:
        return cls(config=config)
    if params:
        return cls(**config)
    return cls()


class ComponentRegistry:
    """
    Resolves and instantiates components named in configuration.

    A component entry looks like:

        record_store:
          class: fieldfind.importers.json_store.JsonRecordStore
          config: {path: data/application.json}

    Instances are cached per component name, so one registry hands out one
    record store, one filter store and so on.
    """

    def __init__(self):
        self._classes: Dict[str, Type] = {}
        self._instances: Dict[str, Any] = {}

    def register_class(self, alias: str, cls: Type) -> None:
        """Make `cls` loadable under `alias` without an import."""
        self._classes[alias] = cls

    def load_class(self, class_path: str) -> Type:
        """
        Resolve 'package.module.ClassName' (or a registered alias).

        Raises:
            ImportError: If the module or attribute cannot be found
        """
        cls = self._classes.get(class_path)
        if cls is not None:
            return cls

        module_path, _, class_name = class_path.rpartition('.')
        if not module_path:
            raise ImportError(f"Cannot load class '{class_path}': not a dotted path")

        try:
            cls = getattr(importlib.import_module(module_path), class_name)
        except (ImportError, AttributeError) as e:
            raise ImportError(f"Cannot load class '{class_path}': {e}") from e

        self._classes[class_path] = cls
        return cls

    def create_instance(
        self,
        name: str,
        class_path: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Instantiate `class_path` once under `name` and reuse it afterwards."""
        if name not in self._instances:
            self._instances[name] = _construct(self.load_class(class_path), config or {})
        return self._instances[name]

    def create_component(self, name: str, components: Dict[str, Any]) -> Optional[Any]:
        """
        Build the collaborator configured under `components[name]`.

        Returns None when the component is not configured, so the engine
        falls back to its built-in default.

        Raises:
            ImportError: Unknown class path
            TypeError: The class does not implement the component's contract
        """
        entry = components.get(name)
        if not entry:
            return None

        instance = self.create_instance(name, entry['class'], entry.get('config'))

        contract = COMPONENT_CONTRACTS.get(name)
        if contract is not None and not isinstance(instance, contract):
            raise TypeError(
                f"Component '{name}' ({entry['class']}) does not implement {contract.__name__}"
            )
        return instance
