"""YAML configuration for engine components and search settings."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


# Searched in order when no path is given
DEFAULT_CONFIG_PATHS: List[Path] = [
    Path("config/default.yaml"),
    Path(__file__).resolve().parent.parent.parent / "config" / "default.yaml",
]


class ConfigLoader:
    """Reads, merges and writes the engine's YAML configuration."""

    @staticmethod
    def find_default() -> Path:
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                return candidate
        raise FileNotFoundError("Could not find default configuration file")

    @staticmethod
    def load(config_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Load a configuration file.

        Args:
            config_path: YAML file. If None, the first existing default is used
                (working directory, then the copy next to the package)

        Returns:
            Configuration dictionary (empty for an empty file)

        Raises:
            FileNotFoundError: No such file
            ValueError: The file is not a YAML mapping
        """
        path = Path(config_path) if config_path is not None else ConfigLoader.find_default()
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid configuration in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration in {path} must be a mapping")
        return data

    @staticmethod
    def merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge `override` into a copy of `base`."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigLoader.merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def save(config: Dict[str, Any], config_path: Path) -> None:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config, f, default_flow_style=False, indent=2, sort_keys=False)
