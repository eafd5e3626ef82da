"""User preferences loader (.toml format)."""

import logging
import toml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)

DEFAULT_PATH = Path(".fieldfind/config.toml")


@dataclass
class IdentityConfig:
    """Who is searching, and on whose behalf."""
    user_id: str = "anonymous"
    scope_id: str = "default"


@dataclass
class SearchPrefs:
    """Search defaults applied when the caller does not set them."""
    default_limit: int = 20
    fuzzy: bool = False
    sort_by: str = "relevance"
    per_page: int = 10


@dataclass
class UIConfig:
    """Result display settings."""
    show_scores: bool = True
    show_context: bool = True
    suggest_min_chars: Optional[int] = None  # overrides search.suggest_min_chars when set


@dataclass
class UserConfig:
    """Complete user configuration."""
    identity: IdentityConfig = field(default_factory=IdentityConfig)
    search: SearchPrefs = field(default_factory=SearchPrefs)
    ui: UIConfig = field(default_factory=UIConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'UserConfig':
        """
        Load user configuration from .toml file.

        Creates default config if it doesn't exist.

        Args:
            config_path: Path to config file. If None, uses .fieldfind/config.toml

        Returns:
            UserConfig instance
        """
        if config_path is None:
            config_path = DEFAULT_PATH

            # Fallback to home directory
            if not config_path.exists():
                home_config = Path.home() / ".fieldfind" / "config.toml"
                if home_config.exists():
                    config_path = home_config

        if not config_path.exists():
            config = cls()
            config.save(config_path)
            return config

        try:
            data = toml.load(config_path)
            return cls(
                identity=IdentityConfig(**data.get('identity', {})),
                search=SearchPrefs(**data.get('search', {})),
                ui=UIConfig(**data.get('ui', {})),
            )
        except (toml.TomlDecodeError, TypeError, OSError) as e:
            # Corrupt or outdated file: run with defaults
            logger.warning("Could not load user config %s (%s), using defaults", config_path, e)
            return cls()

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_PATH

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'identity': vars(self.identity),
            'search': vars(self.search),
            'ui': vars(self.ui),
        }

        # toml has no null: unset optional preferences are left out
        data['ui'] = {key: value for key, value in data['ui'].items() if value is not None}

        with open(config_path, 'w') as f:
            toml.dump(data, f)

    def engine_overrides(self) -> Dict[str, Any]:
        """Engine config (YAML shape) that these preferences override."""
        search = {}
        if self.ui.suggest_min_chars is not None:
            search['suggest_min_chars'] = self.ui.suggest_min_chars
        return {'search': search} if search else {}
