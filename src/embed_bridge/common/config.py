"""
Configuration management for Embed Bridge.
Loads settings from YAML files and exposes renderer options.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

# Shipped alongside this module
DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"


class Config:
    """Manages application configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, uses default_config.yaml
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = yaml.safe_load(f) or {}

        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values from environment variables."""
        if 'EMBED_BRIDGE_PREFIX' in os.environ:
            self.set('renderer.prefix', os.environ['EMBED_BRIDGE_PREFIX'])

        if 'EMBED_BRIDGE_API_URL' in os.environ:
            self.set('provider.api_url', os.environ['EMBED_BRIDGE_API_URL'])

        if 'EMBED_BRIDGE_EVENTS_PORT' in os.environ:
            self.set('events.port', int(os.environ['EMBED_BRIDGE_EVENTS_PORT']))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'renderer.prefix')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config = Config()
            >>> config.get('provider.api_url')
            'https://www.youtube.com/player_api'
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'renderer.prefix')
            value: Value to set
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save to. If None, uses original config_path
        """
        save_path = Path(path) if path else self.config_path

        with open(save_path, 'w') as f:
            yaml.dump(self._config, f, default_flow_style=False, indent=2)

    @property
    def prefix(self) -> str:
        """Get the id prefix for generated containers."""
        return self.get('renderer.prefix', 'youtube_iframe')

    @property
    def api_url(self) -> str:
        """Get the provider bootstrap script URL."""
        return self.get('provider.api_url', 'https://www.youtube.com/player_api')

    @property
    def ready_callback(self) -> str:
        """Get the global callback name the provider calls when loaded."""
        return self.get('provider.ready_callback', 'onYouTubePlayerAPIReady')

    def __repr__(self) -> str:
        """String representation."""
        return f"Config(path={self.config_path})"


# Global config instance (can be imported by other modules)
_global_config: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config(config_path)

    return _global_config
