"""
Renderer options for the YouTube iframe renderer.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from embed_bridge.common.config import Config

# Chromeless controls, no related videos, inline playback
DEFAULT_PROVIDER_VARS: Dict[str, Any] = {
    "controls": 0,
    "rel": 0,
    "disablekb": 1,
    "showinfo": 0,
    "modestbranding": 0,
    "html5": 1,
    "playsinline": 1,
}


@dataclass
class RendererOptions:
    """Options passed to each adapter."""

    prefix: str = "youtube_iframe"
    provider_vars: Dict[str, Any] = field(default_factory=dict)
    origin: str = ""
    poll_interval_ms: int = 250
    volumechange_delay_ms: int = 50

    @property
    def player_vars(self) -> Dict[str, Any]:
        """Provider vars merged over the defaults."""
        merged = dict(DEFAULT_PROVIDER_VARS)
        merged.update(self.provider_vars)
        return merged

    def merged(self, data: Optional[Dict[str, Any]]) -> "RendererOptions":
        """
        Return a copy with the keys of a plain mapping applied on top.

        Unknown keys are ignored; provider_vars are merged key by key.

        Args:
            data: Mapping such as {"prefix": "yt", "provider_vars": {...}}
        """
        data = data or {}
        options = replace(self, provider_vars=dict(self.provider_vars))
        for key in ("prefix", "origin", "poll_interval_ms", "volumechange_delay_ms"):
            if key in data:
                setattr(options, key, data[key])
        options.provider_vars.update(data.get("provider_vars") or {})
        return options

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RendererOptions":
        """Build options from a plain mapping over the built-in defaults."""
        return cls().merged(data)

    @classmethod
    def from_config(cls, config: Config) -> "RendererOptions":
        """
        Build options from configuration.

        Args:
            config: Configuration (renderer.* and provider.* keys)
        """
        defaults = cls()
        return cls(
            prefix=config.prefix,
            provider_vars=dict(config.get('provider.player_vars') or {}),
            origin=config.get('provider.origin', defaults.origin) or "",
            poll_interval_ms=config.get('renderer.poll_interval_ms', defaults.poll_interval_ms),
            volumechange_delay_ms=config.get(
                'renderer.volumechange_delay_ms', defaults.volumechange_delay_ms
            ),
        )
