"""
Renderer package for Embed Bridge.
Contains the embed-API loader, the instance adapter with its property and
method bridge, provider state translation and progress polling.
"""

from .adapter import BridgeResult, InstanceAdapter
from .embed_api import CreationRequest, EmbedApiLoader, get_embed_api_loader
from .events import CanonicalEvent, MediaEvent
from .identifier import extract_id
from .options import RendererOptions
from .renderer import YouTubeIframeRenderer
from .state_translator import ProviderState, translate

__all__ = [
    "BridgeResult",
    "CanonicalEvent",
    "CreationRequest",
    "EmbedApiLoader",
    "InstanceAdapter",
    "MediaEvent",
    "ProviderState",
    "RendererOptions",
    "YouTubeIframeRenderer",
    "extract_id",
    "get_embed_api_loader",
    "translate",
]
