"""
YouTube iframe renderer descriptor.

Uses the provider's <iframe> API through an InstanceAdapter per media
element. Registers a URL type check so YouTube links are recognized.
See https://developers.google.com/youtube/iframe_api_reference
"""

from typing import Any, Dict, Optional, Sequence, Union

from embed_bridge.common.config import get_config
from embed_bridge.common.ipc import get_event_publisher
from embed_bridge.common.logger import setup_logger
from embed_bridge.common.main_loop import MainLoop

from .adapter import InstanceAdapter
from .embed_api import EmbedApiLoader, get_embed_api_loader
from .host import MediaElement
from .media_types import MediaFile, register_type_check
from .options import RendererOptions

logger = setup_logger(__name__)

YOUTUBE_TYPE = "video/youtube"


def detect_type(url: str) -> Optional[str]:
    """
    Recognize YouTube URLs.

    Returns:
        'video/youtube' if the URL points at YouTube, None otherwise
    """
    url = url.lower()
    if 'youtube' in url or 'youtu.be' in url:
        return YOUTUBE_TYPE
    return None


register_type_check(detect_type)


class YouTubeIframeRenderer:
    """Creates InstanceAdapters for media elements playing YouTube content."""

    name = "youtube_iframe"
    options: Dict[str, Any] = {"prefix": "youtube_iframe"}
    MEDIA_TYPES = (YOUTUBE_TYPE, "video/x-youtube")

    @classmethod
    def can_play_type(cls, media_type: Optional[str]) -> bool:
        """Check if a media type can be played with this renderer."""
        return media_type in cls.MEDIA_TYPES

    @classmethod
    def create(
        cls,
        media_element: MediaElement,
        options: Union[RendererOptions, Dict[str, Any], None],
        media_files: Sequence[MediaFile],
        loader: Optional[EmbedApiLoader] = None,
        main_loop: Optional[MainLoop] = None
    ) -> InstanceAdapter:
        """
        Create the adapter for a media element.

        Args:
            media_element: Element the renderer attaches to
            options: RendererOptions, or a mapping merged over the configured defaults
            media_files: Candidate sources ({src, type})
            loader: Embed-API loader (defaults to the global loader)
            main_loop: Loop for timers (defaults to the global main loop)

        Returns:
            InstanceAdapter bound to the media element
        """
        if not isinstance(options, RendererOptions):
            options = RendererOptions.from_config(get_config()).merged(options)

        if media_element.publisher is None:
            media_element.publisher = get_event_publisher()

        logger.debug("Creating %s renderer for %s", cls.name, media_element.id)

        return InstanceAdapter(
            media_element,
            options,
            media_files,
            loader if loader is not None else get_embed_api_loader(),
            main_loop=main_loop
        )
