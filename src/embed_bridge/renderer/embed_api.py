"""
Embed-API Loader for the YouTube iframe API.

One loader serves every renderer in the process. It injects the
provider's bootstrap script at most once and holds player-creation
requests until the provider calls the global ready callback.

Lifecycle: created on first use, never torn down within a run.
If the bootstrap script never loads, queued requests stay queued;
the provider has no negative-ready signal and no timeout is applied here.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from embed_bridge.common.config import Config, get_config
from embed_bridge.common.logger import setup_logger

from .host import Document
from .script_loader import ScriptFetcher, ScriptLoadError

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ProviderEvent:
    """Event object the provider passes to player callbacks."""

    target: Any
    data: Any = None


@dataclass(frozen=True)
class PlayerCallbacks:
    """Callbacks a remote player invokes (onReady / onStateChange)."""

    on_ready: Callable[[ProviderEvent], None]
    on_state_change: Callable[[ProviderEvent], None]


@dataclass(frozen=True)
class CreationRequest:
    """Everything needed to instantiate one remote player."""

    container_id: str
    content_id: str
    width: Optional[int]
    height: Optional[int]
    player_vars: Dict[str, Any] = field(default_factory=dict)
    origin: str = ""
    events: Optional[PlayerCallbacks] = None

    def to_settings(self) -> Dict[str, Any]:
        """Build the settings mapping in the provider's own spelling."""
        settings: Dict[str, Any] = {
            "videoId": self.content_id,
            "width": self.width,
            "height": self.height,
            "playerVars": dict(self.player_vars),
            "origin": self.origin,
        }
        if self.events is not None:
            settings["events"] = {
                "onReady": self.events.on_ready,
                "onStateChange": self.events.on_state_change,
            }
        return settings


# request -> remote player handle
PlayerFactory = Callable[[CreationRequest], Any]


class EmbedApiLoader:
    """
    Loads the provider API once and queues player creation until it is ready.

    Only the loader mutates its ready flag and queue, and only in response
    to enqueue_creation() and on_global_ready().
    """

    DEFAULT_API_URL = "https://www.youtube.com/player_api"
    DEFAULT_READY_CALLBACK = "onYouTubePlayerAPIReady"

    def __init__(
        self,
        document: Document,
        player_factory: Optional[PlayerFactory] = None,
        api_url: str = DEFAULT_API_URL,
        ready_callback: str = DEFAULT_READY_CALLBACK,
        fetcher: Optional[ScriptFetcher] = None
    ):
        """
        Initialize the loader and register the global ready callback.

        Args:
            document: Document to inject the bootstrap script into
            player_factory: Creates a remote player from a request. If None,
                            the provider's global `YT.Player` is used.
            api_url: Bootstrap script URL
            ready_callback: Global callback name the provider calls once loaded
            fetcher: Optional fetcher downloading the script before injection
        """
        self.api_url = api_url
        self.ready_callback = ready_callback
        self._document = document
        self._player_factory = player_factory
        self._fetcher = fetcher

        self._script_injected = False
        self._api_ready = False
        self._pending_creations: List[CreationRequest] = []

        document.window[ready_callback] = self.on_global_ready

        logger.info("EmbedApiLoader initialized (api_url=%s)", api_url)

    @classmethod
    def from_config(
        cls,
        document: Document,
        config: Config,
        player_factory: Optional[PlayerFactory] = None
    ) -> "EmbedApiLoader":
        """
        Create a loader from configuration.

        Args:
            document: Document to inject the bootstrap script into
            config: Configuration (provider.* and script.* keys)
            player_factory: Optional remote player factory
        """
        fetcher = None
        if config.get('script.fetch', False):
            fetcher = ScriptFetcher(timeout=config.get('script.timeout', ScriptFetcher.DEFAULT_TIMEOUT))

        return cls(
            document,
            player_factory=player_factory,
            api_url=config.api_url,
            ready_callback=config.ready_callback,
            fetcher=fetcher
        )

    @property
    def script_injected(self) -> bool:
        """Check if the bootstrap script has been requested."""
        return self._script_injected

    @property
    def api_ready(self) -> bool:
        """Check if the provider API has signalled readiness."""
        return self._api_ready

    @property
    def pending_count(self) -> int:
        """Number of creation requests waiting for the API."""
        return len(self._pending_creations)

    def enqueue_creation(self, request: CreationRequest) -> Optional[Any]:
        """
        Create a remote player now, or queue the request until the API is ready.

        Args:
            request: Player creation request

        Returns:
            Remote player handle if created immediately, None if queued
        """
        if self._api_ready:
            return self.create_player(request)

        self.load_iframe_api()
        self._pending_creations.append(request)
        logger.debug(
            "Queued player creation for %s (%d pending)",
            request.container_id,
            len(self._pending_creations)
        )
        return None

    def load_iframe_api(self) -> bool:
        """
        Inject the bootstrap script into the document head, once.

        Returns:
            True if the script was injected by this call
        """
        if self._script_injected:
            return False

        # Latch before fetching so a failed fetch is never retried
        self._script_injected = True

        text = None
        if self._fetcher is not None:
            try:
                text = self._fetcher.fetch(self.api_url)
            except ScriptLoadError as e:
                logger.warning(
                    "Bootstrap script unavailable, player creation will wait indefinitely: %s", e
                )
                return False

        self._document.inject_script(self.api_url, text)
        logger.info("Injected provider API script: %s", self.api_url)
        return True

    def on_global_ready(self) -> None:
        """
        Handle the provider's global ready callback.

        Marks the API ready and creates one remote player per queued
        request, in the order they were queued.
        """
        if self._api_ready:
            logger.warning("Provider API ready signalled more than once, ignoring")
            return

        self._api_ready = True
        logger.info("Provider API ready, creating %d queued player(s)", len(self._pending_creations))

        while self._pending_creations:
            self.create_player(self._pending_creations.pop(0))

    def create_player(self, request: CreationRequest) -> Optional[Any]:
        """
        Construct a remote player for a request.

        Args:
            request: Player creation request

        Returns:
            Remote player handle, or None if the provider namespace is missing
        """
        logger.debug("Creating player in %s for %r", request.container_id, request.content_id)

        if self._player_factory is not None:
            return self._player_factory(request)

        provider = self._document.window.get('YT')
        if provider is None:
            logger.error("Provider namespace 'YT' not found, cannot create %s", request.container_id)
            return None

        return provider.Player(request.container_id, request.to_settings())

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"EmbedApiLoader(api_ready={self._api_ready}, "
            f"script_injected={self._script_injected}, pending={len(self._pending_creations)})"
        )


# Global loader instance
_global_loader: Optional[EmbedApiLoader] = None


def get_embed_api_loader(
    document: Optional[Document] = None,
    player_factory: Optional[PlayerFactory] = None
) -> EmbedApiLoader:
    """
    Get the global embed-API loader instance.

    Args:
        document: Document to load into (only used on first call)
        player_factory: Remote player factory (only used on first call)

    Returns:
        EmbedApiLoader instance
    """
    global _global_loader

    if _global_loader is None:
        _global_loader = EmbedApiLoader.from_config(
            document if document is not None else Document(),
            get_config(),
            player_factory=player_factory
        )

    return _global_loader
