"""
Instance Adapter - makes one remote YouTube player look like a media element.

Calls made before the remote player is ready are queued and replayed in
submission order once it reports ready. Provider state changes are
translated into canonical events dispatched on the media element.
"""

import asyncio
import concurrent.futures
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, NamedTuple, Optional, Sequence, Set, Union

from embed_bridge.common.logger import setup_logger
from embed_bridge.common.main_loop import MainLoop, get_main_loop

from .embed_api import CreationRequest, EmbedApiLoader, PlayerCallbacks, ProviderEvent
from .events import CanonicalEvent, create_event
from .host import Element, MediaElement
from .identifier import extract_id
from .media_types import MediaFile, TimeRanges
from .options import RendererOptions
from .poller import ProgressPoller
from .state_translator import PollerAction, translate

logger = setup_logger(__name__)

# Sent once the remote player is ready, in this order
INIT_EVENTS = (
    CanonicalEvent.RENDERER_READY,
    CanonicalEvent.LOADED_DATA,
    CanonicalEvent.LOADED_METADATA,
    CanonicalEvent.CAN_PLAY,
)

# Pointer events re-dispatched from the provider's rendering surface
SURFACE_EVENTS = (CanonicalEvent.MOUSE_OVER, CanonicalEvent.MOUSE_OUT)


class BridgeResult(Enum):
    """Outcome of a bridged set or method call."""
    APPLIED = "applied"                  # Delegated to the remote player
    QUEUED = "queued"                    # Stored until the remote player is ready
    NOT_APPLICABLE = "not_applicable"    # Unknown or read-only name, released adapter


class CallKind(Enum):
    """Kinds of deferred calls."""
    SET = "set"
    INVOKE = "invoke"


@dataclass(frozen=True)
class PendingCall:
    """A call made before the remote player was ready."""

    kind: CallKind
    name: str
    value: Any = None


# ---------------------------------------------------------------------------
# Property and method bridge
# ---------------------------------------------------------------------------

def _source_url(value: Union[str, Sequence[Any]]) -> str:
    """Get the URL from a src value: a string or a list of media files."""
    if isinstance(value, str):
        return value

    first = value[0]
    if isinstance(first, dict):
        return first['src']
    return first.src


def _set_src(adapter: "InstanceAdapter", player: Any, value: Any) -> None:
    video_id = extract_id(_source_url(value)) or ""

    if adapter.media_element.autoplay:
        player.loadVideoById(video_id)
    else:
        player.cueVideoById(video_id)


def _set_current_time(adapter: "InstanceAdapter", player: Any, value: float) -> None:
    player.seekTo(value)


def _set_muted(adapter: "InstanceAdapter", player: Any, value: bool) -> None:
    if value:
        player.mute()
    else:
        player.unMute()
    adapter._schedule_volumechange()


def _set_volume(adapter: "InstanceAdapter", player: Any, value: float) -> None:
    player.setVolume(value)
    adapter._schedule_volumechange()


def _get_buffered(adapter: "InstanceAdapter", player: Any) -> TimeRanges:
    loaded_fraction = player.getVideoLoadedFraction()
    duration = player.getDuration()
    return TimeRanges.single(0, loaded_fraction * duration)


class PropertyAccessors(NamedTuple):
    """Getter and optional setter for one bridged property."""

    get: Callable[["InstanceAdapter", Any], Any]
    set: Optional[Callable[["InstanceAdapter", Any, Any], None]] = None


PROPERTIES: Dict[str, PropertyAccessors] = {
    'current_time': PropertyAccessors(lambda a, p: p.getCurrentTime(), _set_current_time),
    'duration': PropertyAccessors(lambda a, p: p.getDuration()),
    'volume': PropertyAccessors(lambda a, p: p.getVolume(), _set_volume),
    'paused': PropertyAccessors(lambda a, p: a._paused),
    'ended': PropertyAccessors(lambda a, p: a._ended),
    'muted': PropertyAccessors(lambda a, p: p.isMuted(), _set_muted),
    'buffered': PropertyAccessors(_get_buffered),
    'src': PropertyAccessors(lambda a, p: p.getVideoUrl(), _set_src),
}

# Answered from local state even before the remote player exists
SHADOW_PROPERTIES = ('paused', 'ended')

# load is a no-op: the provider loads as a side effect of src
METHODS: Dict[str, Optional[Callable[[Any], Any]]] = {
    'play': lambda p: p.playVideo(),
    'pause': lambda p: p.pauseVideo(),
    'load': None,
}


class InstanceAdapter:
    """
    Bridge between one media element and one remote YouTube player.

    The remote player handle is bound exactly once, when the provider
    reports the player ready, and is owned exclusively by this adapter.
    """

    def __init__(
        self,
        media_element: MediaElement,
        options: RendererOptions,
        media_files: Sequence[MediaFile],
        loader: EmbedApiLoader,
        main_loop: Optional[MainLoop] = None
    ):
        """
        Create the container, build the bridge and request a remote player.

        Args:
            media_element: Element whose events this adapter dispatches
            options: Renderer options (prefix, provider vars, timings)
            media_files: Candidate sources; the first one is loaded
            loader: Embed-API loader creating the remote player
            main_loop: Loop for timers (defaults to the global main loop)
        """
        self.id = f"{media_element.id}_{options.prefix}"
        self.media_element = media_element
        self.options = options
        self._loader = loader
        self._main_loop = main_loop or get_main_loop()

        self._remote_player: Optional[Any] = None
        self._is_ready = False
        self._destroyed = False
        self._paused = True
        self._ended = False
        self._pending_calls: Deque[PendingCall] = deque()
        self._deferred_timers: Set[int] = set()
        self._surface: Optional[Element] = None
        self._surface_listeners: List[tuple] = []
        self._ready_future: concurrent.futures.Future = concurrent.futures.Future()

        self._poller = ProgressPoller(
            self._main_loop,
            lambda: self._dispatch(CanonicalEvent.TIME_UPDATE),
            interval_ms=options.poll_interval_ms
        )

        # Placeholder container replaces the original media node
        original = media_element.original_node
        self.container = Element("div", self.id)
        original.parent.insert_before(self.container, original)
        original.hide()

        src = media_files[0].src if media_files else None
        content_id = extract_id(src)
        if content_id is None:
            logger.warning("No content id in %r, passing an empty id to the provider", src)
            content_id = ""

        request = CreationRequest(
            container_id=self.container.id,
            content_id=content_id,
            width=original.width,
            height=original.height,
            player_vars=options.player_vars,
            origin=options.origin,
            events=PlayerCallbacks(on_ready=self._on_ready, on_state_change=self._on_state_change)
        )
        loader.enqueue_creation(request)

        logger.info("InstanceAdapter %s created for content %r", self.id, content_id)

    # -- state ---------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        """Check if the remote player is bound."""
        return self._is_ready

    @property
    def remote_player(self) -> Optional[Any]:
        """The bound remote player handle, or None."""
        return self._remote_player

    @property
    def pending_calls(self) -> List[PendingCall]:
        """Snapshot of calls waiting for the remote player."""
        return list(self._pending_calls)

    @property
    def poller(self) -> ProgressPoller:
        return self._poller

    @property
    def ready_future(self) -> concurrent.futures.Future:
        """Future resolved with this adapter when the remote player is ready."""
        return self._ready_future

    async def wait_ready(self) -> "InstanceAdapter":
        """
        Wait until the remote player is ready.

        Raises:
            asyncio.CancelledError: If the adapter is destroyed first
        """
        return await asyncio.wrap_future(self._ready_future)

    # -- property bridge -----------------------------------------------------

    def get(self, name: str) -> Any:
        """
        Read a bridged property.

        Before the remote player is ready only the paused/ended shadow
        flags answer; everything else is None.
        """
        accessors = PROPERTIES.get(name)
        if accessors is None:
            logger.debug("%s: unsupported property %r", self.id, name)
            return None

        if self._remote_player is None:
            if name in SHADOW_PROPERTIES:
                return accessors.get(self, None)
            return None

        return accessors.get(self, self._remote_player)

    def set(self, name: str, value: Any) -> BridgeResult:
        """
        Write a bridged property.

        Returns:
            QUEUED before the remote player is ready, APPLIED once it is,
            NOT_APPLICABLE for read-only or unknown names, or an empty src
        """
        if self._destroyed:
            logger.debug("%s: set %s after destroy, ignoring", self.id, name)
            return BridgeResult.NOT_APPLICABLE

        accessors = PROPERTIES.get(name)
        if accessors is None or accessors.set is None:
            logger.warning("%s: unsupported property %r", self.id, name)
            return BridgeResult.NOT_APPLICABLE

        if name == 'src' and not value:
            logger.warning("%s: empty src %r, ignoring", self.id, value)
            return BridgeResult.NOT_APPLICABLE

        if self._remote_player is None:
            self._pending_calls.append(PendingCall(CallKind.SET, name, value))
            logger.debug("%s: queued set %s=%r", self.id, name, value)
            return BridgeResult.QUEUED

        logger.debug("%s: set %s=%r", self.id, name, value)
        accessors.set(self, self._remote_player, value)
        return BridgeResult.APPLIED

    # -- method bridge -------------------------------------------------------

    def invoke(self, name: str) -> BridgeResult:
        """
        Call a bridged method (play, pause, load).

        Returns:
            QUEUED before the remote player is ready, APPLIED once it is,
            NOT_APPLICABLE for unknown names
        """
        if self._destroyed:
            logger.debug("%s: %s() after destroy, ignoring", self.id, name)
            return BridgeResult.NOT_APPLICABLE

        if name not in METHODS:
            logger.warning("%s: unsupported method %r", self.id, name)
            return BridgeResult.NOT_APPLICABLE

        if self._remote_player is None:
            self._pending_calls.append(PendingCall(CallKind.INVOKE, name))
            logger.debug("%s: queued %s()", self.id, name)
            return BridgeResult.QUEUED

        logger.debug("%s: %s()", self.id, name)
        method = METHODS[name]
        if method is not None:
            method(self._remote_player)
        return BridgeResult.APPLIED

    def play(self) -> BridgeResult:
        return self.invoke('play')

    def pause(self) -> BridgeResult:
        return self.invoke('pause')

    def load(self) -> BridgeResult:
        return self.invoke('load')

    @property
    def current_time(self) -> Optional[float]:
        return self.get('current_time')

    @current_time.setter
    def current_time(self, value: float) -> None:
        self.set('current_time', value)

    @property
    def duration(self) -> Optional[float]:
        return self.get('duration')

    @property
    def volume(self) -> Optional[float]:
        return self.get('volume')

    @volume.setter
    def volume(self, value: float) -> None:
        self.set('volume', value)

    @property
    def muted(self) -> Optional[bool]:
        return self.get('muted')

    @muted.setter
    def muted(self, value: bool) -> None:
        self.set('muted', value)

    @property
    def paused(self) -> bool:
        return self.get('paused')

    @property
    def ended(self) -> bool:
        return self.get('ended')

    @property
    def buffered(self) -> Optional[TimeRanges]:
        return self.get('buffered')

    @property
    def src(self) -> Optional[str]:
        return self.get('src')

    @src.setter
    def src(self, value: Any) -> None:
        self.set('src', value)

    # -- provider callbacks --------------------------------------------------

    def _on_ready(self, event: ProviderEvent) -> None:
        """Bind the remote player, replay queued calls and announce readiness."""
        if self._destroyed:
            logger.debug("%s: ready after destroy, ignoring", self.id)
            return
        if self._is_ready:
            logger.warning("%s: ready signalled twice, ignoring", self.id)
            return

        self._remote_player = event.target
        self._is_ready = True
        logger.info("%s: remote player ready, replaying %d call(s)", self.id, len(self._pending_calls))

        self._replay_pending()
        self._attach_surface_listeners()

        for event_type in INIT_EVENTS:
            self._dispatch(event_type)

        if not self._ready_future.done():
            self._ready_future.set_result(self)

    def _replay_pending(self) -> None:
        """Replay queued calls against the bound player in submission order."""
        while self._pending_calls:
            call = self._pending_calls.popleft()
            try:
                if call.kind is CallKind.SET:
                    self.set(call.name, call.value)
                else:
                    self.invoke(call.name)
            except Exception as e:
                logger.error("%s: error replaying %s %s: %s", self.id, call.kind.value, call.name, e)

    def _attach_surface_listeners(self) -> None:
        """Re-dispatch pointer hover events from the provider's surface."""
        surface = self._remote_player.getIframe()
        if surface is None:
            return

        self._surface = surface
        for event_type in SURFACE_EVENTS:
            listener = self._make_surface_listener(event_type)
            surface.add_event_listener(event_type.value, listener)
            self._surface_listeners.append((event_type.value, listener))

    def _make_surface_listener(self, event_type: CanonicalEvent) -> Callable[[Any], None]:
        def listener(_event: Any) -> None:
            self._dispatch(event_type)
        return listener

    def _on_state_change(self, event: ProviderEvent) -> None:
        """Translate a provider state code into canonical events."""
        if self._destroyed:
            return

        translation = translate(event.data, self._paused, self._ended)
        self._paused = translation.paused
        self._ended = translation.ended

        if translation.poller is PollerAction.START:
            self._poller.start()
        elif translation.poller is PollerAction.STOP:
            self._poller.stop()

        logger.debug(
            "%s: provider state %s -> %s",
            self.id,
            event.data,
            [e.value for e in translation.events]
        )
        for event_type in translation.events:
            self._dispatch(event_type)

    def on_event(self, event_name: str, player: Any = None, state: Optional[Dict[str, bool]] = None) -> None:
        """
        Accept an externally supplied shadow state.

        Args:
            event_name: Name of the event that produced the state
            player: Remote player the event came from
            state: Mapping with optional 'paused' / 'ended' flags
        """
        logger.debug("%s: provider event %s", self.id, event_name)
        if state is not None:
            self._paused = state.get('paused', self._paused)
            self._ended = state.get('ended', self._ended)

    # -- dispatch ------------------------------------------------------------

    def _dispatch(self, event_type: CanonicalEvent) -> None:
        self.media_element.dispatch_event(create_event(event_type, self))

    def _schedule_volumechange(self) -> None:
        """Send volumechange after a short delay so the provider can settle."""
        timer_id = None

        def fire() -> None:
            self._deferred_timers.discard(timer_id)
            self._dispatch(CanonicalEvent.VOLUME_CHANGE)

        timer_id = self._main_loop.schedule_callback(fire, self.options.volumechange_delay_ms)
        self._deferred_timers.add(timer_id)

    # -- presentation and teardown -------------------------------------------

    def set_size(self, width: int, height: int) -> BridgeResult:
        """Resize the remote player."""
        if self._remote_player is None:
            logger.debug("%s: set_size before ready, ignoring", self.id)
            return BridgeResult.NOT_APPLICABLE

        self._remote_player.setSize(width, height)
        return BridgeResult.APPLIED

    def hide(self) -> None:
        """Stop polling, pause playback and hide the rendering surface."""
        self._poller.stop()
        self.pause()
        if self._surface is not None:
            self._surface.hide()

    def show(self) -> None:
        """Show the rendering surface again."""
        if self._surface is not None:
            self._surface.show()

    def destroy(self) -> None:
        """
        Release the remote player and stop every timer.

        Safe to call more than once. Calls after destroy are NOT_APPLICABLE.
        """
        if self._destroyed:
            return

        self._destroyed = True
        self._poller.stop()

        for timer_id in list(self._deferred_timers):
            self._main_loop.remove_timeout(timer_id)
        self._deferred_timers.clear()

        self._ready_future.cancel()
        self._pending_calls.clear()

        if self._surface is not None:
            for event_type, listener in self._surface_listeners:
                self._surface.remove_event_listener(event_type, listener)
            self._surface_listeners = []
            self._surface = None

        if self._remote_player is not None:
            self._remote_player.destroy()
            self._remote_player = None

        logger.info("InstanceAdapter %s destroyed", self.id)

    def __repr__(self) -> str:
        """String representation."""
        return f"InstanceAdapter(id={self.id!r}, ready={self._is_ready})"
