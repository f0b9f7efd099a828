"""
Pytest Fixtures for Embed Bridge Tests

Provides a manually advanced main loop, a fake remote player factory,
a document with a media node, and an event recorder.
"""

import heapq
from typing import Any, Callable, List

import pytest

from embed_bridge.common.main_loop import MainLoop
from embed_bridge.renderer.adapter import InstanceAdapter
from embed_bridge.renderer.embed_api import CreationRequest, EmbedApiLoader, ProviderEvent
from embed_bridge.renderer.events import CanonicalEvent
from embed_bridge.renderer.host import Document, Element, MediaElement
from embed_bridge.renderer.media_types import MediaFile
from embed_bridge.renderer.options import RendererOptions


class _ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualMainLoop(MainLoop):
    """MainLoop driven by a virtual clock; advance() runs due callbacks."""

    def __init__(self):
        super().__init__()
        self.now = 0.0
        self._queue: List[Any] = []
        self._seq = 0

    def _call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        self._seq += 1
        heapq.heappush(self._queue, (self.now + delay, self._seq, callback, handle))
        return handle

    def advance(self, ms: int) -> None:
        target = self.now + ms / 1000.0
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, callback, handle = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                callback()
        self.now = target


class FakeRemotePlayer:
    """Stands in for a YT.Player; records every mutating call."""

    def __init__(self, request: CreationRequest):
        self.request = request
        self.calls: List[tuple] = []
        self.iframe = Element("iframe", f"{request.container_id}_iframe")
        self.current_time = 12.5
        self.duration = 200.0
        self.volume = 100
        self.muted = False
        self.loaded_fraction = 0.25
        self.video_url = f"https://www.youtube.com/watch?v={request.content_id}"

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)

    # queries
    def getCurrentTime(self):
        return self.current_time

    def getDuration(self):
        return self.duration

    def getVolume(self):
        return self.volume

    def isMuted(self):
        return self.muted

    def getVideoLoadedFraction(self):
        return self.loaded_fraction

    def getVideoUrl(self):
        return self.video_url

    def getIframe(self):
        return self.iframe

    # commands
    def seekTo(self, seconds):
        self._record("seekTo", seconds)

    def mute(self):
        self.muted = True
        self._record("mute")

    def unMute(self):
        self.muted = False
        self._record("unMute")

    def setVolume(self, volume):
        self.volume = volume
        self._record("setVolume", volume)

    def loadVideoById(self, video_id):
        self._record("loadVideoById", video_id)

    def cueVideoById(self, video_id):
        self._record("cueVideoById", video_id)

    def playVideo(self):
        self._record("playVideo")

    def pauseVideo(self):
        self._record("pauseVideo")

    def setSize(self, width, height):
        self._record("setSize", width, height)

    def destroy(self):
        self._record("destroy")

    # provider-side signals
    def fire_ready(self) -> None:
        self.request.events.on_ready(ProviderEvent(target=self))

    def fire_state(self, code: int) -> None:
        self.request.events.on_state_change(ProviderEvent(target=self, data=code))


class FakePlayerFactory:
    """Creates FakeRemotePlayers and remembers them in creation order."""

    def __init__(self):
        self.players: List[FakeRemotePlayer] = []

    def __call__(self, request: CreationRequest) -> FakeRemotePlayer:
        player = FakeRemotePlayer(request)
        self.players.append(player)
        return player

    def for_container(self, container_id: str) -> FakeRemotePlayer:
        return next(p for p in self.players if p.request.container_id == container_id)


class EventRecorder:
    """Collects every canonical event dispatched on a media element."""

    def __init__(self, media_element: MediaElement):
        self.events: List[Any] = []
        for event_type in CanonicalEvent:
            media_element.add_event_listener(event_type.value, self.events.append)

    @property
    def types(self) -> List[str]:
        return [event.type for event in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def main_loop():
    """Manually advanced main loop."""
    return ManualMainLoop()


@pytest.fixture
def player_factory():
    """Fake remote player factory."""
    return FakePlayerFactory()


@pytest.fixture
def document():
    """Empty document."""
    return Document()


@pytest.fixture
def loader(document, player_factory):
    """Embed-API loader using the fake player factory."""
    return EmbedApiLoader(document, player_factory=player_factory)


@pytest.fixture
def make_media_element(document):
    """Factory creating a media element whose node sits in the document body."""
    def _make(element_id: str = "player1", autoplay: bool = False) -> MediaElement:
        attributes = {"autoplay": "autoplay"} if autoplay else {}
        node = Element("video", f"{element_id}_html5", attributes, width=640, height=360)
        document.body.append_child(node)
        return MediaElement(element_id, node)
    return _make


@pytest.fixture
def media_element(make_media_element):
    """Media element without autoplay."""
    return make_media_element()


@pytest.fixture
def recorder(media_element):
    """Event recorder attached to media_element."""
    return EventRecorder(media_element)


@pytest.fixture
def options():
    """Default renderer options."""
    return RendererOptions()


@pytest.fixture
def make_adapter(loader, main_loop, options):
    """Factory creating adapters bound to the test loader and main loop."""
    created: List[InstanceAdapter] = []

    def _make(media_element: MediaElement, src: str = "https://youtu.be/abc123") -> InstanceAdapter:
        adapter = InstanceAdapter(media_element, options, [MediaFile(src)], loader, main_loop=main_loop)
        created.append(adapter)
        return adapter

    yield _make

    for adapter in created:
        adapter.destroy()


@pytest.fixture
def adapter(make_adapter, media_element):
    """Adapter for https://youtu.be/abc123 (API not yet ready)."""
    return make_adapter(media_element)
