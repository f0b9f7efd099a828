"""
Canonical lifecycle events dispatched on media elements.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class CanonicalEvent(Enum):
    """Provider-independent event vocabulary."""
    RENDERER_READY = "rendererready"
    LOADED_DATA = "loadeddata"
    LOADED_METADATA = "loadedmetadata"
    CAN_PLAY = "canplay"
    PLAY = "play"
    PLAYING = "playing"
    PAUSE = "pause"
    ENDED = "ended"
    PROGRESS = "progress"
    TIME_UPDATE = "timeupdate"
    VOLUME_CHANGE = "volumechange"
    # Pointer passthrough from the provider's rendering surface
    MOUSE_OVER = "mouseover"
    MOUSE_OUT = "mouseout"


@dataclass(frozen=True)
class MediaEvent:
    """An event as seen by listeners: a type tag and the source adapter."""

    type: str
    target: Any

    def __repr__(self) -> str:
        """String representation."""
        target_id = getattr(self.target, "id", self.target)
        return f"MediaEvent(type={self.type}, target={target_id})"


def create_event(event: Union[CanonicalEvent, str], target: Any) -> MediaEvent:
    """
    Create an event carrying only its type and target.

    Args:
        event: Canonical event or raw type name
        target: Object the event originates from

    Returns:
        MediaEvent instance
    """
    event_type = event.value if isinstance(event, CanonicalEvent) else event
    return MediaEvent(type=event_type, target=target)
