"""
Provider state translation for the YouTube renderer.
Maps provider state codes onto canonical events and shadow flags.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

from .events import CanonicalEvent


class ProviderState(IntEnum):
    """YT.PlayerState codes reported through onStateChange."""
    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


class PollerAction(Enum):
    """What entering a state does to the progress poller."""
    NONE = "none"
    START = "start"
    STOP = "stop"


@dataclass(frozen=True)
class Translation:
    """Outcome of entering a provider state."""

    events: Tuple[CanonicalEvent, ...]
    paused: bool
    ended: bool
    poller: PollerAction = PollerAction.NONE


# Provider state -> (events, paused, ended, poller action)
STATE_TABLE: Dict[ProviderState, Translation] = {
    ProviderState.UNSTARTED: Translation(
        (CanonicalEvent.LOADED_METADATA,), paused=True, ended=False
    ),
    ProviderState.ENDED: Translation(
        (CanonicalEvent.ENDED,), paused=False, ended=True, poller=PollerAction.STOP
    ),
    ProviderState.PLAYING: Translation(
        (CanonicalEvent.PLAY, CanonicalEvent.PLAYING), paused=False, ended=False,
        poller=PollerAction.START
    ),
    ProviderState.PAUSED: Translation(
        (CanonicalEvent.PAUSE,), paused=True, ended=False, poller=PollerAction.STOP
    ),
    ProviderState.BUFFERING: Translation(
        (CanonicalEvent.PROGRESS,), paused=False, ended=False
    ),
    ProviderState.CUED: Translation(
        (CanonicalEvent.LOADED_DATA, CanonicalEvent.LOADED_METADATA, CanonicalEvent.CAN_PLAY),
        paused=True, ended=False
    ),
}


def translate(code: Optional[int], paused: bool = True, ended: bool = False) -> Translation:
    """
    Translate a provider state code.

    Args:
        code: Provider state code
        paused: Current paused flag, returned unchanged for unknown codes
        ended: Current ended flag, returned unchanged for unknown codes

    Returns:
        Translation with the events to emit and the new shadow flags
    """
    try:
        return STATE_TABLE[ProviderState(code)]
    except (ValueError, TypeError):
        return Translation((), paused=paused, ended=ended)
