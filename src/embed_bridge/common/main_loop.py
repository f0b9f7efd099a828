"""
Main-loop timers for Embed Bridge.

Every callback the bridge schedules runs on one logical thread: the
event loop that owns the media elements. Timer callbacks follow the
GLib convention - return True to keep a timeout armed, False to drop it.
"""

import asyncio
from typing import Any, Callable, Dict, Optional

from .logger import setup_logger

logger = setup_logger(__name__)


class MainLoop:
    """
    Timer registry on top of a single-threaded scheduler.

    Subclasses provide _call_later() and _cancel(); everything else
    (ids, repeating timeouts, one-shot callbacks) lives here.
    """

    def __init__(self):
        """Initialize an empty timer registry."""
        self._timers: Dict[int, Any] = {}
        self._next_id = 1

    def _call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Schedule callback after delay seconds and return a cancellable handle."""
        raise NotImplementedError

    def _cancel(self, handle: Any) -> None:
        """Cancel a handle returned by _call_later()."""
        handle.cancel()

    def add_timeout(self, interval_ms: int, callback: Callable[[], bool]) -> int:
        """
        Add a periodic timeout callback.

        Args:
            interval_ms: Interval in milliseconds
            callback: Function to call. Return True to continue, False to stop.

        Returns:
            Timer ID for removal
        """
        timer_id = self._next_id
        self._next_id += 1

        def fire() -> None:
            if timer_id not in self._timers:
                return
            keep = False
            try:
                keep = callback()
            finally:
                # callback may have removed its own timer; a raising callback drops it
                if keep and timer_id in self._timers:
                    self._timers[timer_id] = self._call_later(interval_ms / 1000.0, fire)
                else:
                    self._timers.pop(timer_id, None)

        self._timers[timer_id] = self._call_later(interval_ms / 1000.0, fire)
        logger.debug("Added timeout with ID %d (interval: %dms)", timer_id, interval_ms)
        return timer_id

    def remove_timeout(self, timer_id: int) -> bool:
        """
        Remove a timeout callback.

        Args:
            timer_id: Timer ID returned by add_timeout

        Returns:
            True if timer was removed
        """
        handle = self._timers.pop(timer_id, None)
        if handle is None:
            return False

        self._cancel(handle)
        logger.debug("Removed timeout with ID %d", timer_id)
        return True

    def schedule_callback(self, callback: Callable[[], None], delay_ms: int = 0) -> int:
        """
        Schedule a one-time callback on the main loop.

        Args:
            callback: Function to call
            delay_ms: Delay before the call in milliseconds

        Returns:
            Timer ID (can be passed to remove_timeout before it fires)
        """
        def wrapper() -> bool:
            callback()
            return False  # Don't repeat

        return self.add_timeout(delay_ms, wrapper)

    @property
    def pending_timers(self) -> int:
        """Number of armed timers."""
        return len(self._timers)

    def cancel_all(self) -> None:
        """Remove every armed timer."""
        for timer_id in list(self._timers):
            self.remove_timeout(timer_id)


class AsyncioMainLoop(MainLoop):
    """MainLoop backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            loop: Event loop to schedule on. If None, the running loop is
                  looked up on first use.
        """
        super().__init__()
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """Get the event loop, binding to the running one on first use."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


# Global main loop instance
_global_main_loop: Optional[MainLoop] = None


def get_main_loop() -> MainLoop:
    """
    Get the global main loop instance.

    Returns:
        MainLoop instance (asyncio-backed)
    """
    global _global_main_loop

    if _global_main_loop is None:
        _global_main_loop = AsyncioMainLoop()

    return _global_main_loop
