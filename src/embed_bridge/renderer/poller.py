"""
Progress Poller - synthesizes timeupdate while playback is active.
The provider does not push time changes, so a main-loop timer ticks
every 250ms while the remote player is playing.
"""

from typing import Callable, Optional

from embed_bridge.common.logger import setup_logger
from embed_bridge.common.main_loop import MainLoop

logger = setup_logger(__name__)


class ProgressPoller:
    """Repeating main-loop timer calling on_tick while armed."""

    DEFAULT_INTERVAL_MS = 250

    def __init__(
        self,
        main_loop: MainLoop,
        on_tick: Callable[[], None],
        interval_ms: int = DEFAULT_INTERVAL_MS
    ):
        """
        Initialize the poller (disarmed).

        Args:
            main_loop: Loop the timer runs on
            on_tick: Called once per tick
            interval_ms: Tick period in milliseconds
        """
        self.interval_ms = interval_ms
        self._main_loop = main_loop
        self._on_tick = on_tick
        self._timer_id: Optional[int] = None

    def _tick(self) -> bool:
        try:
            self._on_tick()
        except Exception as e:
            logger.error("Error in progress tick: %s", e)
        return True

    def start(self) -> None:
        """Arm the timer. No-op when already armed."""
        if self._timer_id is not None:
            logger.debug("Progress poller already running")
            return

        self._timer_id = self._main_loop.add_timeout(self.interval_ms, self._tick)
        logger.debug("Progress poller started (interval: %dms)", self.interval_ms)

    def stop(self) -> None:
        """Disarm the timer. No-op when not armed."""
        if self._timer_id is None:
            return

        self._main_loop.remove_timeout(self._timer_id)
        self._timer_id = None
        logger.debug("Progress poller stopped")

    @property
    def is_running(self) -> bool:
        """Check if the timer is armed."""
        return self._timer_id is not None
