"""
Rebuild coalescing for the floor-plan geometry engine.

Interactive editing fires rebuild requests far faster than a rebuild is
worth running. RebuildScheduler runs at most one rebuild per cooldown
window: a request arriving within `cooldown` seconds of the previous
rebuild's completion is stored as the single pending request (a newer
request replaces it), and poll() runs it once the window has passed.

The scheduler is synchronous. The host calls poll() from its own loop or
timer; nothing runs in the background.
"""

from typing import Any, Callable, Optional
import logging
import time

from ..config import REBUILD_COOLDOWN

logger = logging.getLogger(__name__)

_NOTHING = object()


class RebuildScheduler:
    """
    Coalesce bursts of rebuild requests into single rebuilds.

    Args:
        rebuild: Callable run with the request payload
        cooldown: Minimum time between a rebuild's completion and the
            start of the next one (seconds)
        clock: Monotonic time source, replaceable for tests
    """

    def __init__(
        self,
        rebuild: Callable[[Any], Any],
        cooldown: float = REBUILD_COOLDOWN,
        clock: Callable[[], float] = time.monotonic
    ):
        if cooldown < 0:
            raise ValueError("cooldown must be non-negative")

        self.rebuild = rebuild
        self.cooldown = cooldown
        self.clock = clock

        self.last_completed: Optional[float] = None
        self.last_result: Any = None
        self.executions = 0
        self.coalesced = 0
        self._pending: Any = _NOTHING

    @property
    def pending(self) -> bool:
        """A request is waiting for the cooldown to pass."""
        return self._pending is not _NOTHING

    def ready(self) -> bool:
        """The cooldown since the last completed rebuild has elapsed."""
        if self.last_completed is None:
            return True
        return self.clock() - self.last_completed >= self.cooldown

    def request(self, payload: Any = None) -> bool:
        """
        Ask for a rebuild with the given input.

        Runs immediately when the cooldown has elapsed and nothing is
        pending; otherwise stores the payload as the pending request.

        Returns:
            True if the rebuild ran now
        """
        if self.ready() and not self.pending:
            self._run(payload)
            return True

        if self.pending:
            self.coalesced += 1
            logger.debug("Rebuild request superseded a pending one")
        self._pending = payload
        return False

    def poll(self) -> bool:
        """
        Run the pending rebuild if the cooldown has elapsed.

        Returns:
            True if a rebuild ran
        """
        if not self.pending or not self.ready():
            return False
        self.flush()
        return True

    def flush(self) -> bool:
        """
        Run the pending rebuild now, ignoring the cooldown.

        Returns:
            True if there was a pending rebuild
        """
        if not self.pending:
            return False
        payload = self._pending
        self._pending = _NOTHING
        self._run(payload)
        return True

    def cancel(self) -> bool:
        """
        Drop the pending request.

        Returns:
            True if a request was dropped
        """
        if not self.pending:
            return False
        self._pending = _NOTHING
        logger.debug("Pending rebuild cancelled")
        return True

    def _run(self, payload: Any) -> None:
        try:
            self.last_result = self.rebuild(payload)
        finally:
            self.last_completed = self.clock()
            self.executions += 1
        logger.debug(f"Rebuild #{self.executions} finished")
