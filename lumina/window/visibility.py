"""
Visibility Controller - show/hide state machine for the launcher surface.

States:
    HIDDEN --show()--> VISIBLE
    VISIBLE --lose_focus()--> PENDING_HIDE      (unless focus-hide is suppressed)
    PENDING_HIDE --gain_focus()--> VISIBLE
    PENDING_HIDE --(delay elapsed, still unfocused, not suppressed)--> HIDDEN
    toggle(): HIDDEN -> show sequence, VISIBLE | PENDING_HIDE -> HIDDEN

The hide timer is never cancelled. When it fires it re-reads the live focus
state and the suppression flag; a stale decision is simply not honoured.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Set

from lumina.config import settings

logger = logging.getLogger(__name__)


# ===========================================================================
# Shared suppression flag
# ===========================================================================

class FocusHideSuppression:
    """
    Lock-guarded boolean shared between the controller and whatever keeps
    the surface alive while stealing focus (the settings overlay).
    """

    def __init__(self, suppressed: bool = False) -> None:
        self._lock = threading.Lock()
        self._suppressed = suppressed

    def set(self, suppressed: bool) -> None:
        with self._lock:
            self._suppressed = suppressed

    def get(self) -> bool:
        with self._lock:
            return self._suppressed


# ===========================================================================
# Surface collaborator
# ===========================================================================

@dataclass(frozen=True)
class MonitorInfo:
    x: int
    y: int
    width: int
    height: int


class Surface(Protocol):
    """OS window primitives, provided by the host toolkit."""

    def is_visible(self) -> bool: ...
    def is_focused(self) -> bool: ...
    def show(self) -> None: ...
    def hide(self) -> None: ...
    def focus(self) -> None: ...
    def set_always_on_top(self, on_top: bool) -> None: ...
    def set_position(self, x: int, y: int) -> None: ...
    def set_size(self, width: int, height: int) -> None: ...
    def request_attention(self) -> None: ...
    def current_monitor(self) -> Optional[MonitorInfo]: ...


class VisibilityState(Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    PENDING_HIDE = "pending_hide"


def centered_position(monitor: MonitorInfo, width: int, height: int):
    """Horizontally centred, one third down the monitor."""
    x = int((monitor.width - width) / 2) + monitor.x
    y = int((monitor.height - height) / 3) + monitor.y
    return x, y


# ===========================================================================
# Controller
# ===========================================================================

class VisibilityController:

    def __init__(
        self,
        surface: Surface,
        suppression: FocusHideSuppression,
        hide_delay: Optional[float] = None,
        settle_delay: Optional[float] = None,
    ) -> None:
        self.surface = surface
        self.suppression = suppression
        self.hide_delay = settings.focus_hide_delay if hide_delay is None else hide_delay
        self.settle_delay = settings.focus_settle_delay if settle_delay is None else settle_delay
        self._state = VisibilityState.VISIBLE if surface.is_visible() else VisibilityState.HIDDEN
        self._timers: Set[asyncio.Task] = set()

    @property
    def state(self) -> VisibilityState:
        return self._state

    # ────────────────────────── Transitions ──────────────────────────

    async def show(self) -> None:
        if self._state is VisibilityState.HIDDEN:
            self._position_center()
            await self._show_sequence()
        else:
            await self._focus_existing()

    def hide(self) -> None:
        if self._state is VisibilityState.HIDDEN:
            return
        self.surface.hide()
        self._state = VisibilityState.HIDDEN
        logger.debug("Surface hidden")

    async def toggle(self) -> None:
        if self._state is VisibilityState.HIDDEN:
            self._position_center()
            await self._show_sequence()
        else:
            self.hide()

    def lose_focus(self) -> bool:
        """
        Start the grace timer. Returns True when a hide was scheduled.
        Must be called from the event loop thread.
        """
        if self._state is not VisibilityState.VISIBLE:
            return False
        if self.suppression.get():
            logger.debug("Focus lost while focus-hide is suppressed; staying visible")
            return False

        self._state = VisibilityState.PENDING_HIDE
        task = asyncio.get_running_loop().create_task(self._hide_after_delay())
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)
        return True

    def gain_focus(self) -> None:
        if self._state is VisibilityState.PENDING_HIDE:
            self._state = VisibilityState.VISIBLE

    def resize(self, compact: bool) -> None:
        height = settings.compact_window_height if compact else settings.window_height
        try:
            self.surface.set_size(settings.window_width, height)
        except Exception as e:
            logger.error(f"❌ Error resizing window: {e}")

    # ────────────────────────── Hide timer ──────────────────────────

    def should_hide_now(self) -> bool:
        """Hide iff still pending, still unfocused and not suppressed."""
        if self._state is not VisibilityState.PENDING_HIDE:
            return False
        if self.suppression.get():
            return False
        return not self.surface.is_focused()

    async def _hide_after_delay(self) -> None:
        await asyncio.sleep(self.hide_delay)
        if self.should_hide_now():
            self.hide()
        elif self._state is VisibilityState.PENDING_HIDE:
            self._state = VisibilityState.VISIBLE

    async def wait_timers(self) -> None:
        while self._timers:
            await asyncio.gather(*list(self._timers), return_exceptions=True)

    # ────────────────────────── Surface helpers ──────────────────────────

    def _position_center(self) -> None:
        monitor = self.surface.current_monitor()
        if monitor is None:
            return
        x, y = centered_position(monitor, settings.window_width, settings.window_height)
        self.surface.set_position(x, y)

    async def _show_sequence(self) -> None:
        self.surface.set_always_on_top(True)
        self.surface.show()
        self._state = VisibilityState.VISIBLE
        await asyncio.sleep(self.settle_delay)
        self._focus_and_flag()

    async def _focus_existing(self) -> None:
        await asyncio.sleep(self.settle_delay)
        self._focus_and_flag()

    def _focus_and_flag(self) -> None:
        try:
            self.surface.focus()
        except Exception as e:
            logger.error(f"❌ Error setting focus on window: {e}")
        self.surface.request_attention()
