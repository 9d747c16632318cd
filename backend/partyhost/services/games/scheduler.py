import logging
from typing import Callable, Dict, Optional, Set


logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for one delayed room callback."""

    def __init__(self, room_code: str, callback: Callable[[], None], delay: float):
        self.room_code = room_code
        self.callback = callback
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        try:
            self.callback()
        except Exception:
            logger.exception(f"[timer-error] room={self.room_code} callback failed")


class TaskScheduler:
    """Delayed callbacks keyed by room code, run as Socket.IO background tasks.

    - Each call sleeps on ``socketio.sleep`` so it cooperates with whichever
      async mode the server picked (threading, eventlet, gevent)
    - Callbacks run while holding the registry lock, so they never interleave
      with an inbound event halfway through
    - ``cancel_room`` drops everything pending for a room on teardown
    """

    def __init__(self, socketio, lock):
        self.socketio = socketio
        self.lock = lock
        self._pending: Dict[str, Set[ScheduledCall]] = {}

    def call_later(self, room_code: str, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(room_code, callback, delay)
        self._pending.setdefault(room_code, set()).add(call)
        self.socketio.start_background_task(self._worker, call)
        return call

    def _worker(self, call: ScheduledCall) -> None:
        self.socketio.sleep(call.delay)
        with self.lock:
            self._discard(call)
            call.fire()

    def _discard(self, call: ScheduledCall) -> None:
        pending = self._pending.get(call.room_code)
        if pending is None:
            return
        pending.discard(call)
        if not pending:
            self._pending.pop(call.room_code, None)

    def cancel_room(self, room_code: str) -> None:
        for call in self._pending.pop(room_code, set()):
            call.cancel()

    def pending_count(self, room_code: str) -> int:
        return len([c for c in self._pending.get(room_code, set()) if not c.cancelled])


class RoundTimer:
    """Per-second countdown for one drawing turn.

    Calls ``on_tick(seconds)`` with the starting value immediately, then once
    per second with the remaining time; when it reaches zero ``on_expire``
    runs. ``cancel`` stops both.
    """

    def __init__(self, scheduler, room_code: str, seconds: int,
                 on_tick: Callable[[int], None], on_expire: Callable[[], None]):
        self.scheduler = scheduler
        self.room_code = room_code
        self.remaining = int(seconds)
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.cancelled = False
        self._call: Optional[ScheduledCall] = None

    @property
    def active(self) -> bool:
        return not self.cancelled and self.remaining > 0

    def start(self) -> 'RoundTimer':
        logger.info(f"[timer-set] room={self.room_code} duration={self.remaining}s")
        self.on_tick(self.remaining)
        if self.remaining <= 0:
            self._expire()
        else:
            self._schedule_next()
        return self

    def _schedule_next(self) -> None:
        self._call = self.scheduler.call_later(self.room_code, 1, self._tick)

    def _tick(self) -> None:
        if self.cancelled:
            return
        self.remaining -= 1
        self.on_tick(self.remaining)
        if self.remaining <= 0:
            self._expire()
        else:
            self._schedule_next()

    def _expire(self) -> None:
        logger.info(f"[timer-fire] room={self.room_code}")
        self.cancelled = True
        self.on_expire()

    def cancel(self) -> None:
        self.cancelled = True
        if self._call is not None:
            self._call.cancel()
            self._call = None
