"""
Game Clock - Once-per-second elapsed time ticker for a session.

At most one ticking thread per clock. The tick callback returns False
when the clock should stop for good (game won, session ended).
"""

from __future__ import annotations
import threading
from typing import Callable


class GameClock:
    """
    Background ticker.

    Usage:
        clock = GameClock(on_tick=session.tick)
        clock.start(epoch)   # no-op if already running; tick(epoch) each second
        clock.stop()
    """

    def __init__(self, on_tick: Callable[..., bool], interval: float = 1.0):
        self.on_tick = on_tick
        self.interval = interval
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self, *args) -> bool:
        """
        Start ticking. Returns False if a ticker is already running.

        args are passed to every on_tick call of this run.
        """
        with self._lock:
            if self.running:
                return False
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event, args),
                name="klondike-clock",
                daemon=True,
            )
            self._thread.start()
            return True

    def stop(self):
        """Stop ticking. Safe to call when not running."""
        with self._lock:
            self._stop_event.set()
            self._thread = None

    def _run(self, stop_event: threading.Event, args: tuple):
        while not stop_event.wait(self.interval):
            if not self.on_tick(*args):
                stop_event.set()
                break
