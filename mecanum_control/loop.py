"""Rate-limited background loop with cooperative stop/resume."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from .config import LOOP_JOIN_TIMEOUT_SECONDS


class PeriodicLoop(ABC):
    """Runs step() on a daemon thread at a fixed rate until stopped.

    Subclasses implement step(). The stop flag is checked once per tick, so a
    step in progress always completes; nothing is interrupted mid-update.
    stop() followed by resume() starts a fresh thread and keeps all state
    held by the subclass.
    """

    def __init__(self, rate_hz: float, name: Optional[str] = None) -> None:
        """Initialize the loop.

        Args:
            rate_hz: Tick rate (Hz), must be positive
            name: Thread name used in logs. Defaults to the class name.

        Raises:
            ValueError: If rate_hz is not positive.
        """
        if rate_hz <= 0:
            raise ValueError(f"Loop rate must be positive, got {rate_hz}")

        self.rate_hz = rate_hz
        self.period = 1.0 / rate_hz
        self.name = name or type(self).__name__

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @abstractmethod
    def step(self) -> None:
        """Run one tick of work."""

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        """Start the background thread. No-op if it is already running."""
        if self._thread is not None and self._thread.is_alive():
            if not self._stop_event.is_set():
                return
            # Previous thread is still finishing its last tick
            self._thread.join()

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logging.debug(f"{self.name} started at {self.rate_hz:.0f} Hz")

    def stop(self, join: bool = False) -> None:
        """Signal the loop to stop after the current tick.

        Args:
            join: If True, wait for the thread to exit.
        """
        self._stop_event.set()
        if join and self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=LOOP_JOIN_TIMEOUT_SECONDS)
        logging.debug(f"{self.name} stopped")

    def resume(self) -> None:
        """Restart the loop after stop(), keeping accumulated state."""
        self.start()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.step()
            self._stop_event.wait(self.period)
