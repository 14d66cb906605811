"""Background listener that turns SIGINT/SIGTERM into a clean abort."""

from typing import Optional
import logging
import os
import signal
import threading

from .device import DeviceGuardian

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class AbortChannel:
    """
    One-shot "please abort" notification.

    Backed by a pipe so the main loop can select() on it together with the
    terminal at its single blocking point.
    """

    def __init__(self):
        self._read_fd, self._write_fd = os.pipe()
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._closed = False

    def fileno(self) -> int:
        return self._read_fd

    def notify(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            if self._closed:
                return
            os.write(self._write_fd, b"!")

    def is_set(self) -> bool:
        return self._event.is_set()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        for fd in (self._read_fd, self._write_fd):
            try:
                os.close(fd)
            except OSError:
                pass


class InterruptListener(threading.Thread):
    """Waits for a termination signal, restores the terminal, then notifies."""

    def __init__(self, guardian: DeviceGuardian, channel: AbortChannel,
                 signals: tuple = DEFAULT_SIGNALS):
        super().__init__(name="interrupt-listener", daemon=True)
        self.guardian = guardian
        self.channel = channel
        self.signals = set(signals)
        self.received: Optional[int] = None
        self._previous_mask: Optional[set] = None

    def install(self) -> None:
        """
        Block the signals in the calling (main) thread.

        Must run before start() so the listener inherits the mask and
        sigwait() is the only place the signals are delivered.
        """
        self._previous_mask = signal.pthread_sigmask(signal.SIG_BLOCK, self.signals)

    def uninstall(self) -> None:
        if self._previous_mask is not None:
            signal.pthread_sigmask(signal.SIG_SETMASK, self._previous_mask)
            self._previous_mask = None

    def run(self) -> None:
        signum = signal.sigwait(self.signals)
        self.fire(signum)

    def fire(self, signum: int) -> None:
        self.received = signum
        logger.info("Received %s, aborting", signal.Signals(signum).name)
        if self.guardian.release(caller="interrupt"):
            logger.debug("Interrupt listener restored the terminal")
        self.channel.notify()
