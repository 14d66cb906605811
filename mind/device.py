"""Exclusive unbuffered terminal input with a release that runs exactly once."""

from typing import Optional
import logging
import sys
import termios
import threading
import tty

logger = logging.getLogger(__name__)


class DeviceHandle:
    """Proof of ownership of the terminal in unbuffered mode."""

    def __init__(self, fd: int, saved_attrs: list):
        self.fd = fd
        self.saved_attrs = saved_attrs

    def restore(self) -> None:
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, self.saved_attrs)


class DeviceGuardian:
    """
    Owns the switch of the input terminal into cbreak mode.

    acquire() hands out at most one live handle. release() may be called from
    the main loop and from the interrupt listener at the same time; the lock
    makes exactly one of them restore the terminal, the other sees a no-op.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._lock = threading.Lock()
        self._handle: Optional[DeviceHandle] = None
        self._released = False

    @property
    def acquired(self) -> bool:
        return self._handle is not None

    @property
    def released(self) -> bool:
        return self._released

    def acquire(self) -> Optional[DeviceHandle]:
        """
        Put the terminal into cbreak mode (no line buffering, no echo).

        Returns:
            The handle, or None when the stream is not an interactive
            terminal; callers then fall back to reading whole lines.
        """
        with self._lock:
            if self._handle is not None and not self._released:
                raise RuntimeError("Input device is already acquired")

            try:
                if not self.stream.isatty():
                    logger.info("Input is not a terminal, using line mode")
                    return None
                fd = self.stream.fileno()
                saved = termios.tcgetattr(fd)
                tty.setcbreak(fd, termios.TCSAFLUSH)
            except (termios.error, OSError, ValueError) as e:
                logger.info("Could not switch terminal to cbreak mode (%s), using line mode", e)
                return None

            self._handle = DeviceHandle(fd, saved)
            self._released = False
            logger.debug("Acquired terminal fd %d", fd)
            return self._handle

    def release(self, caller: str = "main") -> bool:
        """
        Restore the terminal if it is still held.

        Returns:
            True for the one call that restored it, False for every other call
        """
        with self._lock:
            if self._handle is None or self._released:
                logger.debug("Release by %s: nothing to do", caller)
                return False
            self._released = True
            try:
                self._handle.restore()
            except (termios.error, OSError) as e:
                logger.warning("Failed to restore terminal: %s", e)
            logger.debug("Terminal restored by %s", caller)
            return True

    def __enter__(self) -> Optional[DeviceHandle]:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
