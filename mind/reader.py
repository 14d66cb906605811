"""Reads keys and lines from the terminal; the game's only blocking point."""

from collections import deque
import codecs
import os
import select

from .errors import GameAborted

CHUNK_SIZE = 1024


class KeyReader:
    """
    Character source that also watches an abort channel.

    Every wait goes through select() on both the input fd and the channel,
    so an interrupt arriving while the player thinks ends the wait at once.
    """

    def __init__(self, fd: int, channel=None):
        self.fd = fd
        self.channel = channel
        self._pending: deque[str] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._eof = False

    def _check_abort(self) -> None:
        if self.channel is not None and self.channel.is_set():
            raise GameAborted("interrupt")

    def _fill(self) -> None:
        """Block until more input arrives or the channel fires."""
        while not self._pending:
            self._check_abort()
            if self._eof:
                raise EOFError("end of input")

            watched = [self.fd]
            if self.channel is not None:
                watched.append(self.channel.fileno())
            ready, _, _ = select.select(watched, [], [])

            self._check_abort()
            if self.fd in ready:
                data = os.read(self.fd, CHUNK_SIZE)
                if not data:
                    self._eof = True
                    self._pending.extend(self._decoder.decode(b"", final=True))
                else:
                    self._pending.extend(self._decoder.decode(data))

    def read_key(self) -> str:
        # Keys already buffered must not outlive an interrupt.
        self._check_abort()
        self._fill()
        return self._pending.popleft()

    def read_line(self) -> str:
        """Read up to the next newline; a final unterminated line is returned as is."""
        chars = []
        while True:
            try:
                ch = self.read_key()
            except EOFError:
                if chars:
                    return "".join(chars)
                raise
            if ch == "\n":
                return "".join(chars).rstrip("\r")
            chars.append(ch)

