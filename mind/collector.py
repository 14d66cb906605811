"""Builds a guess from key presses, independent of how they are displayed."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import GameAborted
from .game import DEFAULT_CONFIG, GameConfig, key_to_color

ESC = "\x1b"
BACKSPACE_KEYS = ("\b", "\x7f")
SUBMIT_KEYS = ("\r", "\n")


class EventKind(Enum):
    PEG = "peg"
    DELETE = "delete"
    SUBMIT = "submit"
    ABORT = "abort"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    kind: EventKind
    color: Optional[str] = None  # set for PEG events only


class CollectorState(Enum):
    EMPTY = "empty"
    FILLING = "filling"
    FULL = "full"


def classify_key(key: str, config: GameConfig = DEFAULT_CONFIG) -> KeyEvent:
    """Translate one character into a collector event."""
    color = key_to_color(key, config)
    if color is not None:
        return KeyEvent(EventKind.PEG, color)
    if key in BACKSPACE_KEYS:
        return KeyEvent(EventKind.DELETE)
    if key in SUBMIT_KEYS:
        return KeyEvent(EventKind.SUBMIT)
    if key == ESC:
        return KeyEvent(EventKind.ABORT)
    return KeyEvent(EventKind.IGNORED)


def parse_guess_line(line: str, config: GameConfig = DEFAULT_CONFIG) -> Optional[str]:
    """
    Decode a whole line typed in line mode (no raw terminal available).

    Unknown characters are dropped, so "R G B C", "rgbc" and "1234" are all
    the same guess. Returns None unless exactly code_length pegs remain.
    """
    pegs = [key_to_color(ch, config) for ch in line]
    code = "".join(p for p in pegs if p is not None)
    if len(code) != config.code_length:
        return None
    return code


class InputCollector:
    """Incremental guess buffer driven by key events."""

    def __init__(self, config: GameConfig = DEFAULT_CONFIG):
        self.config = config
        self._buffer: list[str] = []

    @property
    def pegs(self) -> str:
        return "".join(self._buffer)

    @property
    def state(self) -> CollectorState:
        if not self._buffer:
            return CollectorState.EMPTY
        if len(self._buffer) < self.config.code_length:
            return CollectorState.FILLING
        return CollectorState.FULL

    def reset(self) -> None:
        self._buffer.clear()

    def feed(self, event: KeyEvent) -> Optional[str]:
        """
        Apply one event.

        Returns:
            The completed guess when a submit is accepted, otherwise None

        Raises:
            GameAborted: on an abort event, whatever the buffer holds
        """
        if event.kind is EventKind.ABORT:
            raise GameAborted("escape")

        if event.kind is EventKind.PEG:
            if len(self._buffer) < self.config.code_length:
                self._buffer.append(event.color)
        elif event.kind is EventKind.DELETE:
            if self._buffer:
                self._buffer.pop()
        elif event.kind is EventKind.SUBMIT:
            if self.state is CollectorState.FULL:
                return self.pegs

        return None
