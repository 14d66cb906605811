"""
Shared fixtures:
- fake_tty: a terminal stand-in so the device guardian can run without a real TTY
- ScriptedReader: feeds keys/lines to a session from a list
- RecordingDisplay: remembers what the session asked to show
"""
import termios
import tty

import pytest

from mind.errors import GameAborted


class FakeTerminal:
    """Stream that claims to be a TTY and records termios calls."""

    def __init__(self, fd: int = 99):
        self.fd = fd
        self.saved = ["original", "attrs"]
        self.mode = "cooked"
        self.restore_calls = 0

    def isatty(self):
        return True

    def fileno(self):
        return self.fd


class NotATerminal:
    def isatty(self):
        return False

    def fileno(self):
        return 0


@pytest.fixture
def fake_tty(monkeypatch):
    term = FakeTerminal()

    def _tcgetattr(fd):
        assert fd == term.fd
        return list(term.saved)

    def _setcbreak(fd, when=termios.TCSAFLUSH):
        assert fd == term.fd
        term.mode = "cbreak"

    def _tcsetattr(fd, when, attrs):
        assert fd == term.fd
        assert attrs == term.saved
        term.mode = "cooked"
        term.restore_calls += 1

    monkeypatch.setattr(termios, "tcgetattr", _tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", _tcsetattr)
    monkeypatch.setattr(tty, "setcbreak", _setcbreak)
    return term


class ScriptedReader:
    """
    Stand-in for KeyReader.

    Keys are consumed one character at a time; lines one entry at a time.
    Running out of input raises EOFError, like a closed terminal. An entry
    equal to ABORT raises GameAborted, as if the interrupt listener fired.
    """

    ABORT = object()

    def __init__(self, keys="", lines=None):
        self.keys = list(keys)
        self.lines = list(lines or [])

    def read_key(self):
        if not self.keys:
            raise EOFError("end of input")
        key = self.keys.pop(0)
        if key is self.ABORT:
            raise GameAborted("interrupt")
        return key

    def read_line(self):
        if not self.lines:
            raise EOFError("end of input")
        line = self.lines.pop(0)
        if line is self.ABORT:
            raise GameAborted("interrupt")
        return line


class RecordingDisplay:
    def __init__(self):
        self.calls = []
        self.turns = []

    def show_start_screen(self, reader):
        self.calls.append(("start",))
        reader.read_line()

    def show_instructions(self):
        self.calls.append(("instructions",))

    def draw_input(self, turn, pegs):
        self.calls.append(("draw", turn, pegs))

    def end_input_line(self):
        self.calls.append(("end_line",))

    def prompt(self, turn):
        self.calls.append(("prompt", turn))

    def reject_line(self):
        self.calls.append(("reject",))

    def show_turn(self, result):
        self.turns.append(result)
        self.calls.append(("turn", result.turn))

    def show_win(self, elapsed):
        self.calls.append(("win",))

    def show_loss(self, secret, elapsed):
        self.calls.append(("loss", secret))

    def show_aborted(self):
        self.calls.append(("aborted",))

    def show_recap(self, history):
        self.calls.append(("recap", len(history)))

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def not_tty():
    return NotATerminal()


@pytest.fixture
def scripted():
    """Factory for ScriptedReader; scripted.ABORT marks an interrupt."""
    return ScriptedReader
