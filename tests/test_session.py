"""
End-to-end games through GameSession with scripted input.
"""
import os
import signal

from mind.device import DeviceGuardian
from mind.interrupt import AbortChannel, InterruptListener
from mind.reader import KeyReader
from mind.game import GameState, MastermindGame
from mind.session import GameSession


def make_session(secret, reader, display, stream, **kwargs):
    game = MastermindGame(secret=secret)
    return GameSession(game, reader, display, DeviceGuardian(stream), **kwargs)


def test_key_mode_win_on_first_turn(fake_tty, display, scripted):
    reader = scripted(keys="rgbc\r", lines=[""])
    session = make_session("RGBC", reader, display, fake_tty)

    result = session.run()

    assert result.state is GameState.WON
    assert not result.aborted
    assert result.outcome == "won"
    assert result.total_turns == 1
    assert result.turns[0]["feedback"] == {"exact": 4, "partial": 0}
    assert display.names()[:2] == ["start", "instructions"]
    assert "win" in display.names()
    assert "loss" not in display.names()
    # Terminal was put in cbreak mode and restored once
    assert fake_tty.restore_calls == 1
    assert fake_tty.mode == "cooked"


def test_key_mode_loss_reveals_secret(fake_tty, display, scripted):
    reader = scripted(keys="mmmm\r" * 12)
    session = make_session("RGBC", reader, display, fake_tty, show_intro=False)

    result = session.run()

    assert result.state is GameState.LOST
    assert result.total_turns == 12
    assert ("loss", "RGBC") in display.calls
    assert [t.turn for t in display.turns] == list(range(1, 13))
    assert fake_tty.restore_calls == 1


def test_key_mode_editing_before_submit(fake_tty, display, scripted):
    # Early submit ignored, extra pegs ignored, backspace fixes the last slot
    reader = scripted(keys="rg\rbcm\x7fc\r")
    session = make_session("RGBC", reader, display, fake_tty, show_intro=False)

    result = session.run()

    assert result.state is GameState.WON
    draws = [c[2] for c in display.calls if c[0] == "draw"]
    assert draws == ["", "R", "RG", "RGB", "RGBC", "RGB", "RGBC"]


def test_key_mode_resets_buffer_each_turn(fake_tty, display, scripted):
    reader = scripted(keys="yyyy\rrgbc\r")
    session = make_session("RGBC", reader, display, fake_tty, show_intro=False)

    session.run()

    turn_two_draws = [c[2] for c in display.calls if c[0] == "draw" and c[1] == 2]
    assert turn_two_draws[0] == ""
    assert [t.guess for t in display.turns] == ["YYYY", "RGBC"]


def test_escape_aborts_without_feedback(fake_tty, display, scripted):
    reader = scripted(keys="yyyy\rrg\x1b")
    session = make_session("RGBC", reader, display, fake_tty, show_intro=False)

    result = session.run()

    assert result.aborted
    assert result.outcome == "aborted"
    assert result.state is GameState.IN_PROGRESS
    # Only the first, completed turn produced feedback
    assert result.total_turns == 1
    assert "win" not in display.names()
    assert "loss" not in display.names()
    assert "aborted" in display.names()
    assert fake_tty.restore_calls == 1


def test_interrupt_aborts_blocked_read(fake_tty, display, scripted):
    reader = scripted(keys=list("rgb") + [scripted.ABORT])
    guardian = DeviceGuardian(fake_tty)
    session = GameSession(MastermindGame(secret="RGBC"), reader, display, guardian,
                          show_intro=False)

    result = session.run()

    assert result.aborted
    assert result.total_turns == 0
    assert guardian.released
    assert fake_tty.restore_calls == 1


def test_interrupt_during_start_screen(not_tty, display, scripted):
    reader = scripted(lines=[scripted.ABORT])
    session = make_session("RGBC", reader, display, not_tty)

    result = session.run()

    assert result.aborted
    assert display.names() == ["start"]


def test_release_by_listener_is_not_repeated(fake_tty, display, scripted):
    guardian = DeviceGuardian(fake_tty)

    class ListenerFiresMidTurn:
        def __init__(self):
            self.keys = list("rg")

        def read_key(self):
            if self.keys:
                return self.keys.pop(0)
            # The listener restores the terminal, then the player hits ESC as well
            guardian.release(caller="interrupt")
            return "\x1b"

        def read_line(self):
            return ""

    session = GameSession(MastermindGame(secret="RGBC"), ListenerFiresMidTurn(), display,
                          guardian, show_intro=False)

    result = session.run()

    assert result.aborted
    assert fake_tty.restore_calls == 1


def test_end_of_input_aborts(fake_tty, display, scripted):
    reader = scripted(keys="rgb")
    session = make_session("RGBC", reader, display, fake_tty, show_intro=False)

    result = session.run()

    assert result.aborted
    assert fake_tty.restore_calls == 1


def test_line_mode_rejects_then_accepts(not_tty, display, scripted):
    # The first line only dismisses the start screen
    reader = scripted(lines=["", "rgb", "hello", "r g b c"])
    session = make_session("RGBC", reader, display, not_tty)

    result = session.run()

    assert result.state is GameState.WON
    assert display.names().count("reject") == 2
    assert display.names().count("prompt") == 3
    assert "draw" not in display.names()


def test_line_mode_numeric_aliases_and_loss(not_tty, display, scripted):
    reader = scripted(lines=["6666"] * 12)
    session = make_session("RGBC", reader, display, not_tty, show_intro=False)

    result = session.run()

    assert result.state is GameState.LOST
    assert result.turns[0]["guess"] == "YYYY"
    assert ("loss", "RGBC") in display.calls


def test_recap_shown_when_enabled(not_tty, display, scripted):
    reader = scripted(lines=["yyyy", "rgbc"])
    session = make_session("RGBC", reader, display, not_tty, show_intro=False, recap=True)

    session.run()

    assert ("recap", 2) in display.calls


def test_recap_not_shown_after_abort(not_tty, display, scripted):
    reader = scripted(lines=["yyyy"])
    session = make_session("RGBC", reader, display, not_tty, show_intro=False, recap=True)

    session.run()

    assert "recap" not in display.names()


def test_interrupt_beats_buffered_keys(fake_tty, display):
    # A whole winning guess is pasted at once, then Ctrl+C arrives after the first peg
    read_fd, write_fd = os.pipe()
    channel = AbortChannel()
    guardian = DeviceGuardian(fake_tty)
    listener = InterruptListener(guardian, channel)
    os.write(write_fd, b"rgbc\r")

    def _draw(turn, pegs):
        display.calls.append(("draw", turn, pegs))
        if pegs == "R":
            listener.fire(signal.SIGINT)

    display.draw_input = _draw
    session = GameSession(MastermindGame(secret="RGBC"), KeyReader(read_fd, channel),
                          display, guardian, show_intro=False)
    try:
        result = session.run()
    finally:
        channel.close()
        os.close(read_fd)
        os.close(write_fd)

    assert result.aborted
    assert result.total_turns == 0
    assert display.turns == []
    assert "win" not in display.names()
    assert fake_tty.restore_calls == 1
