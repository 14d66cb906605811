"""Game loop: drives turns from first prompt to a final outcome."""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
import logging
import time

from .collector import InputCollector, classify_key, parse_guess_line
from .device import DeviceGuardian
from .errors import GameAborted
from .game import GameState, MastermindGame

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Complete result of a game session."""
    state: GameState
    aborted: bool
    secret: str
    turns: list[dict]
    total_turns: int
    timestamp: str
    duration_seconds: float

    @property
    def outcome(self) -> str:
        return "aborted" if self.aborted else self.state.value


class GameSession:
    """Runs one game against the player at the keyboard."""

    def __init__(self, game: MastermindGame, reader, display, guardian: DeviceGuardian,
                 show_intro: bool = True, recap: bool = False):
        """
        Initialize game session.

        Args:
            game: Game holding the secret and turn counter
            reader: KeyReader (or anything with read_key/read_line)
            display: Display receiving everything to be shown
            guardian: Owner of the terminal's unbuffered mode
            show_intro: Show the start screen and wait for ENTER first
            recap: Print a table of all turns when the game ends
        """
        self.game = game
        self.reader = reader
        self.display = display
        self.guardian = guardian
        self.show_intro = show_intro
        self.recap = recap
        self.collector = InputCollector(game.config)

    def run(self) -> SessionResult:
        """Play until won, lost or aborted. The terminal is restored on every path."""
        start_time = time.monotonic()
        aborted = False
        key_mode = False

        try:
            if self.show_intro:
                self.display.show_start_screen(self.reader)
            self.display.show_instructions()

            logger.info("Game started (%d turns)", self.game.config.max_turns)
            with self.guardian as handle:
                key_mode = handle is not None
                while not self.game.is_game_over():
                    if key_mode:
                        guess = self._read_key_guess(self.game.turn)
                    else:
                        guess = self._read_line_guess(self.game.turn)
                    result = self.game.play(guess)
                    self.display.show_turn(result)

        except GameAborted as e:
            aborted = True
            logger.info("Game aborted (%s) on turn %d", e.reason, self.game.turn)
        except EOFError:
            aborted = True
            logger.info("Input closed on turn %d", self.game.turn)

        duration = time.monotonic() - start_time

        if aborted:
            if key_mode:
                self.display.show_aborted()
        elif self.game.state is GameState.WON:
            self.display.show_win(duration)
        else:
            self.display.show_loss(self.game.secret, duration)

        if self.recap and not aborted:
            self.display.show_recap(self.game.history)

        if not aborted:
            logger.info("Game %s after %d turn(s)", self.game.state.value, self.game.turns_taken)

        return SessionResult(
            state=self.game.state,
            aborted=aborted,
            secret=self.game.secret,
            turns=[self._turn_dict(r) for r in self.game.history],
            total_turns=self.game.turns_taken,
            timestamp=datetime.now(timezone.utc).isoformat(),
            duration_seconds=round(duration, 2),
        )

    def _read_key_guess(self, turn: int) -> str:
        """Collect pegs key by key until a full guess is submitted."""
        self.collector.reset()
        self.display.draw_input(turn, "")

        while True:
            key = self.reader.read_key()
            before = self.collector.pegs
            guess = self.collector.feed(classify_key(key, self.game.config))
            if guess is not None:
                self.display.end_input_line()
                return guess
            if self.collector.pegs != before:
                self.display.draw_input(turn, self.collector.pegs)

    def _read_line_guess(self, turn: int) -> str:
        """Line mode: re-prompt until a line holds exactly one full guess."""
        while True:
            self.display.prompt(turn)
            line = self.reader.read_line()
            guess = parse_guess_line(line, self.game.config)
            if guess is not None:
                return guess
            self.display.reject_line()

    @staticmethod
    def _turn_dict(result) -> dict:
        data = asdict(result)
        data["feedback"] = {"exact": result.feedback.exact, "partial": result.feedback.partial}
        return data
