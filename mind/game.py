"""Core Mastermind game logic."""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional
import logging
import random

logger = logging.getLogger(__name__)

# Palette order matters: the numeric aliases 1-6 map onto it (1=R ... 6=Y).
COLORS = "RGBCMY"
CODE_LENGTH = 4
MAX_TURNS = 12


@dataclass(frozen=True)
class GameConfig:
    """Rules of a game. The defaults are the only supported rules."""
    colors: str = COLORS
    code_length: int = CODE_LENGTH
    max_turns: int = MAX_TURNS

    @property
    def num_colors(self) -> int:
        return len(self.colors)


DEFAULT_CONFIG = GameConfig()


class Feedback(NamedTuple):
    """Result of comparing a guess with the secret."""
    exact: int    # right color, right slot
    partial: int  # right color, wrong slot


class GameState(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class TurnResult:
    """What the display receives after every scored guess."""
    turn: int
    guess: str
    feedback: Feedback


def score(secret: str, guess: str) -> Feedback:
    """
    Compare a guess with the secret.

    Algorithm:
    1. Count exact position matches; those positions are consumed
    2. Count the remaining symbols of each code separately
    3. Each symbol found in both contributes the smaller of its two counts

    Raises:
        ValueError: if the codes differ in length
    """
    if len(secret) != len(guess):
        raise ValueError(
            f"Secret and guess must have the same length ({len(secret)} != {len(guess)})"
        )

    exact = 0
    secret_remaining = Counter()
    guess_remaining = Counter()

    for s, g in zip(secret, guess):
        if s == g:
            exact += 1
        else:
            secret_remaining[s] += 1
            guess_remaining[g] += 1

    partial = sum((secret_remaining & guess_remaining).values())
    return Feedback(exact, partial)


def generate_secret(config: GameConfig = DEFAULT_CONFIG,
                    rng: Optional[random.Random] = None) -> str:
    """Pick every position independently; duplicates are allowed."""
    choice = rng.choice if rng is not None else random.choice
    return "".join(choice(config.colors) for _ in range(config.code_length))


def key_to_color(key: str, config: GameConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Map a color letter (any case) or its number alias to a palette symbol."""
    if len(key) != 1:
        return None
    upper = key.upper()
    if upper in config.colors:
        return upper
    aliases = "123456789"[:config.num_colors]
    if key in aliases:
        return config.colors[aliases.index(key)]
    return None


def parse_code(text: str, config: GameConfig = DEFAULT_CONFIG) -> str:
    """
    Parse a code typed as letters or numbers (e.g. "r22m").

    Raises:
        ValueError: on wrong length or an unknown character
    """
    text = text.strip()
    if len(text) != config.code_length:
        raise ValueError(
            f"Code must have exactly {config.code_length} characters "
            f"(e.g. r22m), got {len(text)}"
        )

    symbols = []
    for ch in text:
        color = key_to_color(ch, config)
        if color is None:
            raise ValueError(
                f"Invalid character {ch!r} in code "
                f"(use {' '.join(config.colors)} or 1-{config.num_colors})"
            )
        symbols.append(color)
    return "".join(symbols)


class MastermindGame:
    """Secret, turn counter and outcome of a single game."""

    def __init__(self, config: GameConfig = DEFAULT_CONFIG, secret: Optional[str] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize a new game.

        Args:
            config: Game rules
            secret: Optional predefined secret. If None, generates a random one.
            rng: Random source used for the secret
        """
        self.config = config
        if secret is not None:
            self._validate_code(secret)
            self.secret = secret
        else:
            self.secret = generate_secret(config, rng)
        self.turn = 1
        self.state = GameState.IN_PROGRESS
        self.history: list[TurnResult] = []

    def _validate_code(self, code: str) -> None:
        if len(code) != self.config.code_length:
            raise ValueError(f"Code must have exactly {self.config.code_length} pegs")
        if any(c not in self.config.colors for c in code):
            raise ValueError(f"Code may only use {self.config.colors}")

    def play(self, guess: str) -> TurnResult:
        """Score a guess for the current turn and advance the game."""
        if self.is_game_over():
            raise RuntimeError(f"Game is already over ({self.state.value})")
        self._validate_code(guess)

        feedback = score(self.secret, guess)
        result = TurnResult(turn=self.turn, guess=guess, feedback=feedback)
        self.history.append(result)
        logger.debug("Turn %d: %s -> %d exact, %d partial",
                     self.turn, guess, feedback.exact, feedback.partial)

        if feedback.exact == self.config.code_length:
            self.state = GameState.WON
        elif self.turn == self.config.max_turns:
            self.state = GameState.LOST
        else:
            self.turn += 1

        return result

    def is_game_over(self) -> bool:
        return self.state is not GameState.IN_PROGRESS

    @property
    def turns_taken(self) -> int:
        return len(self.history)
