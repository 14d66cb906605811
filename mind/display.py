"""Terminal presentation: start screen, colored pegs, feedback and recap."""

import sys

from colorama import Fore, Style
from tabulate import tabulate

from .game import DEFAULT_CONFIG, GameConfig, TurnResult

PEG = "⬤"
CLEAR_SCREEN = "\033[H\033[2J"
CLEAR_LINE = "\r\033[K"

COLOR_CODES = {
    "R": Fore.RED,
    "G": Fore.GREEN,
    "B": Fore.BLUE,
    "C": Fore.CYAN,
    "M": Fore.MAGENTA,
    "Y": Fore.YELLOW,
}

COLOR_NAMES = {
    "R": "Red",
    "G": "Green",
    "B": "Blue",
    "C": "Cyan",
    "M": "Magenta",
    "Y": "Yellow",
}

# Feedback pegs reuse two palette colors.
EXACT_COLOR = "G"
PARTIAL_COLOR = "Y"


def format_playtime(seconds: float) -> str:
    """Short human-readable duration, e.g. "45s", "2m", "1m 23s"."""
    total = int(round(seconds))
    if total < 60:
        return f"{total}s"
    minutes, secs = divmod(total, 60)
    if secs == 0:
        return f"{minutes}m"
    return f"{minutes}m {secs}s"


class Display:
    """Writes everything the player sees. Never touches game state."""

    def __init__(self, out=None, color: bool = True, config: GameConfig = DEFAULT_CONFIG):
        self.out = out if out is not None else sys.stdout
        self.color = color
        self.config = config

    def _write(self, text: str = "") -> None:
        self.out.write(text)
        self.out.flush()

    def _paint(self, symbol: str, text: str) -> str:
        if not self.color:
            return text
        return COLOR_CODES[symbol] + text + Style.RESET_ALL

    def pegs(self, code: str) -> str:
        """Colored peg glyphs for a code; plain letters when color is off."""
        if not self.color:
            return code
        return "".join(self._paint(c, PEG) for c in code)

    def feedback_pegs(self, exact: int, partial: int) -> str:
        if not self.color:
            return f"{exact} exact, {partial} partial"
        return (self._paint(EXACT_COLOR, PEG) * exact
                + self._paint(PARTIAL_COLOR, PEG) * partial)

    def _prompt_text(self, turn: int) -> str:
        return f"Turn {turn:02d}/{self.config.max_turns}: "

    def show_start_screen(self, reader) -> None:
        """Banner and rules; blocks until the player presses ENTER."""
        names = [f"{c}={self._paint(c, COLOR_NAMES[c])}" for c in self.config.colors]
        half = (len(names) + 1) // 2
        lines = [
            "",
            "  ╔" + "═" * 31 + "╗",
            "  ║      M A S T E R M I N D      ║",
            "  ╚" + "═" * 31 + "╝",
            "",
            f"  Guess the secret code of {self.config.code_length} pegs.",
            "  Colors: " + ", ".join(names[:half]),
            "          " + ", ".join(names[half:]),
            f"  Enter {self.config.code_length} letters (e.g. "
            f"{self.config.colors[:self.config.code_length]}). "
            f"You have {self.config.max_turns} turns.",
            "",
            f"  Feedback: {self._paint(EXACT_COLOR, PEG)} = right color, right slot",
            f"            {self._paint(PARTIAL_COLOR, PEG)} = right color, wrong slot",
            "",
        ]
        self._write(CLEAR_SCREEN if self.color else "")
        self._write("\n".join(lines) + "\n")
        self._write(f"        Press {self._paint('G', 'ENTER')} to START ")
        reader.read_line()
        self._write("\n")

    def show_instructions(self) -> None:
        letters = " ".join(self._paint(c, c) for c in self.config.colors)
        numbers = " ".join(self._paint(c, str(i)) for i, c in enumerate(self.config.colors, 1))
        self._write(f"Enter a {self.config.code_length}-peg guess each turn:\n")
        self._write(f"Colors:  {letters}\n")
        self._write(f"Numbers: {numbers}\n\n")

    def draw_input(self, turn: int, pegs: str) -> None:
        """Redraw the current input line (key mode)."""
        self._write(CLEAR_LINE + self._prompt_text(turn) + self.pegs(pegs))

    def end_input_line(self) -> None:
        self._write("\n")

    def prompt(self, turn: int) -> None:
        """Prompt for a whole line (line mode)."""
        self._write(self._prompt_text(turn))

    def reject_line(self) -> None:
        colors = " ".join(self.config.colors)
        self._write(f"  (enter {self.config.code_length} pegs: "
                    f"{colors} or 1-{self.config.num_colors})\n")

    def show_turn(self, result: TurnResult) -> None:
        fb = result.feedback
        self._write(f"  Feedback: {self.feedback_pegs(fb.exact, fb.partial)}\n")

    def show_win(self, elapsed: float) -> None:
        self._write(f"\nYou win! You cracked the code in {format_playtime(elapsed)}.\n")

    def show_loss(self, secret: str, elapsed: float) -> None:
        self._write(f"\nOut of turns. The secret was: {self.pegs(secret)} "
                    f"({format_playtime(elapsed)})\n")

    def show_aborted(self) -> None:
        self._write("\n")

    def show_recap(self, history: list[TurnResult]) -> None:
        """Table of every scored turn."""
        rows = [
            [r.turn, r.guess, r.feedback.exact, r.feedback.partial]
            for r in history
        ]
        table = tabulate(rows, headers=["Turn", "Guess", "Exact", "Partial"], tablefmt="simple")
        self._write("\n" + table + "\n")
