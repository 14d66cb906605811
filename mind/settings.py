"""Runtime settings gathered from the environment (.env) and the command line."""

from dataclasses import dataclass
from typing import Optional
import os

TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUE_VALUES


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass
class Settings:
    """Options for a single run of the game."""
    secret: Optional[str] = None  # raw --set value, parsed by the CLI
    seed: Optional[int] = None
    recap: bool = False
    color: bool = True
    log_file: Optional[str] = None
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Defaults from environment variables.

        MIND_SEED, MIND_RECAP and MIND_LOG_FILE mirror the CLI options;
        NO_COLOR (any non-empty value) turns colors off.
        """
        return cls(
            seed=_env_int("MIND_SEED"),
            recap=_env_flag("MIND_RECAP"),
            color=not os.environ.get("NO_COLOR"),
            log_file=os.environ.get("MIND_LOG_FILE") or None,
        )

    @classmethod
    def from_args(cls, args) -> "Settings":
        """Command-line values override the environment."""
        settings = cls.from_env()
        settings.secret = args.set
        if args.seed is not None:
            settings.seed = args.seed
        if args.recap:
            settings.recap = True
        if args.no_color:
            settings.color = False
        if args.log_file:
            settings.log_file = args.log_file
        settings.verbose = args.verbose
        return settings
