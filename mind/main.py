"""CLI entry point for the terminal Mastermind game."""

import argparse
import logging
import random
import sys

from dotenv import load_dotenv

from .device import DeviceGuardian
from .display import Display
from .game import DEFAULT_CONFIG, MastermindGame, parse_code
from .interrupt import AbortChannel, InterruptListener
from .reader import KeyReader
from .session import GameSession
from .settings import Settings

logger = logging.getLogger("mind")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mind",
        description="Mastermind in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  R G B C M Y (or 1-6)  place a peg
  Backspace             remove the last peg
  Enter                 submit a full guess
  Esc / Ctrl+C          quit

Examples:
  mind
  mind --set r22m       # one player sets the code for another
  mind --seed 42 --recap
        """
    )

    game_group = parser.add_argument_group('game')
    game_group.add_argument('--set', type=str, default=None, metavar='CODE',
                            help='4-peg code for another player to guess (e.g. r22m)')
    game_group.add_argument('--seed', type=int, default=None,
                            help='Random seed for reproducibility (env: MIND_SEED)')

    output_group = parser.add_argument_group('output')
    output_group.add_argument('--recap', action='store_true',
                              help='Print a table of all turns at the end (env: MIND_RECAP)')
    output_group.add_argument('--no-color', action='store_true',
                              help='Disable colors (env: NO_COLOR)')
    output_group.add_argument('--log-file', type=str, default=None,
                              help='Write a diagnostic log to this file (env: MIND_LOG_FILE)')
    output_group.add_argument('--verbose', action='store_true',
                              help='Verbose logging')

    return parser


def configure_logging(settings: Settings) -> None:
    """Warnings go to stderr; everything else only to the optional log file."""
    level = logging.DEBUG if settings.verbose else logging.INFO
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)


def main(argv=None) -> int:
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    secret = None
    if settings.secret:
        try:
            secret = parse_code(settings.secret, DEFAULT_CONFIG)
        except ValueError as e:
            parser.error(f"--set: {e}")

    configure_logging(settings)

    rng = random.Random(settings.seed)
    game = MastermindGame(DEFAULT_CONFIG, secret=secret, rng=rng)

    channel = AbortChannel()
    guardian = DeviceGuardian(sys.stdin)
    listener = InterruptListener(guardian, channel)
    listener.install()
    listener.start()

    try:
        session = GameSession(
            game,
            KeyReader(sys.stdin.fileno(), channel),
            Display(sys.stdout, color=settings.color),
            guardian,
            recap=settings.recap,
        )
        result = session.run()
    finally:
        guardian.release()
        listener.uninstall()
        channel.close()

    logger.debug("Session finished: %s", result.outcome)
    return 0


if __name__ == '__main__':
    sys.exit(main())
