"""Exceptions shared across the game."""


class MindError(Exception):
    """Base exception for game-related issues."""
    pass


class GameAborted(MindError):
    """Raised when the player presses ESC or the process is interrupted."""

    def __init__(self, reason: str = "aborted"):
        super().__init__(reason)
        self.reason = reason
