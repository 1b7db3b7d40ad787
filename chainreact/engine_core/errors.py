"""
Engine errors - Contract violations raised by the core.

Gameplay-level rejections (wrong turn, occupied cell) are NOT exceptions;
the reducer reports them through MoveResult.failure(). The exceptions here
signal programmer errors: the caller skipped a legality check or passed
malformed data.
"""

from __future__ import annotations


class ChainReactError(Exception):
    """Base class for all engine contract violations."""


class InvalidBoardError(ChainReactError, ValueError):
    """Raised for non-positive dimensions or an inconsistent board layout."""


class InvalidMoveError(ChainReactError, ValueError):
    """Raised when a move is applied to a cell the player may not use."""

    def __init__(self, x: int, y: int, player: int, reason: str = ""):
        self.x = x
        self.y = y
        self.player = player
        self.reason = reason
        message = f"Player {player} cannot place an orb at ({x}, {y})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ObjectiveError(ChainReactError, ValueError):
    """Raised when an objective descriptor is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid objective: {'; '.join(errors)}")
