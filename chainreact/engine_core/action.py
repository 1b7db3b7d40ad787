"""
Move System - Moves and move results.

A move is the only player action in the game: one orb into one cell.
Pause/resume/restart are run-level controls handled by the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Move:
    """A placement of one orb by `player` at (x, y)."""
    x: int
    y: int
    player: int

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "player": self.player}


class ErrorCode:
    """Error codes carried by failed MoveResults."""
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move succeeded
    - New run (if succeeded)
    - Error and code (if rejected)
    - The cascade it caused and who it knocked out
    """
    success: bool
    new_state: Any | None = None  # GameRun
    error: str | None = None
    error_code: str | None = None

    cascade: Any | None = None  # CascadeResult
    eliminated: list[int] = field(default_factory=list)  # Newly eliminated this move
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        cascade: Any | None = None,
        eliminated: list[int] | None = None,
        changes: list[str] | None = None,
    ) -> MoveResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            cascade=cascade,
            eliminated=eliminated or [],
            state_changes=changes or [],
        )
