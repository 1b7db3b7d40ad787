"""
API Schemas - Pydantic models for the HTTP API.

These are the wire types. The engine never sees them: the service layer
converts engine values (GameRun, PuzzleRun, summaries) into these models.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Error codes returned in ErrorResponse."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    PUZZLE_NOT_FOUND = "PUZZLE_NOT_FOUND"
    RUN_NOT_FOUND = "RUN_NOT_FOUND"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameStatus(str, Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class PuzzleRunStatus(str, Enum):
    PLAYING = "playing"
    COMPLETED = "completed"
    FAILED = "failed"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """One board cell."""
    orb_count: int = Field(..., ge=0)
    owner: Optional[int] = Field(None, description="Owning player index, null when empty")
    capacity: int = Field(..., ge=1, le=4)

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """A seat in the game."""
    index: int
    name: str
    is_ai: bool = False
    eliminated: bool = False
    orb_count: int = 0
    is_current_turn: bool = False

    model_config = {"from_attributes": True}


class MoveInfo(BaseModel):
    """A move played during a request."""
    x: int
    y: int
    player: int
    explosions: int = 0
    explanation: Optional[str] = None


class ObjectiveInfo(BaseModel):
    type: str
    target: float = 0
    player: int = 0
    target_player: int = 1
    measure: str = "explosions"
    description: str = ""


class SummaryInfo(BaseModel):
    """Outcome handed to the results sink, echoed to the client."""
    kind: str = Field(..., description="'game' or 'puzzle'")
    points: int = 0
    achievements: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    width: int = Field(6, ge=2, le=20, description="Board columns")
    height: int = Field(9, ge=2, le=20, description="Board rows")
    player_names: list[str] = Field(
        default_factory=lambda: ["Player", "AI"],
        min_length=2,
        max_length=8,
        description="One name per seat, seat 0 moves first",
    )
    ai_seats: list[int] = Field(default_factory=lambda: [1], description="Seats played by the AI")
    ai_difficulty: Optional[int] = Field(None, ge=1, le=5, description="AI level 1-5")
    seed: Optional[int] = Field(None, description="Seed for reproducible AI choices")


class MoveRequest(BaseModel):
    """A human move."""
    x: int = Field(..., ge=0, description="Column")
    y: int = Field(..., ge=0, description="Row")


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Full game state."""
    game_id: str
    width: int
    height: int
    board: list[list[CellInfo]]
    players: list[PlayerInfo]
    current_player: int
    turn: int
    status: GameStatus
    winner: Optional[int] = None
    moves_played: int = 0
    can_undo: bool = False
    ai_difficulty: Optional[int] = None

    model_config = {"from_attributes": True}


class MoveResponse(BaseModel):
    """Result of a human move and the AI replies that followed it."""
    success: bool
    game: GameStateResponse
    moves: list[MoveInfo] = Field(default_factory=list)
    changes: list[str] = Field(default_factory=list)
    explosions: int = 0
    summary: Optional[SummaryInfo] = None


class PuzzleInfo(BaseModel):
    """Puzzle metadata for listings."""
    puzzle_id: str
    title: str
    category: str
    difficulty: int
    summary: str = ""
    width: int
    height: int
    max_moves: int
    opponent: str
    objectives: list[ObjectiveInfo] = Field(default_factory=list)
    hint_count: int = 0
    difficulty_score: float = 0.0
    difficulty_tier: str = ""


class PuzzleListResponse(BaseModel):
    puzzles: list[PuzzleInfo]
    count: int


class RunStatsInfo(BaseModel):
    explosions_created: int = 0
    chain_reactions_triggered: int = 0
    max_chain_length: int = 0
    max_chain_rounds: int = 0
    corners_controlled: int = 0
    moves_played: int = 0
    turn: int = 0


class PuzzleRunResponse(BaseModel):
    """State of a puzzle run."""
    run_id: str
    puzzle_id: str
    status: PuzzleRunStatus
    board: list[list[CellInfo]]
    stats: RunStatsInfo
    moves_left: int
    progress: float = Field(..., ge=0.0, le=100.0, description="Percent of objectives met")
    hints_used: int = 0
    last_opponent_move: Optional[tuple[int, int]] = None
    summary: Optional[SummaryInfo] = None


class HintResponse(BaseModel):
    run_id: str
    hint: Optional[str] = None
    hints_used: int = 0


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error details")
    api_version: str = "v1"


class GameListResponse(BaseModel):
    games: list[str]
    count: int


class EndGameResponse(BaseModel):
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
