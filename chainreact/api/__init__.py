"""
API Module - HTTP interface.

Exposes the engine via REST API. A client:
1. Creates a game (board size, seats, AI level)
2. Posts moves; AI seats reply in the same request
3. Undoes, pauses, resumes or restarts the game
4. Lists puzzles, starts runs and plays them with hints

All state is held in process memory. No user accounts.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    MoveRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    PuzzleListResponse,
    PuzzleRunResponse,
    HintResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    CellInfo,
    PlayerInfo,
    PuzzleInfo,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "MoveRequest",
    # Responses
    "GameStateResponse",
    "MoveResponse",
    "PuzzleListResponse",
    "PuzzleRunResponse",
    "HintResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "CellInfo",
    "PlayerInfo",
    "PuzzleInfo",
    # Enums
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
