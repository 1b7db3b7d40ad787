"""
Engine Core - Deterministic board model, cascade simulation and run management.

The engine is the runtime that:
1. Models the board (cells, capacity, ownership)
2. Applies moves and resolves chain reactions
3. Decides eliminations and the winner
4. Applies moves to a run via the reducer
"""

from .errors import ChainReactError, InvalidBoardError, InvalidMoveError, ObjectiveError
from .board import (
    Board,
    Cell,
    can_place_orb,
    capacity_of,
    create_board,
    legal_moves,
    neighbors,
)
from .cascade import (
    CascadeResult,
    CascadeRound,
    Explosion,
    apply_move,
    iter_cascade,
    resolve_cascade,
    settle,
    simulate_move,
)
from .state import GameRun, GameStatus, Player, check_elimination
from .action import ErrorCode, Move, MoveResult
from .reducer import Reducer, new_game, start_run, place_orb, pause, resume, restart

__all__ = [
    "ChainReactError",
    "InvalidBoardError",
    "InvalidMoveError",
    "ObjectiveError",
    "Board",
    "Cell",
    "can_place_orb",
    "capacity_of",
    "create_board",
    "legal_moves",
    "neighbors",
    "CascadeResult",
    "CascadeRound",
    "Explosion",
    "apply_move",
    "iter_cascade",
    "resolve_cascade",
    "settle",
    "simulate_move",
    "GameRun",
    "GameStatus",
    "Player",
    "check_elimination",
    "ErrorCode",
    "Move",
    "MoveResult",
    "Reducer",
    "new_game",
    "start_run",
    "place_orb",
    "pause",
    "resume",
    "restart",
]
