"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a host starts a game
- Holds the current game run, bots and undo history
- Runs AI replies after each human move
- Publishes the outcome to a results sink when the game ends

Sessions are EPHEMERAL: nothing is persisted by the engine.
"""

from .results import (
    Achievement,
    GameSummary,
    PuzzleSummary,
    ResultSink,
    NullResultSink,
    InMemoryResultSink,
    publish_result,
    summarize_game,
)
from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "Achievement",
    "GameSummary",
    "PuzzleSummary",
    "ResultSink",
    "NullResultSink",
    "InMemoryResultSink",
    "publish_result",
    "summarize_game",
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
