"""
Results - Outcome summaries and the pluggable sink that receives them.

The core never depends on where results go. A host plugs in a ResultSink
(ledger, database, analytics); the engine hands it a plain summary once
per finished game or puzzle and carries on whatever the sink does.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from ..engine_core.state import GameRun

logger = logging.getLogger(__name__)

AI_WIN_POINTS = 50
AI_LOSS_POINTS = 10


class Achievement:
    """Achievement identifiers handed to the sink."""
    AI_VICTORY = "AI_VICTORY"
    PUZZLE_FIRST = "PUZZLE_FIRST"
    PUZZLE_ADVANCED = "PUZZLE_ADVANCED"
    PUZZLE_SPEED_DEMON = "PUZZLE_SPEED_DEMON"
    PUZZLE_PERFECT = "PUZZLE_PERFECT"


@dataclass
class GameSummary:
    """Outcome of a finished game."""
    game_id: str
    winner: int | None
    winner_name: str | None
    human_won: bool
    vs_ai: bool
    moves_played: int
    points: int = 0
    achievements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "game", **asdict(self)}


@dataclass
class PuzzleSummary:
    """Outcome of a finished puzzle run (completed or failed)."""
    run_id: str
    puzzle_id: str
    completed: bool
    elapsed_seconds: float
    hints_used: int
    moves_played: int
    points: int = 0
    achievements: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "puzzle", **asdict(self)}


def summarize_game(run: GameRun, human_player: int = 0) -> GameSummary:
    """
    Summarize a finished game.

    Against the AI a human win earns AI_WIN_POINTS and AI_VICTORY, a loss
    earns AI_LOSS_POINTS. Games without an AI seat earn nothing.
    """
    vs_ai = any(p.is_ai for p in run.players)
    human_won = run.winner == human_player
    winner = run.get_player(run.winner) if run.winner is not None else None

    points = 0
    achievements: list[str] = []
    if vs_ai:
        if human_won:
            points = AI_WIN_POINTS
            achievements.append(Achievement.AI_VICTORY)
        else:
            points = AI_LOSS_POINTS

    return GameSummary(
        game_id=run.game_id,
        winner=run.winner,
        winner_name=winner.name if winner else None,
        human_won=human_won,
        vs_ai=vs_ai,
        moves_played=len(run.move_history),
        points=points,
        achievements=achievements,
    )


class ResultSink(ABC):
    """
    Abstract destination for outcome summaries.

    Implementations may fail; publish_result() isolates the core from that.
    """

    @abstractmethod
    def record(self, summary: GameSummary | PuzzleSummary) -> None:
        pass


class NullResultSink(ResultSink):
    """Discards every summary."""

    def record(self, summary: GameSummary | PuzzleSummary) -> None:
        return None


class InMemoryResultSink(ResultSink):
    """Keeps summaries in a list. Used by tests and the CLI."""

    def __init__(self):
        self.records: list[GameSummary | PuzzleSummary] = []

    def record(self, summary: GameSummary | PuzzleSummary) -> None:
        self.records.append(summary)

    def total_points(self) -> int:
        return sum(r.points for r in self.records)

    def achievements(self) -> list[str]:
        unlocked: list[str] = []
        for r in self.records:
            unlocked.extend(a for a in r.achievements if a not in unlocked)
        return unlocked


def publish_result(sink: ResultSink | None, summary: GameSummary | PuzzleSummary) -> bool:
    """
    Hand a summary to the sink exactly once.

    Sink failures are logged and swallowed. Returns True if the sink
    accepted the summary.
    """
    if sink is None:
        return False
    try:
        sink.record(summary)
    except Exception:
        logger.exception("Result sink %s failed to record %s", type(sink).__name__, summary)
        return False
    return True
