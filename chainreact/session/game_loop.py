"""
Game Loop - Drives a session turn by turn.

The loop:
1. Human submits a move
2. Engine validates and resolves it (cascade, eliminations)
3. AI seats reply until a human is to move or the game ends
4. On game over the outcome is summarized and published once
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING
import logging

from ..engine_core.action import ErrorCode, Move
from ..engine_core.state import GameStatus
from .results import GameSummary, ResultSink, publish_result, summarize_game

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN_MOVE = "waiting_human_move"
    RUNNING_AI = "running_ai"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a turn.

    Contains what happened, for the host to render.
    """
    success: bool
    loop_state: LoopState

    # Moves played this call, in order
    moves: list[dict[str, Any]] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)
    explosions: int = 0

    # Errors
    error: str | None = None
    error_code: str | None = None

    # Game over info
    winner: int | None = None
    summary: GameSummary | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session, sink)
        result = loop.play_human_move(3, 2)
        if not result.success:
            show_error(result.error)
        render(session.run)
    """

    def __init__(self, session: Session, sink: ResultSink | None = None):
        self.session = session
        self.sink = sink

    @property
    def state(self) -> LoopState:
        run = self.session.run
        if run.is_over:
            return LoopState.GAME_OVER
        if run.status == GameStatus.PAUSED:
            return LoopState.PAUSED
        if self.session.is_ai_turn():
            return LoopState.RUNNING_AI
        return LoopState.WAITING_HUMAN_MOVE

    def play_human_move(self, x: int, y: int) -> TurnResult:
        """
        Apply a human move for the seat to play, then run the AI replies.
        """
        session = self.session
        if session.is_ai_turn() and not session.run.is_over:
            return TurnResult(
                success=False,
                loop_state=self.state,
                error="It is the AI's turn",
                error_code=ErrorCode.NOT_YOUR_TURN,
            )

        seat = session.run.current_player.index
        snapshot = session.run
        result = session.reducer.place_orb(session.run, Move(x, y, seat))
        if not result.success:
            return TurnResult(
                success=False,
                loop_state=self.state,
                error=result.error,
                error_code=result.error_code,
            )

        session.push_snapshot(snapshot)
        session.run = result.new_state
        turn = TurnResult(success=True, loop_state=self.state)
        self._record(turn, Move(x, y, seat), result)

        self._run_ai_turns(turn)
        return self._finish(turn)

    def run_ai_turns(self, max_moves: int | None = None) -> TurnResult:
        """
        Let AI seats play until a human is to move or the game ends.

        Used to start games where an AI seat moves first and for
        AI-versus-AI matches.
        """
        turn = TurnResult(success=True, loop_state=self.state)
        self._run_ai_turns(turn, max_moves)
        return self._finish(turn)

    def _run_ai_turns(self, turn: TurnResult, max_moves: int | None = None):
        session = self.session
        played = 0
        while not session.run.is_over and session.run.status == GameStatus.PLAYING and session.is_ai_turn():
            if max_moves is not None and played >= max_moves:
                break
            seat = session.run.current_player.index
            decision = session.bots[seat].select_move(session.run.board, session.run.players)
            if decision.move is None:
                # No legal move: the reducer would reject anything, so stop
                logger.warning("AI seat %d has no legal move in session %s", seat, session.session_id)
                break
            move = Move(decision.move[0], decision.move[1], seat)
            result = session.reducer.place_orb(session.run, move)
            if not result.success:
                logger.error("AI move %s rejected: %s", move, result.error)
                break
            session.run = result.new_state
            self._record(turn, move, result, decision.explanation)
            played += 1

    def _record(self, turn: TurnResult, move: Move, result, explanation: str = ""):
        entry = move.to_dict()
        if explanation:
            entry["explanation"] = explanation
        if result.cascade is not None:
            entry["explosions"] = result.cascade.explosion_count
            turn.explosions += result.cascade.explosion_count
        turn.moves.append(entry)
        turn.changes.extend(result.state_changes)

    def _finish(self, turn: TurnResult) -> TurnResult:
        session = self.session
        session.sync_state()
        turn.loop_state = self.state
        if session.run.is_over:
            turn.winner = session.run.winner
            if not session.summary_published:
                human = next((p.index for p in session.run.players if not p.is_ai), 0)
                turn.summary = summarize_game(session.run, human_player=human)
                publish_result(self.sink, turn.summary)
                session.summary_published = True
        return turn
