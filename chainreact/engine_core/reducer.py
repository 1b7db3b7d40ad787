"""
Reducer - Applies moves to a game run.

The reducer is the single point of run mutation.
All changes must go through place_orb() and the run controls.

Design principles:
- Pure function: (run, move) -> MoveResult
- Validates before applying
- Gameplay rejections are results, not exceptions
- Delegates the physics to the cascade module
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
import logging

from .board import Board, can_place_orb, create_board
from .cascade import apply_move, resolve_cascade
from .state import GameRun, GameStatus, Player, check_elimination
from .action import ErrorCode, Move, MoveResult

logger = logging.getLogger(__name__)


def start_run(
    board: Board,
    player_names: Iterable[str],
    ai_players: Iterable[int] = (),
    game_id: str = "",
) -> GameRun:
    """
    Start a run on an existing board (used for puzzles).

    Raises:
        ValueError: If fewer than two players are named
    """
    names = list(player_names)
    if len(names) < 2:
        raise ValueError(f"A game needs at least 2 players, got {len(names)}")
    ai = set(ai_players)
    players = [Player(index=i, name=name, is_ai=i in ai) for i, name in enumerate(names)]
    return GameRun(board=board, players=players, game_id=game_id)


def new_game(
    width: int,
    height: int,
    player_names: Iterable[str],
    ai_players: Iterable[int] = (),
    game_id: str = "",
) -> GameRun:
    """Create a run on an empty board. Player 0 moves first, turn 1."""
    return start_run(create_board(width, height), player_names, ai_players, game_id)


@dataclass
class Reducer:
    """
    Reducer applies moves to a game run.

    Stateless - all state is in GameRun.
    grace_orbs and max_rounds override the elimination window and the
    cascade round cap.
    """
    grace_orbs: int | None = None
    max_rounds: int | None = None

    def place_orb(self, run: GameRun, move: Move, keep_turn: bool = False) -> MoveResult:
        """
        Place an orb, resolve the cascade and advance the run.

        With keep_turn the current seat does not advance (puzzle mode).
        """
        validation_error = self._validate_move(run, move)
        if validation_error:
            return validation_error

        placed = apply_move(run.board, move.x, move.y, move.player)
        cascade = resolve_cascade(placed, max_rounds=self.max_rounds)
        board = cascade.final_board

        was_out = {p.index for p in run.players if p.eliminated}
        out = set(check_elimination(board, run.players, self.grace_orbs))
        newly_out = sorted(out - was_out)
        players = [p.with_eliminated() if p.index in newly_out else p for p in run.players]

        changes = [f"{run.current_player.name} placed an orb at ({move.x}, {move.y})"]
        if cascade.had_explosion:
            changes.append(
                f"{cascade.explosion_count} explosion(s) over {cascade.round_count} round(s)"
            )
        for index in newly_out:
            logger.info("Player %d eliminated on turn %d", index, run.turn)
            changes.append(f"{players[index].name} was eliminated")

        new_run = run._copy_with(
            board=board,
            players=players,
            turn=run.turn + 1,
            move_history=run.move_history + [move],
            last_cascade=cascade,
        )

        active = new_run.active_players
        if len(active) <= 1:
            winner = active[0].index if active else None
            new_run = new_run._copy_with(status=GameStatus.GAME_OVER, winner=winner)
            logger.info("Game over after %d moves, winner: %s", len(new_run.move_history), winner)
            changes.append("Game over")
        elif not keep_turn:
            new_run = new_run._copy_with(current_player_idx=new_run.next_active_index())

        return MoveResult.success_with_state(
            new_run,
            cascade=cascade,
            eliminated=newly_out,
            changes=changes,
        )

    def _validate_move(self, run: GameRun, move: Move) -> MoveResult | None:
        """Return a failure result if the move is not allowed, None if it is."""
        if run.status != GameStatus.PLAYING:
            return MoveResult.failure(
                f"Game is {run.status.value} - no moves allowed",
                ErrorCode.GAME_NOT_ACTIVE,
            )

        mover = run.get_player(move.player)
        if mover is None:
            return MoveResult.failure(f"Player {move.player} not found", ErrorCode.ILLEGAL_MOVE)
        if mover.eliminated:
            return MoveResult.failure(
                f"{mover.name} has been eliminated",
                ErrorCode.PLAYER_ELIMINATED,
            )
        if move.player != run.current_player.index:
            return MoveResult.failure(f"Not {mover.name}'s turn", ErrorCode.NOT_YOUR_TURN)

        if not can_place_orb(run.board, move.x, move.y, move.player):
            return MoveResult.failure(
                f"{mover.name} cannot place an orb at ({move.x}, {move.y})",
                ErrorCode.ILLEGAL_MOVE,
            )
        return None

    def pause(self, run: GameRun) -> MoveResult:
        if run.status != GameStatus.PLAYING:
            return MoveResult.failure("Only a running game can be paused", ErrorCode.GAME_NOT_ACTIVE)
        return MoveResult.success_with_state(
            run._copy_with(status=GameStatus.PAUSED), changes=["Game paused"]
        )

    def resume(self, run: GameRun) -> MoveResult:
        if run.status != GameStatus.PAUSED:
            return MoveResult.failure("Only a paused game can be resumed", ErrorCode.GAME_NOT_ACTIVE)
        return MoveResult.success_with_state(
            run._copy_with(status=GameStatus.PLAYING), changes=["Game resumed"]
        )

    def restart(self, run: GameRun) -> MoveResult:
        """Empty the board and bring every player back. Allowed in any status."""
        players = [Player(index=p.index, name=p.name, is_ai=p.is_ai) for p in run.players]
        fresh = GameRun(
            board=create_board(run.board.width, run.board.height),
            players=players,
            game_id=run.game_id,
        )
        return MoveResult.success_with_state(fresh, changes=["Game restarted"])


_default = Reducer()


def place_orb(run: GameRun, move: Move, keep_turn: bool = False) -> MoveResult:
    """
    Convenience function to apply a move with the default reducer.
    """
    return _default.place_orb(run, move, keep_turn)


def pause(run: GameRun) -> MoveResult:
    return _default.pause(run)


def resume(run: GameRun) -> MoveResult:
    return _default.resume(run)


def restart(run: GameRun) -> MoveResult:
    return _default.restart(run)
