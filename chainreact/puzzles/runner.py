"""
Puzzle Runner - Plays a puzzle from load to completion.

A turn in a puzzle:
1. The protagonist (player 0) places an orb
2. Statistics absorb the resulting cascade
3. The opponent replies: the scripted move for this turn (if still
   legal) or the AI's choice
4. Completed as soon as every objective holds; failed when the move
   limit is reached or the protagonist is wiped out

Finished runs are summarized (points, achievements) and handed to the
results sink.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable
import logging
import random
import time
import uuid

from ..engine_core.action import ErrorCode, Move
from ..engine_core.board import can_place_orb
from ..engine_core.reducer import Reducer, start_run
from ..engine_core.state import GameRun
from ..bots.minimax_bot import MinimaxBot
from ..bots.personality import get_profile
from ..session.results import Achievement, PuzzleSummary, ResultSink, publish_result
from .objectives import is_puzzle_completed, next_hint, progress
from .puzzle import OpponentType, Puzzle, RunStats
from .library import get_puzzle

logger = logging.getLogger(__name__)

PROTAGONIST = 0
OPPONENT = 1

ADVANCED_DIFFICULTY = 3
SPEED_DEMON_SECONDS = 30


class PuzzleStatus(Enum):
    PLAYING = "playing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PuzzleRun:
    """
    One attempt at a puzzle.

    Created by PuzzleRunner.load(), advanced by make_move(), reset by
    restart().
    """
    run_id: str
    puzzle: Puzzle
    game: GameRun
    started_at: float
    stats: RunStats = field(default_factory=RunStats)
    status: PuzzleStatus = PuzzleStatus.PLAYING
    hint_level: int = 0
    hints_used: int = 0
    finished_at: float | None = None
    last_opponent_move: tuple[int, int] | None = None

    @property
    def moves_left(self) -> int:
        return max(0, self.puzzle.max_moves - self.stats.moves_played)

    @property
    def is_finished(self) -> bool:
        return self.status != PuzzleStatus.PLAYING

    def elapsed_seconds(self, now: float | None = None) -> float:
        end = self.finished_at if self.finished_at is not None else now
        if end is None:
            end = time.time()
        return max(0.0, end - self.started_at)

    def progress(self) -> float:
        return progress(self.game.board, self.game.players, list(self.puzzle.objectives), self.stats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "puzzle_id": self.puzzle.puzzle_id,
            "status": self.status.value,
            "board": self.game.board.to_rows(),
            "stats": self.stats.to_dict(),
            "moves_left": self.moves_left,
            "progress": self.progress(),
            "hints_used": self.hints_used,
            "last_opponent_move": self.last_opponent_move,
        }


@dataclass
class PuzzleProgress:
    """Per-puzzle record kept across attempts."""
    attempts: int = 0
    completed: bool = False
    best_seconds: float | None = None
    hints_used: int = 0


@dataclass
class PuzzleMoveResult:
    """
    Result of a protagonist move in a puzzle.

    summary is set when this move finished the run.
    """
    success: bool
    run: PuzzleRun | None = None
    error: str | None = None
    error_code: str | None = None
    opponent_move: tuple[int, int] | None = None
    summary: PuzzleSummary | None = None

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> PuzzleMoveResult:
        return cls(success=False, error=error, error_code=error_code)


def puzzle_points(difficulty: int, seconds: float, hints_used: int) -> int:
    """Points for a completed puzzle: base by difficulty, time bonus, hint penalty."""
    base = difficulty * 10
    time_bonus = max(0, 20 - int(seconds) // 10)
    return max(5, base + time_bonus - hints_used * 2)


class PuzzleRunner:
    """
    Drives puzzle runs and keeps cross-run progress.

    Usage:
        runner = PuzzleRunner(sink=InMemoryResultSink())
        run = runner.load("tutorial_001")
        result = runner.make_move(run, 2, 1)
        print(result.run.status, result.summary)
    """

    def __init__(
        self,
        sink: ResultSink | None = None,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        reducer: Reducer | None = None,
    ):
        self.sink = sink
        self.clock = clock
        self.rng = rng or random.Random()
        self.reducer = reducer or Reducer()
        self.completed_puzzles: set[str] = set()
        self.unlocked: set[str] = set()
        self.progress: dict[str, PuzzleProgress] = {}

    def load(self, puzzle: Puzzle | str, run_id: str | None = None) -> PuzzleRun:
        """
        Start a run of a puzzle (or a library puzzle ID).

        Raises:
            KeyError: If no library puzzle has that ID
        """
        if isinstance(puzzle, str):
            found = get_puzzle(puzzle)
            if found is None:
                raise KeyError(f"Puzzle {puzzle} not found")
            puzzle = found

        opponent_name = "AI" if puzzle.opponent == OpponentType.AI else "Opponent"
        game = start_run(
            puzzle.build_board(),
            ["You", opponent_name],
            ai_players=[OPPONENT] if puzzle.opponent == OpponentType.AI else [],
            game_id=puzzle.puzzle_id,
        )
        record = self.progress.setdefault(puzzle.puzzle_id, PuzzleProgress())
        record.attempts += 1

        logger.info("Loaded puzzle %s (attempt %d)", puzzle.puzzle_id, record.attempts)
        return PuzzleRun(
            run_id=run_id or str(uuid.uuid4()),
            puzzle=puzzle,
            game=game,
            started_at=self.clock(),
        )

    def restart(self, run: PuzzleRun) -> PuzzleRun:
        """Fresh attempt at the same puzzle, keeping the run ID."""
        return self.load(run.puzzle, run_id=run.run_id)

    def use_hint(self, run: PuzzleRun) -> tuple[PuzzleRun, str | None]:
        """
        Reveal the next authored hint.

        Once the authored hints are exhausted, returns the objective hint
        for the first unmet goal without counting it as a hint used.
        """
        if run.hint_level < len(run.puzzle.hints):
            hint = run.puzzle.hints[run.hint_level]
            return replace(run, hint_level=run.hint_level + 1, hints_used=run.hints_used + 1), hint
        board, players = run.game.board, run.game.players
        return run, next_hint(board, players, list(run.puzzle.objectives), run.stats)

    def make_move(self, run: PuzzleRun, x: int, y: int) -> PuzzleMoveResult:
        """Play the protagonist's move at (x, y) and the opponent's reply."""
        if run.is_finished:
            return PuzzleMoveResult.failure(
                f"Puzzle run is {run.status.value}", ErrorCode.GAME_NOT_ACTIVE
            )

        result = self.reducer.place_orb(run.game, Move(x, y, PROTAGONIST), keep_turn=True)
        if not result.success:
            return PuzzleMoveResult.failure(result.error, result.error_code)

        game = result.new_state
        stats = run.stats.after_move(result.cascade, game.board, PROTAGONIST)

        reply = None
        if not game.is_over:
            game, reply = self._opponent_reply(run.puzzle, game, stats.moves_played)
        stats = stats.end_turn(game.board, PROTAGONIST)

        run = replace(run, game=game, stats=stats, last_opponent_move=reply)
        run = self._decide(run)

        summary = None
        if run.is_finished:
            summary = self._finish(run)
        return PuzzleMoveResult(success=True, run=run, opponent_move=reply, summary=summary)

    def _opponent_reply(
        self,
        puzzle: Puzzle,
        game: GameRun,
        turn: int,
    ) -> tuple[GameRun, tuple[int, int] | None]:
        """Apply the opponent's reply, if it has one. The protagonist keeps the turn."""
        if puzzle.opponent == OpponentType.STATIC:
            scripted = puzzle.scripted_reply(turn)
            if scripted is None:
                return game, None
            if not can_place_orb(game.board, scripted.x, scripted.y, OPPONENT):
                logger.debug("Skipping illegal scripted reply %s in %s", scripted, puzzle.puzzle_id)
                return game, None
            move = (scripted.x, scripted.y)
        else:
            bot = MinimaxBot(profile=get_profile(puzzle.ai_difficulty), player=OPPONENT, rng=self.rng)
            move = bot.select_move(game.board, game.players).move
            if move is None:
                return game, None

        result = self.reducer.place_orb(
            game.with_turn_of(OPPONENT), Move(move[0], move[1], OPPONENT), keep_turn=True
        )
        if not result.success:
            return game, None
        return result.new_state.with_turn_of(PROTAGONIST), move

    def _decide(self, run: PuzzleRun) -> PuzzleRun:
        board, players = run.game.board, run.game.players
        if is_puzzle_completed(board, players, list(run.puzzle.objectives), run.stats):
            return replace(run, status=PuzzleStatus.COMPLETED, finished_at=self.clock())

        # The run cannot continue once the underlying game has ended
        protagonist_out = players[PROTAGONIST].eliminated or board.orbs_of(PROTAGONIST) == 0
        out_of_moves = run.stats.moves_played >= run.puzzle.max_moves
        if out_of_moves or protagonist_out or run.game.is_over:
            return replace(run, status=PuzzleStatus.FAILED, finished_at=self.clock())
        return run

    def _finish(self, run: PuzzleRun) -> PuzzleSummary:
        """Record progress, award points and achievements, publish the summary."""
        seconds = run.elapsed_seconds()
        record = self.progress.setdefault(run.puzzle.puzzle_id, PuzzleProgress())
        completed = run.status == PuzzleStatus.COMPLETED

        points = 0
        achievements: list[str] = []
        if completed:
            record.completed = True
            record.hints_used = run.hints_used
            if record.best_seconds is None or seconds < record.best_seconds:
                record.best_seconds = seconds
            self.completed_puzzles.add(run.puzzle.puzzle_id)

            points = puzzle_points(run.puzzle.difficulty, seconds, run.hints_used)
            candidates = []
            if len(self.completed_puzzles) == 1:
                candidates.append(Achievement.PUZZLE_FIRST)
            if run.puzzle.difficulty >= ADVANCED_DIFFICULTY:
                candidates.append(Achievement.PUZZLE_ADVANCED)
            if seconds < SPEED_DEMON_SECONDS:
                candidates.append(Achievement.PUZZLE_SPEED_DEMON)
            if run.hints_used == 0:
                candidates.append(Achievement.PUZZLE_PERFECT)
            achievements = [a for a in candidates if a not in self.unlocked]
            self.unlocked.update(achievements)
            logger.info("Puzzle %s completed in %.1fs for %d points", run.puzzle.puzzle_id, seconds, points)
        else:
            logger.info("Puzzle %s failed after %d moves", run.puzzle.puzzle_id, run.stats.moves_played)

        summary = PuzzleSummary(
            run_id=run.run_id,
            puzzle_id=run.puzzle.puzzle_id,
            completed=completed,
            elapsed_seconds=seconds,
            hints_used=run.hints_used,
            moves_played=run.stats.moves_played,
            points=points,
            achievements=achievements,
            stats=run.stats.to_dict(),
        )
        publish_result(self.sink, summary)
        return summary
