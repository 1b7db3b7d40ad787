"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages game sessions and puzzle runs
3. Converts engine values into response models
4. Reports failures as ErrorResponse values, never raises for bad input

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from .schemas import (
    # Requests
    CreateGameRequest,
    MoveRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    PuzzleInfo,
    PuzzleListResponse,
    PuzzleRunResponse,
    HintResponse,
    ErrorResponse,
    # Shared
    CellInfo,
    PlayerInfo,
    MoveInfo,
    RunStatsInfo,
    SummaryInfo,
    # Enums
    ErrorCode,
)
from ..engine_core.action import ErrorCode as EngineErrorCode
from ..engine_core.board import Board
from ..engine_core.errors import ChainReactError
from ..puzzles import PuzzleRun, PuzzleRunner, puzzles_by_category
from ..puzzles.library import ALL_PUZZLES
from ..session import GameLoop, InMemoryResultSink, ResultSink, Session, SessionManager

logger = logging.getLogger(__name__)

# Engine rejection codes as seen by API clients
_ENGINE_CODES = {
    EngineErrorCode.GAME_NOT_ACTIVE: ErrorCode.GAME_NOT_ACTIVE,
    EngineErrorCode.NOT_YOUR_TURN: ErrorCode.NOT_YOUR_TURN,
    EngineErrorCode.PLAYER_ELIMINATED: ErrorCode.ILLEGAL_MOVE,
    EngineErrorCode.ILLEGAL_MOVE: ErrorCode.ILLEGAL_MOVE,
}


def to_error_code(engine_code: str | None) -> ErrorCode:
    return _ENGINE_CODES.get(engine_code, ErrorCode.VALIDATION_ERROR)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a game against the AI
        state = service.create_game(CreateGameRequest(width=6, height=9))

        # Play a move; the AI replies in the same call
        response = service.play_move(state.game_id, MoveRequest(x=0, y=0))

        # Puzzles
        run = service.start_puzzle("tutorial_001")
    """
    sink: ResultSink = field(default_factory=InMemoryResultSink)
    session_manager: SessionManager = None  # type: ignore
    puzzle_runner: PuzzleRunner = None  # type: ignore

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    # Puzzle runs by run ID
    _puzzle_runs: dict[str, PuzzleRun] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(sink=self.sink)
        if self.puzzle_runner is None:
            self.puzzle_runner = PuzzleRunner(sink=self.sink)

    # =========================================================================
    # Games
    # =========================================================================

    def create_game(self, request: CreateGameRequest) -> GameStateResponse | ErrorResponse:
        """
        Create a new game session.

        AI seats that move before the first human seat play immediately.
        """
        try:
            session = self.session_manager.create_session(
                width=request.width,
                height=request.height,
                player_names=request.player_names,
                ai_seats=request.ai_seats,
                ai_difficulty=request.ai_difficulty,
                seed=request.seed,
            )
        except (ValueError, ChainReactError) as e:
            logger.info("Rejected game creation: %s", e)
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        game_loop = GameLoop(session, sink=self.sink)
        self._game_loops[session.session_id] = game_loop
        game_loop.run_ai_turns()
        return self._build_game_state(session)

    def get_game(self, game_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._game_not_found(game_id)
        return self._build_game_state(session)

    def end_game(self, game_id: str, reason: str = "user_ended") -> bool:
        self._game_loops.pop(game_id, None)
        return self.session_manager.end_session(game_id, reason)

    def list_games(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def play_move(self, game_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """
        Apply a human move. The AI seats reply before this returns.
        """
        session = self.session_manager.get_session(game_id)
        game_loop = self._game_loops.get(game_id)
        if not session or not game_loop:
            return self._game_not_found(game_id)

        result = game_loop.play_human_move(request.x, request.y)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Move rejected",
                error_code=to_error_code(result.error_code),
                details={"x": request.x, "y": request.y},
            )

        return MoveResponse(
            success=True,
            game=self._build_game_state(session),
            moves=[MoveInfo(**m) for m in result.moves],
            changes=result.changes,
            explosions=result.explosions,
            summary=self._summary_info(result.summary),
        )

    def undo(self, game_id: str) -> GameStateResponse | ErrorResponse:
        """Take back the last human move together with the AI replies to it."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._game_not_found(game_id)
        if not session.undo():
            return ErrorResponse(error="Nothing to undo", error_code=ErrorCode.VALIDATION_ERROR)
        return self._build_game_state(session)

    def pause(self, game_id: str) -> GameStateResponse | ErrorResponse:
        return self._control(game_id, "pause")

    def resume(self, game_id: str) -> GameStateResponse | ErrorResponse:
        return self._control(game_id, "resume")

    def restart(self, game_id: str) -> GameStateResponse | ErrorResponse:
        """Empty board, same players. Undo history and the published flag reset."""
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._game_not_found(game_id)

        result = session.reducer.restart(session.run)
        session.run = result.new_state
        session.history.clear()
        session.summary_published = False
        session.sync_state()
        logger.info("Restarted game %s", game_id)
        self._game_loops[game_id].run_ai_turns()
        return self._build_game_state(session)

    def _control(self, game_id: str, action: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._game_not_found(game_id)

        result = getattr(session.reducer, action)(session.run)
        if not result.success:
            return ErrorResponse(error=result.error, error_code=to_error_code(result.error_code))
        session.run = result.new_state
        session.sync_state()
        if action == "resume":
            # An AI seat may have been due when the game was paused
            self._game_loops[game_id].run_ai_turns()
        return self._build_game_state(session)

    # =========================================================================
    # Puzzles
    # =========================================================================

    def list_puzzles(self, category: str | None = None) -> PuzzleListResponse:
        puzzles = puzzles_by_category(category) if category else list(ALL_PUZZLES)
        infos = [PuzzleInfo(**p.to_dict()) for p in puzzles]
        return PuzzleListResponse(puzzles=infos, count=len(infos))

    def start_puzzle(self, puzzle_id: str) -> PuzzleRunResponse | ErrorResponse:
        try:
            run = self.puzzle_runner.load(puzzle_id)
        except KeyError:
            return ErrorResponse(
                error=f"Puzzle {puzzle_id} not found",
                error_code=ErrorCode.PUZZLE_NOT_FOUND,
            )
        self._puzzle_runs[run.run_id] = run
        return self._build_puzzle_run(run)

    def get_puzzle_run(self, run_id: str) -> PuzzleRunResponse | ErrorResponse:
        run = self._puzzle_runs.get(run_id)
        if run is None:
            return self._run_not_found(run_id)
        return self._build_puzzle_run(run)

    def puzzle_move(self, run_id: str, request: MoveRequest) -> PuzzleRunResponse | ErrorResponse:
        run = self._puzzle_runs.get(run_id)
        if run is None:
            return self._run_not_found(run_id)

        result = self.puzzle_runner.make_move(run, request.x, request.y)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Move rejected",
                error_code=to_error_code(result.error_code),
                details={"x": request.x, "y": request.y},
            )
        self._puzzle_runs[run_id] = result.run
        return self._build_puzzle_run(result.run, self._summary_info(result.summary))

    def puzzle_hint(self, run_id: str) -> HintResponse | ErrorResponse:
        run = self._puzzle_runs.get(run_id)
        if run is None:
            return self._run_not_found(run_id)
        run, hint = self.puzzle_runner.use_hint(run)
        self._puzzle_runs[run_id] = run
        return HintResponse(run_id=run_id, hint=hint, hints_used=run.hints_used)

    def restart_puzzle(self, run_id: str) -> PuzzleRunResponse | ErrorResponse:
        run = self._puzzle_runs.get(run_id)
        if run is None:
            return self._run_not_found(run_id)
        run = self.puzzle_runner.restart(run)
        self._puzzle_runs[run_id] = run
        return self._build_puzzle_run(run)

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _build_board(self, board: Board) -> list[list[CellInfo]]:
        return [[CellInfo(**cell) for cell in row] for row in board.to_rows()]

    def _build_game_state(self, session: Session) -> GameStateResponse:
        """Build complete game state response."""
        run = session.run
        players = [
            PlayerInfo(
                **player.to_dict(),
                orb_count=run.board.orbs_of(player.index),
                is_current_turn=player.index == run.current_player_idx and not run.is_over,
            )
            for player in run.players
        ]
        data = run.to_dict()
        data.update(
            board=self._build_board(run.board),
            players=players,
            game_id=session.session_id,
            can_undo=bool(session.history),
            ai_difficulty=session.metadata.get("ai_difficulty") if session.bots else None,
        )
        return GameStateResponse(**data)

    def _build_puzzle_run(
        self,
        run: PuzzleRun,
        summary: SummaryInfo | None = None,
    ) -> PuzzleRunResponse:
        data = run.to_dict()
        data.update(
            board=self._build_board(run.game.board),
            stats=RunStatsInfo(**run.stats.to_dict()),
            summary=summary,
        )
        return PuzzleRunResponse(**data)

    def _summary_info(self, summary: Any) -> SummaryInfo | None:
        if summary is None:
            return None
        data = summary.to_dict()
        return SummaryInfo(
            kind=data.pop("kind"),
            points=data.pop("points"),
            achievements=data.pop("achievements"),
            details=data,
        )

    def _game_not_found(self, game_id: str) -> ErrorResponse:
        return ErrorResponse(error=f"Game {game_id} not found", error_code=ErrorCode.GAME_NOT_FOUND)

    def _run_not_found(self, run_id: str) -> ErrorResponse:
        return ErrorResponse(error=f"Puzzle run {run_id} not found", error_code=ErrorCode.RUN_NOT_FOUND)
