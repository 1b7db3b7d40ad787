"""
FastAPI Application - REST API for Chain Reaction clients.

Endpoints:
    GET    /api/v1/health                       Health check
    POST   /api/v1/games                        Create a game
    GET    /api/v1/games                        List active games
    GET    /api/v1/games/{id}                   Get game state
    DELETE /api/v1/games/{id}                   End a game
    POST   /api/v1/games/{id}/moves             Human move (AI replies automatically)
    POST   /api/v1/games/{id}/undo              Undo the last human move
    POST   /api/v1/games/{id}/pause             Pause
    POST   /api/v1/games/{id}/resume            Resume
    POST   /api/v1/games/{id}/restart           Restart on an empty board
    GET    /api/v1/puzzles                      List puzzles
    POST   /api/v1/puzzles/{pid}/runs           Start a puzzle run
    GET    /api/v1/puzzle-runs/{rid}            Get run state
    POST   /api/v1/puzzle-runs/{rid}/moves      Protagonist move (opponent replies)
    POST   /api/v1/puzzle-runs/{rid}/hint       Reveal the next hint
    POST   /api/v1/puzzle-runs/{rid}/restart    Restart the run

All requests and responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union

from .. import config

API_VERSION = "1.0.0"

# HTTP status per error code; anything else is a 400
_STATUS_CODES = {
    "GAME_NOT_FOUND": 404,
    "PUZZLE_NOT_FOUND": 404,
    "RUN_NOT_FOUND": 404,
    "NOT_YOUR_TURN": 409,
    "GAME_NOT_ACTIVE": 409,
    "INTERNAL_ERROR": 500,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateGameRequest,
        MoveRequest,
        # Response models
        GameStateResponse,
        MoveResponse,
        PuzzleListResponse,
        PuzzleRunResponse,
        HintResponse,
        ErrorResponse,
        GameListResponse,
        EndGameResponse,
        HealthResponse,
    )

    app = FastAPI(
        title="Chain Reaction API",
        description="""
Chain Reaction engine - orb placement, cascades, AI opponents and puzzles.

## Turn Flow

`POST /games/{id}/moves` applies the human move, resolves the cascade and
lets every AI seat reply before returning. The response lists every move
played during the call.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `PUZZLE_NOT_FOUND` | Puzzle ID not in the library |
| `RUN_NOT_FOUND` | Puzzle run does not exist |
| `ILLEGAL_MOVE` | Cell out of bounds or owned by another player |
| `NOT_YOUR_TURN` | Another seat is to move |
| `GAME_NOT_ACTIVE` | Game is paused or over |
| `VALIDATION_ERROR` | Bad request parameters |
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=_STATUS_CODES.get(error.error_code.value, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    error_responses = {
        400: {"model": ErrorResponse, "description": "Invalid parameters or illegal move"},
        404: {"model": ErrorResponse, "description": "Not found"},
        409: {"model": ErrorResponse, "description": "Not your turn or game not active"},
    }

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameStateResponse, JSONResponse]:
        """
        Create a new game.

        AI seats that move before the first human seat have already played
        when the response arrives.
        """
        return respond(api_service.create_game(request))

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> GameListResponse:
        games = api_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game(game_id))

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(
        game_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndGameResponse:
        """End a game and release its session."""
        success = api_service.end_game(game_id, reason)
        return EndGameResponse(success=success, game_id=game_id)

    @app.post(
        "/api/v1/games/{game_id}/moves",
        response_model=MoveResponse,
        responses=error_responses,
        tags=["Games"],
        summary="Play a move",
    )
    async def play_move(game_id: str, request: MoveRequest) -> Union[MoveResponse, JSONResponse]:
        """Place an orb for the seat to move. AI replies are included."""
        return respond(api_service.play_move(game_id, request))

    @app.post(
        "/api/v1/games/{game_id}/undo",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Games"],
        summary="Undo the last human move",
    )
    async def undo(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.undo(game_id))

    @app.post(
        "/api/v1/games/{game_id}/pause",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Games"],
        summary="Pause a game",
    )
    async def pause(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.pause(game_id))

    @app.post(
        "/api/v1/games/{game_id}/resume",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Games"],
        summary="Resume a paused game",
    )
    async def resume(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.resume(game_id))

    @app.post(
        "/api/v1/games/{game_id}/restart",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Restart a game",
    )
    async def restart(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.restart(game_id))

    # =========================================================================
    # Puzzle Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/puzzles",
        response_model=PuzzleListResponse,
        tags=["Puzzles"],
        summary="List puzzles",
    )
    async def list_puzzles(
        category: Annotated[Optional[str], Query(description="Only this category")] = None,
    ) -> PuzzleListResponse:
        return api_service.list_puzzles(category)

    @app.post(
        "/api/v1/puzzles/{puzzle_id}/runs",
        response_model=PuzzleRunResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Puzzles"],
        summary="Start a puzzle run",
    )
    async def start_puzzle(puzzle_id: str) -> Union[PuzzleRunResponse, JSONResponse]:
        return respond(api_service.start_puzzle(puzzle_id))

    @app.get(
        "/api/v1/puzzle-runs/{run_id}",
        response_model=PuzzleRunResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Puzzles"],
        summary="Get puzzle run state",
    )
    async def get_puzzle_run(run_id: str) -> Union[PuzzleRunResponse, JSONResponse]:
        return respond(api_service.get_puzzle_run(run_id))

    @app.post(
        "/api/v1/puzzle-runs/{run_id}/moves",
        response_model=PuzzleRunResponse,
        responses=error_responses,
        tags=["Puzzles"],
        summary="Play a puzzle move",
    )
    async def puzzle_move(run_id: str, request: MoveRequest) -> Union[PuzzleRunResponse, JSONResponse]:
        """
        Place the protagonist's orb. The opponent's reply is applied before
        returning; `summary` is set when the move finished the run.
        """
        return respond(api_service.puzzle_move(run_id, request))

    @app.post(
        "/api/v1/puzzle-runs/{run_id}/hint",
        response_model=HintResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Puzzles"],
        summary="Reveal the next hint",
    )
    async def puzzle_hint(run_id: str) -> Union[HintResponse, JSONResponse]:
        return respond(api_service.puzzle_hint(run_id))

    @app.post(
        "/api/v1/puzzle-runs/{run_id}/restart",
        response_model=PuzzleRunResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Puzzles"],
        summary="Restart a puzzle run",
    )
    async def restart_puzzle(run_id: str) -> Union[PuzzleRunResponse, JSONResponse]:
        return respond(api_service.restart_puzzle(run_id))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="chainreact-engine",
            version=API_VERSION,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Chain Reaction API",
            "version": API_VERSION,
            "environment": config.CHAINREACT_ENV,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn --factory chainreact.api.app:create_app
