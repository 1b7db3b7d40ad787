"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Host creates a session (board size, players, AI seats)
2. During the game:
   - Human moves arrive through the GameLoop
   - Engine validates and resolves each move
   - AI seats reply automatically
3. Game ends → summary handed to the results sink once
4. Host ends the session → removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- A GameRun converts to plain data for hosts that want to store it
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
import logging
import random
import time
import uuid

from .. import config
from ..engine_core.reducer import Reducer, new_game
from ..engine_core.state import GameRun, GameStatus
from ..bots import BotPolicy, MinimaxBot, get_profile
from .results import ResultSink

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    PAUSED = "paused"
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class Session:
    """
    A game session.

    Contains:
    - The current GameRun
    - Bots for the AI seats
    - Undo snapshots (one per human move)
    - Session metadata
    """
    session_id: str
    run: GameRun
    created_at: float

    state: SessionState = SessionState.ACTIVE
    bots: dict[int, BotPolicy] = field(default_factory=dict)
    reducer: Reducer = field(default_factory=Reducer)
    history: deque = field(default_factory=lambda: deque(maxlen=config.UNDO_DEPTH))
    summary_published: bool = False

    # Session metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session can still take moves (paused counts as active)."""
        return self.state in {SessionState.ACTIVE, SessionState.PAUSED}

    def is_ai_turn(self) -> bool:
        return self.run.current_player.index in self.bots

    def push_snapshot(self, run: GameRun):
        """Remember a run for undo. The oldest snapshot drops past UNDO_DEPTH."""
        self.history.append(run)

    def undo(self) -> bool:
        """
        Restore the run before the last human move. False if nothing to undo.

        Undoing out of a finished game re-arms publishing, so the outcome
        the game reaches next is reported.
        """
        if not self.history:
            return False
        self.run = self.history.pop()
        if self.run.status != GameStatus.GAME_OVER:
            self.summary_published = False
        self.sync_state()
        return True

    def sync_state(self):
        """Derive the session state from the run status."""
        if self.run.status == GameStatus.GAME_OVER:
            self.state = SessionState.GAME_OVER
        elif self.run.status == GameStatus.PAUSED:
            self.state = SessionState.PAUSED
        else:
            self.state = SessionState.ACTIVE


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their bots
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, sink: ResultSink | None = None):
        self._sessions: dict[str, Session] = {}
        self.sink = sink

    def create_session(
        self,
        width: int,
        height: int,
        player_names: Iterable[str] = ("Player", "AI"),
        ai_seats: Iterable[int] = (1,),
        ai_difficulty: int | None = None,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            width, height: Board dimensions
            player_names: One name per seat; seat 0 moves first
            ai_seats: Seats played by the minimax bot
            ai_difficulty: AI level 1-5 (default: config.DEFAULT_DIFFICULTY)
            seed: Seed for the bots' random choices

        Returns:
            New Session ready to play

        Raises:
            InvalidBoardError: For bad dimensions
            ValueError: For fewer than 2 players, a bad AI seat or level
        """
        names = list(player_names)
        seats = sorted(set(ai_seats))
        for seat in seats:
            if not 0 <= seat < len(names):
                raise ValueError(f"AI seat {seat} is not a seat in a {len(names)}-player game")

        profile = get_profile(ai_difficulty if ai_difficulty is not None else config.DEFAULT_DIFFICULTY)
        session_id = str(uuid.uuid4())
        run = new_game(width, height, names, ai_players=seats, game_id=session_id)

        rng = random.Random(seed)
        bots: dict[int, BotPolicy] = {
            seat: MinimaxBot(profile=profile, player=seat, rng=rng) for seat in seats
        }

        session = Session(
            session_id=session_id,
            run=run,
            created_at=time.time(),
            bots=bots,
            metadata={"ai_difficulty": profile.level},
        )
        self._sessions[session_id] = session
        logger.info("Created session %s (%dx%d, AI seats %s)", session_id, width, height, seats)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        if session.state != SessionState.GAME_OVER:
            session.state = SessionState.ABANDONED
        session.history.clear()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
