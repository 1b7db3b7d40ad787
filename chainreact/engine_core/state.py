"""
Game State - Players, run status and the elimination rule.

Design principles:
- Immutable-friendly: all mutations return new state
- Serializable: runs convert to plain dicts for hosts and replays
- The board is the only spatial state; everything else is bookkeeping
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
from enum import Enum
import logging

from .board import Board, legal_moves

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """High-level run status."""
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Player:
    """A seat in the game. `index` is the owner value used on the board."""
    index: int
    name: str
    is_ai: bool = False
    eliminated: bool = False

    def with_eliminated(self) -> Player:
        return replace(self, eliminated=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "is_ai": self.is_ai,
            "eliminated": self.eliminated,
        }


def check_elimination(
    board: Board,
    players: list[Player],
    grace_orbs: int | None = None,
) -> list[int]:
    """
    Indices of players who are out of the game.

    Once the board holds at least `grace_orbs` orbs (default: the number
    of players, so everyone has had a chance to place) a player owning no
    orbs is eliminated. Before that, a player is only eliminated if they
    own no orbs and have nowhere to play. Players already flagged as
    eliminated stay eliminated.
    """
    threshold = len(players) if grace_orbs is None else grace_orbs
    past_grace = board.total_orbs() >= threshold

    eliminated = []
    for player in players:
        if player.eliminated:
            eliminated.append(player.index)
            continue
        if board.orbs_of(player.index) > 0:
            continue
        if past_grace or not legal_moves(board, player.index):
            eliminated.append(player.index)
    return eliminated


@dataclass
class GameRun:
    """
    Complete game at a point in time.

    This is the canonical state the reducer operates on.
    All changes go through reducer.place_orb() and friends.
    """
    board: Board
    players: list[Player]
    game_id: str = ""
    current_player_idx: int = 0
    turn: int = 1
    status: GameStatus = GameStatus.PLAYING
    winner: int | None = None

    # History (for replay and summaries)
    move_history: list[Any] = field(default_factory=list)  # Move
    last_cascade: Any | None = None  # CascadeResult of the latest move

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def active_players(self) -> list[Player]:
        return [p for p in self.players if not p.eliminated]

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    def get_player(self, index: int) -> Player | None:
        """Get player by board index."""
        for p in self.players:
            if p.index == index:
                return p
        return None

    def next_active_index(self, after: int | None = None) -> int:
        """Seat index of the next non-eliminated player after `after`."""
        start = self.current_player_idx if after is None else after
        for step in range(1, self.num_players + 1):
            candidate = (start + step) % self.num_players
            if not self.players[candidate].eliminated:
                return candidate
        return start

    def with_turn_of(self, seat: int) -> GameRun:
        """Return a copy with the given seat to move."""
        return self._copy_with(current_player_idx=seat)

    def _copy_with(self, **kwargs) -> GameRun:
        """Create a copy with some fields replaced."""
        return GameRun(
            board=kwargs.get("board", self.board),
            players=kwargs.get("players", self.players),
            game_id=kwargs.get("game_id", self.game_id),
            current_player_idx=kwargs.get("current_player_idx", self.current_player_idx),
            turn=kwargs.get("turn", self.turn),
            status=kwargs.get("status", self.status),
            winner=kwargs.get("winner", self.winner),
            move_history=kwargs.get("move_history", self.move_history),
            last_cascade=kwargs.get("last_cascade", self.last_cascade),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_id": self.game_id,
            "width": self.board.width,
            "height": self.board.height,
            "board": self.board.to_rows(),
            "players": [p.to_dict() for p in self.players],
            "current_player": self.current_player_idx,
            "turn": self.turn,
            "status": self.status.value,
            "winner": self.winner,
            "moves_played": len(self.move_history),
        }
