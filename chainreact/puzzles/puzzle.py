"""
Puzzle - Templates and run statistics.

A Puzzle is an immutable template: starting layout, move limit,
objectives, hints and the opponent's behaviour. RunStats accumulates what
the objectives measure while the puzzle is played.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..engine_core.board import Board
from ..engine_core.cascade import CascadeResult
from .objectives import Objective, parse_objective, difficulty_score, difficulty_tier


class OpponentType(Enum):
    STATIC = "static"  # Scripted moves keyed by turn number
    AI = "ai"


@dataclass(frozen=True)
class OpponentMove:
    """A scripted opponent reply, played after the protagonist's move `turn`."""
    turn: int
    x: int
    y: int


@dataclass(frozen=True)
class Puzzle:
    """
    An authored puzzle.

    `difficulty` is the author's 1-5 rating; difficulty_score() is the
    computed 1-100 complexity.
    """
    puzzle_id: str
    title: str
    width: int
    height: int
    max_moves: int
    objectives: tuple[Objective, ...] = ()
    category: str = "tutorial"
    difficulty: int = 1
    summary: str = ""
    initial_orbs: tuple[dict[str, Any], ...] = ()
    hints: tuple[str, ...] = ()
    opponent: OpponentType = OpponentType.STATIC
    opponent_moves: tuple[OpponentMove, ...] = ()
    ai_difficulty: int = 1
    solution: tuple[tuple[int, int], ...] = ()
    explanation: str = ""

    def build_board(self) -> Board:
        """Fresh starting board. Raises InvalidBoardError for a bad layout."""
        return Board.from_layout(self.width, self.height, self.initial_orbs)

    def scripted_reply(self, turn: int) -> OpponentMove | None:
        for move in self.opponent_moves:
            if move.turn == turn:
                return move
        return None

    def difficulty_score(self) -> float:
        return difficulty_score(list(self.objectives), self.width, self.height, self.max_moves)

    def difficulty_tier(self) -> str:
        return difficulty_tier(self.difficulty_score())

    def to_dict(self) -> dict[str, Any]:
        return {
            "puzzle_id": self.puzzle_id,
            "title": self.title,
            "category": self.category,
            "difficulty": self.difficulty,
            "summary": self.summary,
            "width": self.width,
            "height": self.height,
            "max_moves": self.max_moves,
            "opponent": self.opponent.value,
            "objectives": [o.to_dict() for o in self.objectives],
            "hint_count": len(self.hints),
            "difficulty_score": self.difficulty_score(),
            "difficulty_tier": self.difficulty_tier(),
        }


def parse_puzzle(data: dict[str, Any]) -> Puzzle:
    """
    Build a Puzzle from a plain descriptor.

    Raises:
        ValueError: For a missing field or a bad opponent type
        ObjectiveError: For a malformed objective
        InvalidBoardError: For a bad layout
    """
    missing = [k for k in ("puzzle_id", "title", "width", "height", "max_moves") if k not in data]
    if missing:
        raise ValueError(f"Puzzle is missing required fields: {', '.join(missing)}")

    puzzle = Puzzle(
        puzzle_id=data["puzzle_id"],
        title=data["title"],
        width=data["width"],
        height=data["height"],
        max_moves=data["max_moves"],
        objectives=tuple(parse_objective(o) for o in data.get("objectives", [])),
        category=data.get("category", "tutorial"),
        difficulty=data.get("difficulty", 1),
        summary=data.get("summary", ""),
        initial_orbs=tuple(data.get("initial_orbs", [])),
        hints=tuple(data.get("hints", [])),
        opponent=OpponentType(data.get("opponent", "static")),
        opponent_moves=tuple(OpponentMove(**m) for m in data.get("opponent_moves", [])),
        ai_difficulty=data.get("ai_difficulty", 1),
        solution=tuple(tuple(s) for s in data.get("solution", [])),
        explanation=data.get("explanation", ""),
    )
    # Validate the layout up front
    puzzle.build_board()
    return puzzle


@dataclass(frozen=True)
class RunStats:
    """
    What the protagonist has achieved so far in a puzzle run.

    Only the protagonist's moves feed the explosion and chain counters.
    `turn` counts completed turns (protagonist move plus any reply).
    """
    explosions_created: int = 0
    chain_reactions_triggered: int = 0
    max_chain_length: int = 0
    max_chain_rounds: int = 0
    corners_controlled: int = 0
    moves_played: int = 0
    turn: int = 0

    def after_move(self, cascade: CascadeResult, board: Board, player: int = 0) -> RunStats:
        """Fold one protagonist move into the statistics."""
        return replace(
            self,
            explosions_created=self.explosions_created + cascade.explosion_count,
            chain_reactions_triggered=self.chain_reactions_triggered + int(cascade.is_chain_reaction),
            max_chain_length=max(self.max_chain_length, cascade.explosion_count),
            max_chain_rounds=max(self.max_chain_rounds, cascade.round_count),
            corners_controlled=board.corners_of(player),
            moves_played=self.moves_played + 1,
        )

    def end_turn(self, board: Board, player: int = 0) -> RunStats:
        """Close the turn after the opponent's reply."""
        return replace(self, turn=self.turn + 1, corners_controlled=board.corners_of(player))

    def to_dict(self) -> dict[str, Any]:
        return {
            "explosions_created": self.explosions_created,
            "chain_reactions_triggered": self.chain_reactions_triggered,
            "max_chain_length": self.max_chain_length,
            "max_chain_rounds": self.max_chain_rounds,
            "corners_controlled": self.corners_controlled,
            "moves_played": self.moves_played,
            "turn": self.turn,
        }
