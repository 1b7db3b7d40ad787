"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a board and returns a decision.
Decisions include:
- Which cell to play (None when there is no legal move)
- Explanation for UI/debugging
- How much work the search did
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.board import legal_moves

if TYPE_CHECKING:
    from ..engine_core.board import Board
    from ..engine_core.state import Player


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The move to play
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    move: tuple[int, int] | None
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_nodes: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy plays one seat (`player`) and defines how moves are chosen.
    Implementations range from baselines to the minimax search.
    """

    player: int = 1

    @abstractmethod
    def select_move(
        self,
        board: Board,
        players: list[Player] | None = None,
    ) -> BotDecision:
        """
        Select a move for self.player.

        Args:
            board: Current (stable) board
            players: Seats in the game, used to pick the opponent

        Returns:
            BotDecision with the selected move, or move=None if none is legal
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects moves uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, player: int = 1, seed: int | None = None):
        self.player = player
        self.rng = random.Random(seed)

    def select_move(
        self,
        board: Board,
        players: list[Player] | None = None,
    ) -> BotDecision:
        moves = legal_moves(board, self.player)
        if not moves:
            return BotDecision(move=None, explanation="No legal moves")

        return BotDecision(
            move=self.rng.choice(moves),
            explanation="Selected randomly",
            confidence=1.0 / len(moves),
            evaluated_nodes=len(moves),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal move (row-major).

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def __init__(self, player: int = 1):
        self.player = player

    def select_move(
        self,
        board: Board,
        players: list[Player] | None = None,
    ) -> BotDecision:
        moves = legal_moves(board, self.player)
        if not moves:
            return BotDecision(move=None, explanation="No legal moves")

        return BotDecision(
            move=moves[0],
            explanation="Selected first legal move",
            evaluated_nodes=1,
        )
