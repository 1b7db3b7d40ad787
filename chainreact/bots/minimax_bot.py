"""
Minimax Bot - The AI opponent.

This bot:
- Searches with minimax and alpha-beta pruning
- Orders moves with a static score at every node
- Plays randomly or makes deliberate mistakes at low difficulty
- Simulates with the synchronous cascade fast path

The bot treats the game as two-player: itself against the next active
seat. In games with more seats the others are ignored by the search.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging
import math
import random

from .. import config
from ..engine_core.board import Board, legal_moves
from ..engine_core.cascade import simulate_move
from .policy import BotPolicy, BotDecision
from .evaluator import PositionEvaluator, order_moves
from .personality import DifficultyProfile, get_profile

if TYPE_CHECKING:
    from ..engine_core.state import Player

logger = logging.getLogger(__name__)

# Share of the ordered move list skipped by a deliberate mistake
MISTAKE_OFFSET = 0.3


def opponent_of(player: int, players: list[Player] | None = None) -> int:
    """The seat the bot searches against: the next active seat after `player`."""
    if not players:
        return 0 if player != 0 else 1
    seats = [p.index for p in players]
    if player not in seats:
        return seats[0]
    start = seats.index(player)
    for step in range(1, len(seats)):
        candidate = players[(start + step) % len(seats)]
        if not candidate.eliminated:
            return candidate.index
    return players[(start + 1) % len(seats)].index


@dataclass
class MinimaxBot(BotPolicy):
    """
    Minimax AI with difficulty-tuned heuristics.

    Usage:
        bot = MinimaxBot(profile=get_profile(3), player=1, rng=random.Random(7))
        decision = bot.select_move(board, players)
        print(decision.move, decision.explanation)
    """
    profile: DifficultyProfile = None  # type: ignore
    player: int = 1
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        if self.profile is None:
            self.profile = get_profile(config.DEFAULT_DIFFICULTY)
        if self.rng is None:
            self.rng = random.Random()
        self.evaluator = PositionEvaluator(self.profile.weights)
        self._nodes = 0

    def select_move(
        self,
        board: Board,
        players: list[Player] | None = None,
    ) -> BotDecision:
        """
        Select a move for self.player.

        Process:
        1. Random move (profile.randomness)
        2. Deliberate mistake: a decent but not best move (profile.mistakes)
        3. Otherwise full minimax search to profile.depth
        """
        opponent = opponent_of(self.player, players)
        moves = legal_moves(board, self.player)
        if not moves:
            return BotDecision(move=None, explanation="No legal moves")

        if self.profile.randomness > 0 and self.rng.random() < self.profile.randomness:
            move = self.rng.choice(moves)
            return self._decision(move, f"Random move ({self.profile.name})", 0.0, len(moves))

        ordered = order_moves(board, moves, self.player, opponent)

        if self.profile.mistakes > 0 and self.rng.random() < self.profile.mistakes:
            index = min(len(ordered) - 1, math.floor(len(moves) * MISTAKE_OFFSET))
            return self._decision(
                ordered[index],
                f"Suboptimal move #{index + 1} of {len(ordered)} ({self.profile.name})",
                0.0,
                len(ordered),
            )

        self._nodes = 0
        best_move, best_score = self._search_root(board, ordered, opponent)
        return self._decision(
            best_move,
            f"Minimax depth {self.profile.depth}, score {best_score:.1f}",
            best_score,
            self._nodes,
        )

    def _decision(
        self,
        move: tuple[int, int],
        explanation: str,
        score: float,
        nodes: int,
    ) -> BotDecision:
        logger.debug("Player %d plays %s: %s", self.player, move, explanation)
        return BotDecision(
            move=move,
            explanation=explanation,
            evaluated_nodes=nodes,
            best_score=score,
            evaluation_details={"level": self.profile.level, "depth": self.profile.depth},
        )

    def _search_root(
        self,
        board: Board,
        ordered: list[tuple[int, int]],
        opponent: int,
    ) -> tuple[tuple[int, int], float]:
        """Pick the best ordered move. Ties keep the earlier move."""
        best_move = ordered[0]
        best_score = -math.inf
        for x, y in ordered:
            child = simulate_move(board, x, y, self.player)
            score = self._minimax(child, self.profile.depth - 1, False, best_score, math.inf, opponent)
            if score > best_score:
                best_score = score
                best_move = (x, y)
        return best_move, best_score

    def _minimax(
        self,
        board: Board,
        depth: int,
        maximizing: bool,
        alpha: float,
        beta: float,
        opponent: int,
    ) -> float:
        self._nodes += 1
        if depth <= 0 or self._is_terminal(board, opponent):
            return self.evaluator.evaluate(board, self.player, opponent)

        mover, other = (self.player, opponent) if maximizing else (opponent, self.player)
        moves = order_moves(board, legal_moves(board, mover), mover, other)
        if not moves:
            return self.evaluator.evaluate(board, self.player, opponent)

        if maximizing:
            best = -math.inf
            for x, y in moves:
                score = self._minimax(simulate_move(board, x, y, mover), depth - 1, False, alpha, beta, opponent)
                best = max(best, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return best

        best = math.inf
        for x, y in moves:
            score = self._minimax(simulate_move(board, x, y, mover), depth - 1, True, alpha, beta, opponent)
            best = min(best, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return best

    def _is_terminal(self, board: Board, opponent: int) -> bool:
        """One side wiped out, once both have had a chance to place."""
        if board.total_orbs() < 2:
            return False
        return board.orbs_of(self.player) == 0 or board.orbs_of(opponent) == 0


def ai_select_move(
    board: Board,
    players: list[Player] | None,
    difficulty: int | DifficultyProfile,
    player: int = 1,
    rng: random.Random | None = None,
) -> tuple[int, int] | None:
    """
    Convenience function: the AI's move for `player`, or None if it has none.

    Pure apart from the injected rng.
    """
    profile = difficulty if isinstance(difficulty, DifficultyProfile) else get_profile(difficulty)
    bot = MinimaxBot(profile=profile, player=player, rng=rng or random.Random())
    return bot.select_move(board, players).move
