"""
Heuristic Evaluator - Scores boards and moves for bot decision-making.

The evaluator assigns a numeric score to a board based on:
- Material (orbs held by each side)
- Threats (cells one orb from exploding)
- Position (corners and edges are easier to hold)
- Territory (cell and orb differences)
- Outcome (one side wiped out)

Weights are set per difficulty level by the personality module.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.board import Board, neighbor_table


@dataclass(frozen=True)
class EvaluationWeights:
    """
    Weights for the position evaluator.

    aggressiveness scales material and threats; territory_weight scales
    position and territory terms.
    """
    aggressiveness: float = 0.7
    territory_weight: float = 1.0

    orb_value: float = 15.0
    primed_bonus: float = 100.0  # Cell one orb from exploding
    corner_bonus: float = 50.0
    edge_bonus: float = 30.0
    cell_advantage: float = 25.0
    orb_advantage: float = 10.0
    outcome_score: float = 10000.0


@dataclass
class StateEvaluation:
    """
    Result of evaluating a board, with the per-feature breakdown.
    """
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class PositionEvaluator:
    """
    Evaluates boards from one player's point of view against one opponent.

    Used as the leaf function of the minimax search, so evaluate() works
    on the board's flat storage directly.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, board: Board, player: int, opponent: int) -> float:
        """
        Score the board for `player`.

        Positive is good for player, negative is good for opponent.
        """
        return self.explain(board, player, opponent).total_score

    def explain(self, board: Board, player: int, opponent: int) -> StateEvaluation:
        """Score the board and report each feature's contribution."""
        w = self.weights
        material = threats = position = 0.0
        my_orbs = their_orbs = my_cells = their_cells = 0

        for count, owner, cap in zip(board.orbs, board.owners, board.capacities):
            if owner == player:
                my_orbs += count
                my_cells += 1
                material += count * w.orb_value * w.aggressiveness
                if count == cap - 1:
                    threats += w.primed_bonus * w.aggressiveness
                if cap == 2:
                    position += w.corner_bonus * w.territory_weight
                elif cap == 3:
                    position += w.edge_bonus * w.territory_weight
            elif owner == opponent:
                their_orbs += count
                their_cells += 1
                material -= count * w.orb_value * w.aggressiveness
                if count == cap - 1:
                    threats -= w.primed_bonus * w.aggressiveness

        territory = (
            (my_cells - their_cells) * w.cell_advantage * w.territory_weight
            + (my_orbs - their_orbs) * w.orb_advantage * w.territory_weight
        )

        outcome = 0.0
        # An opening board is not a win for whoever moved first
        if board.total_orbs() >= 2:
            if their_orbs == 0 and their_cells == 0:
                outcome = w.outcome_score
            elif my_orbs == 0 and my_cells == 0:
                outcome = -w.outcome_score

        features = {
            "material": material,
            "threats": threats,
            "position": position,
            "territory": territory,
            "outcome": outcome,
        }
        return StateEvaluation(total_score=sum(features.values()), feature_breakdown=features)


# ============================================================================
# Move ordering
# ============================================================================

def move_score(board: Board, move: tuple[int, int], player: int, opponent: int) -> int:
    """
    Cheap static score of a candidate move, used to order the search.

    Immediate explosions (especially into opponent cells), empty cells and
    corners score high; feeding a primed opponent neighbor scores low.
    """
    x, y = move
    i = board.index(x, y)
    count = board.orbs[i]
    cap = board.capacities[i]
    table = neighbor_table(board.width, board.height)

    score = 0
    if count == cap - 1:
        score += 1000
        for n in table[i]:
            if board.owners[n] == opponent and board.orbs[n] > 0:
                score += 500

    if count == 0:
        score += 100

    if cap == 2:
        score += 150
    elif cap == 3:
        score += 100
    else:
        score += 50

    if board.owners[i] == player:
        score += count * 10

    for n in table[i]:
        if board.owners[n] == opponent and board.orbs[n] == board.capacities[n] - 1:
            score -= 200

    return score


def order_moves(
    board: Board,
    moves: list[tuple[int, int]],
    player: int,
    opponent: int,
) -> list[tuple[int, int]]:
    """Best-first by move_score. Stable: ties keep their input order."""
    return sorted(moves, key=lambda m: move_score(board, m, player, opponent), reverse=True)
