"""
Puzzle Objectives - Declarative goals and their evaluation.

Every puzzle goal is one of eight objective kinds, checked as a pure
function of the board, the players and the run statistics. Objectives are
plain data so puzzles can be authored as dicts and validated on load.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..engine_core.board import Board
from ..engine_core.errors import ObjectiveError

if TYPE_CHECKING:
    from ..engine_core.state import Player
    from .puzzle import RunStats


class ObjectiveType(Enum):
    """The kinds of puzzle goals."""
    ELIMINATE_OPPONENT = "eliminate_opponent"
    CONTROL_TERRITORY = "control_territory"
    CREATE_CHAIN = "create_chain"
    SURVIVE_TURNS = "survive_turns"
    EFFICIENCY = "efficiency"
    TIMING = "timing"
    CAPTURE_CORNERS = "capture_corners"
    MAXIMIZE_EXPLOSIONS = "maximize_explosions"


CHAIN_MEASURES = ("explosions", "rounds")

# Authoring complexity added to the difficulty score per objective kind
KIND_COMPLEXITY: dict[ObjectiveType, int] = {
    ObjectiveType.ELIMINATE_OPPONENT: 15,
    ObjectiveType.CONTROL_TERRITORY: 10,
    ObjectiveType.CREATE_CHAIN: 20,
    ObjectiveType.SURVIVE_TURNS: 12,
    ObjectiveType.EFFICIENCY: 25,
    ObjectiveType.TIMING: 18,
    ObjectiveType.CAPTURE_CORNERS: 8,
    ObjectiveType.MAXIMIZE_EXPLOSIONS: 15,
}

ALL_DONE_HINT = "All objectives completed! Great job!"


@dataclass(frozen=True)
class Objective:
    """
    A single puzzle goal.

    `target` means: percent of cells (territory), explosions or rounds
    (chain, per `measure`), turns (survive, timing), moves (efficiency),
    corners or explosions. Eliminate-opponent ignores it and looks at
    `target_player`.
    """
    type: ObjectiveType
    target: float = 0
    player: int = 0
    target_player: int = 1
    measure: str = "explosions"
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "target": self.target,
            "player": self.player,
            "target_player": self.target_player,
            "measure": self.measure,
            "description": self.description or hint_for(self),
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_objective(data: dict[str, Any]) -> Objective:
    """
    Build an Objective from a plain descriptor.

    Accepts the legacy keys maxMoves (efficiency), targetTurn (timing)
    and targetPlayer.

    Raises:
        ObjectiveError: For a missing/unknown type or a bad target
    """
    errors: list[str] = []

    raw_type = data.get("type")
    kind = None
    if raw_type is None:
        errors.append("missing objective type")
    else:
        try:
            kind = ObjectiveType(raw_type.value if isinstance(raw_type, ObjectiveType) else raw_type)
        except ValueError:
            errors.append(f"unknown objective type {raw_type!r}")

    target = data.get("target")
    if target is None and kind == ObjectiveType.EFFICIENCY:
        target = data.get("maxMoves")
    if target is None and kind == ObjectiveType.TIMING:
        target = data.get("targetTurn")

    target_player = data.get("target_player", data.get("targetPlayer", 1))

    if kind == ObjectiveType.ELIMINATE_OPPONENT and target is None:
        target = 0
    if target is None:
        errors.append("missing objective target")
    elif not _is_number(target):
        errors.append(f"objective target must be a number, got {target!r}")
    elif target < 0:
        errors.append(f"objective target must not be negative, got {target}")

    player = data.get("player", 0)
    for name, value in (("player", player), ("target_player", target_player)):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(f"{name} must be a non-negative integer, got {value!r}")

    measure = data.get("measure", "explosions")
    if measure not in CHAIN_MEASURES:
        errors.append(f"measure must be one of {', '.join(CHAIN_MEASURES)}, got {measure!r}")

    if errors:
        raise ObjectiveError(errors)

    return Objective(
        type=kind,
        target=target,
        player=player,
        target_player=target_player,
        measure=measure,
        description=data.get("description", ""),
    )


def _protagonist_out(board: Board, players: list[Player], index: int) -> bool:
    for p in players:
        if p.index == index and p.eliminated:
            return True
    past_grace = board.total_orbs() >= len(players)
    return past_grace and board.orbs_of(index) == 0


def is_objective_met(
    board: Board,
    players: list[Player],
    objective: Objective,
    stats: RunStats,
) -> bool:
    """Whether one objective holds for the board and statistics."""
    kind = objective.type
    target = objective.target

    if kind == ObjectiveType.ELIMINATE_OPPONENT:
        return board.orbs_of(objective.target_player) == 0

    if kind == ObjectiveType.CONTROL_TERRITORY:
        return board.cells_of(objective.player) / board.area * 100 >= target

    if kind == ObjectiveType.CREATE_CHAIN:
        if objective.measure == "rounds":
            return stats.max_chain_rounds >= target
        return stats.max_chain_length >= target

    if kind == ObjectiveType.SURVIVE_TURNS:
        return stats.turn >= target and not _protagonist_out(board, players, objective.player)

    if kind == ObjectiveType.EFFICIENCY:
        return stats.moves_played <= target

    if kind == ObjectiveType.TIMING:
        return stats.turn <= target

    if kind == ObjectiveType.CAPTURE_CORNERS:
        return board.corners_of(objective.player) >= target

    if kind == ObjectiveType.MAXIMIZE_EXPLOSIONS:
        return stats.explosions_created >= target

    return False


def is_puzzle_completed(
    board: Board,
    players: list[Player],
    objectives: list[Objective],
    stats: RunStats,
) -> bool:
    """All objectives met. A puzzle without objectives is complete."""
    return all(is_objective_met(board, players, o, stats) for o in objectives)


def progress(
    board: Board,
    players: list[Player],
    objectives: list[Objective],
    stats: RunStats,
) -> float:
    """Percentage of objectives met (100 when there are none)."""
    if not objectives:
        return 100.0
    met = sum(1 for o in objectives if is_objective_met(board, players, o, stats))
    return met / len(objectives) * 100


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def hint_for(objective: Objective) -> str:
    """Templated hint text for one objective."""
    target = _fmt(objective.target)
    templates = {
        ObjectiveType.ELIMINATE_OPPONENT:
            "Focus on creating chain reactions to eliminate your opponent's orbs",
        ObjectiveType.CONTROL_TERRITORY: f"Try to control at least {target}% of the board",
        ObjectiveType.CREATE_CHAIN: (
            f"Create a chain reaction lasting at least {target} rounds"
            if objective.measure == "rounds"
            else f"Create a chain reaction of at least {target} explosions"
        ),
        ObjectiveType.SURVIVE_TURNS:
            f"Survive for {target} turns by maintaining territory control",
        ObjectiveType.EFFICIENCY: f"Complete the objective using {target} moves or fewer",
        ObjectiveType.TIMING: f"Complete the objective by turn {target}",
        ObjectiveType.CAPTURE_CORNERS: f"Capture at least {target} corner positions",
        ObjectiveType.MAXIMIZE_EXPLOSIONS: f"Trigger at least {target} explosions",
    }
    return templates.get(objective.type, "Think strategically about your next move")


def next_hint(
    board: Board,
    players: list[Player],
    objectives: list[Objective],
    stats: RunStats,
) -> str:
    """Hint for the first unmet objective, or a congratulation."""
    for objective in objectives:
        if not is_objective_met(board, players, objective, stats):
            return hint_for(objective)
    return ALL_DONE_HINT


def difficulty_score(
    objectives: list[Objective],
    width: int,
    height: int,
    move_limit: int | None = None,
) -> float:
    """
    Authoring difficulty in 1..100.

    More objectives, bigger boards, tighter move limits and harder
    objective kinds all raise the score.
    """
    score = len(objectives) * 10
    score += width * height * 0.5
    if move_limit:
        score += (50 - move_limit) * 2
    for objective in objectives:
        score += KIND_COMPLEXITY.get(objective.type, 0)
    return min(100, max(1, score))


def difficulty_tier(score: float) -> str:
    if score <= 20:
        return "beginner"
    if score <= 40:
        return "easy"
    if score <= 60:
        return "medium"
    if score <= 80:
        return "hard"
    return "expert"
