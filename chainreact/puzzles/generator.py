"""
Puzzle Generator - Procedural puzzles per difficulty tier.

Each tier fixes the board sizes, move limits, objective counts and
objective kinds to draw from. A generated puzzle is assembled as a plain
descriptor and goes through parse_puzzle(), so it is validated exactly
like an authored one.

All randomness comes from the injected random.Random: the same seed
generates the same puzzles.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import logging
import random

from ..engine_core.board import capacity_of
from .library import PuzzleCategory
from .objectives import ObjectiveType, hint_for, parse_objective
from .puzzle import OpponentType, Puzzle, parse_puzzle

logger = logging.getLogger(__name__)

TIERS = ("beginner", "easy", "medium", "hard", "expert")

MAX_HINTS = 3

# Objective kinds a tier can draw; "mixed" draws any concrete kind
KIND_TYPES: dict[str, ObjectiveType] = {
    "elimination": ObjectiveType.ELIMINATE_OPPONENT,
    "territory": ObjectiveType.CONTROL_TERRITORY,
    "chain_reaction": ObjectiveType.CREATE_CHAIN,
    "survival": ObjectiveType.SURVIVE_TURNS,
    "efficiency": ObjectiveType.EFFICIENCY,
    "timing": ObjectiveType.TIMING,
    "corners": ObjectiveType.CAPTURE_CORNERS,
    "explosions": ObjectiveType.MAXIMIZE_EXPLOSIONS,
}

# Target per tier, beginner to expert
KIND_TARGETS: dict[str, tuple[int, ...]] = {
    "territory": (40, 50, 60, 70, 80),
    "chain_reaction": (2, 3, 5, 8, 12),
    "survival": (3, 5, 8, 12, 15),
    "efficiency": (3, 5, 8, 12, 15),
    "timing": (2, 3, 5, 8, 10),
    "corners": (2, 3, 3, 4, 4),
    "explosions": (3, 5, 8, 12, 15),
}

# Kinds that need an opponent actually playing back
OPPONENT_KINDS = {"elimination", "survival"}


@dataclass(frozen=True)
class TierConfig:
    """What a tier draws from."""
    board_sizes: tuple[tuple[int, int], ...]
    move_limits: tuple[int, ...]
    objective_counts: tuple[int, ...]
    objective_kinds: tuple[str, ...]
    title_pool: tuple[str, ...]
    summary: str
    closing_hint: str


TIER_CONFIGS: dict[str, TierConfig] = {
    "beginner": TierConfig(
        board_sizes=((4, 4), (5, 4)),
        move_limits=(3, 4, 5),
        objective_counts=(1, 2),
        objective_kinds=("elimination", "territory", "corners"),
        title_pool=("First Steps", "Learning Curve", "Basic Training", "Getting Started"),
        summary="Learn the basics of Chain Reaction",
        closing_hint="Take your time to understand the mechanics",
    ),
    "easy": TierConfig(
        board_sizes=((5, 4), (6, 4), (5, 5)),
        move_limits=(5, 6, 7, 8),
        objective_counts=(2, 3),
        objective_kinds=("chain_reaction", "efficiency", "territory", "elimination"),
        title_pool=("Simple Strategy", "Easy Challenge", "Basic Puzzle", "Entry Level"),
        summary="Simple strategic puzzle to improve your skills",
        closing_hint="Plan your moves ahead",
    ),
    "medium": TierConfig(
        board_sizes=((6, 5), (6, 6), (7, 5)),
        move_limits=(8, 10, 12),
        objective_counts=(3, 4),
        objective_kinds=("mixed", "survival", "timing", "chain_reaction", "territory"),
        title_pool=("Strategic Thinking", "Balanced Challenge", "Intermediate Puzzle", "Skill Test"),
        summary="Intermediate puzzle requiring strategic thinking",
        closing_hint="Balance multiple objectives",
    ),
    "hard": TierConfig(
        board_sizes=((7, 6), (8, 6), (7, 7)),
        move_limits=(12, 15, 18),
        objective_counts=(4, 5),
        objective_kinds=("chain_reaction", "explosions", "mixed", "efficiency", "timing"),
        title_pool=("Advanced Tactics", "Complex Challenge", "Expert Puzzle", "Master Test"),
        summary="Advanced puzzle testing your mastery",
        closing_hint="Think several moves ahead",
    ),
    "expert": TierConfig(
        board_sizes=((8, 8), (9, 8), (8, 9)),
        move_limits=(18, 20, 25),
        objective_counts=(5, 6, 7),
        objective_kinds=("mixed",),
        title_pool=("Ultimate Challenge", "Master Puzzle", "Expert Test", "Final Challenge"),
        summary="Ultimate test of Chain Reaction expertise",
        closing_hint="This is a master-level challenge",
    ),
}

# Puzzles per tier in a complete set
COMPLETE_SET_COUNTS = {"beginner": 20, "easy": 25, "medium": 25, "hard": 20, "expert": 10}


class PuzzleGenerator:
    """
    Builds random puzzles for a difficulty tier.

    Usage:
        generator = PuzzleGenerator(rng=random.Random(7))
        puzzle = generator.generate_puzzle("easy")
        run = PuzzleRunner().load(puzzle)
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate_puzzle(self, tier: str = "medium", kind: str | None = None) -> Puzzle:
        """
        Generate one puzzle.

        Args:
            tier: One of TIERS
            kind: Force every objective to this kind (a KIND_TYPES key)

        Raises:
            ValueError: For an unknown tier or kind
        """
        config = _tier_config(tier)
        if kind is not None and kind not in KIND_TYPES:
            raise ValueError(f"Unknown objective kind {kind!r}")

        width, height = self.rng.choice(config.board_sizes)
        max_moves = self.rng.choice(config.move_limits)
        count = self.rng.choice(config.objective_counts)
        kinds = [kind or self._pick_kind(config) for _ in range(count)]
        objectives = [self.generate_objective(k, tier) for k in kinds]
        needs_opponent = any(k in OPPONENT_KINDS for k in kinds)
        rating = TIERS.index(tier) + 1

        data = {
            "puzzle_id": f"generated_{tier}_{self.rng.getrandbits(32):08x}",
            "title": self.rng.choice(config.title_pool),
            "category": PuzzleCategory.GENERATED,
            "difficulty": rating,
            "summary": config.summary,
            "width": width,
            "height": height,
            "max_moves": max_moves,
            "initial_orbs": self.generate_layout(width, height, kinds),
            "objectives": objectives,
            "hints": self.generate_hints(objectives, tier),
            "opponent": (OpponentType.AI if needs_opponent else OpponentType.STATIC).value,
            "ai_difficulty": rating,
        }
        puzzle = parse_puzzle(data)
        logger.debug("Generated %s (%s, score %.0f)", puzzle.puzzle_id, tier, puzzle.difficulty_score())
        return puzzle

    def generate_puzzle_set(self, count: int = 10, tier: str = "medium") -> list[Puzzle]:
        return [self.generate_puzzle(tier) for _ in range(count)]

    def generate_complete_set(self) -> list[Puzzle]:
        """Puzzles for every tier, easiest first."""
        puzzles: list[Puzzle] = []
        for tier in TIERS:
            puzzles.extend(self.generate_puzzle_set(COMPLETE_SET_COUNTS[tier], tier))
        return puzzles

    def generate_objective(self, kind: str, tier: str) -> dict[str, Any]:
        """Objective descriptor for a kind at a tier's target."""
        objective: dict[str, Any] = {"type": KIND_TYPES[kind].value}
        if kind == "elimination":
            objective["target_player"] = 1
        else:
            objective["target"] = KIND_TARGETS[kind][TIERS.index(tier)]
        return objective

    def generate_layout(self, width: int, height: int, kinds: list[str]) -> list[dict[str, int]]:
        """
        Starting orbs for the board.

        Elimination puzzles scatter orbs for both sides, territory puzzles
        seed cells for the protagonist. Both sides always start with at
        least one orb, so neither is out before the first move.
        """
        contested = "elimination" in kinds
        territory = "territory" in kinds

        layout: list[dict[str, int]] = []
        for y in range(height):
            for x in range(width):
                most = capacity_of(x, y, width, height) - 1
                if contested and self.rng.random() < 0.3:
                    owner = 0 if self.rng.random() < 0.5 else 1
                    layout.append({"x": x, "y": y, "orbs": self.rng.randint(1, min(2, most)), "owner": owner})
                elif territory and self.rng.random() < 0.2:
                    layout.append({"x": x, "y": y, "orbs": 1, "owner": 0})

        for player in (0, 1):
            if any(cell["owner"] == player for cell in layout):
                continue
            taken = {(cell["x"], cell["y"]) for cell in layout}
            free = [(x, y) for y in range(height) for x in range(width) if (x, y) not in taken]
            x, y = self.rng.choice(free)
            layout.append({"x": x, "y": y, "orbs": 1, "owner": player})
        return layout

    def generate_hints(self, objectives: list[dict[str, Any]], tier: str) -> list[str]:
        """One hint per distinct objective, then the tier's advice, at most MAX_HINTS."""
        hints: list[str] = []
        for descriptor in objectives:
            hint = hint_for(parse_objective(descriptor))
            if hint not in hints:
                hints.append(hint)
        hints.append(TIER_CONFIGS[tier].closing_hint)
        return hints[:MAX_HINTS]

    def _pick_kind(self, config: TierConfig) -> str:
        kind = self.rng.choice(config.objective_kinds)
        if kind == "mixed":
            kind = self.rng.choice(sorted(KIND_TYPES))
        return kind


def _tier_config(tier: str) -> TierConfig:
    config = TIER_CONFIGS.get(tier)
    if config is None:
        raise ValueError(f"Unknown tier {tier!r}, expected one of {', '.join(TIERS)}")
    return config
