"""
Bot Personalities - Difficulty-tuned play styles.

A difficulty profile adjusts:
- Search depth (how far ahead the bot looks)
- Randomness (chance of a uniformly random move)
- Mistakes (chance of a decent but not optimal move)
- Evaluation weights (aggressiveness and territory focus)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace

from .evaluator import EvaluationWeights


@dataclass(frozen=True)
class DifficultyProfile:
    """
    Search and evaluation parameters for one AI level.

    randomness and mistakes are probabilities in [0, 1].
    """
    level: int
    name: str
    depth: int
    randomness: float = 0.0
    mistakes: float = 0.0
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    @property
    def aggressiveness(self) -> float:
        return self.weights.aggressiveness

    @property
    def territory_weight(self) -> float:
        return self.weights.territory_weight

    def deterministic(self) -> DifficultyProfile:
        """Same search, with both random behaviours switched off."""
        return replace(self, randomness=0.0, mistakes=0.0)


# ============================================================================
# Predefined Levels
# ============================================================================

BEGINNER = DifficultyProfile(
    level=1,
    name="Beginner",
    depth=2,
    randomness=0.3,
    mistakes=0.4,
    weights=EvaluationWeights(aggressiveness=0.3, territory_weight=0.5),
)


EASY = DifficultyProfile(
    level=2,
    name="Easy",
    depth=2,
    randomness=0.2,
    mistakes=0.2,
    weights=EvaluationWeights(aggressiveness=0.5, territory_weight=0.7),
)


MEDIUM = DifficultyProfile(
    level=3,
    name="Medium",
    depth=3,
    randomness=0.1,
    mistakes=0.1,
    weights=EvaluationWeights(aggressiveness=0.7, territory_weight=1.0),
)


HARD = DifficultyProfile(
    level=4,
    name="Hard",
    depth=4,
    randomness=0.05,
    mistakes=0.05,
    weights=EvaluationWeights(aggressiveness=0.9, territory_weight=1.2),
)


EXPERT = DifficultyProfile(
    level=5,
    name="Expert",
    depth=5,
    randomness=0.0,
    mistakes=0.0,
    weights=EvaluationWeights(aggressiveness=1.0, territory_weight=1.5),
)


# All predefined levels
DIFFICULTY_PROFILES: dict[int, DifficultyProfile] = {
    1: BEGINNER,
    2: EASY,
    3: MEDIUM,
    4: HARD,
    5: EXPERT,
}


def get_profile(level: int) -> DifficultyProfile:
    """
    Look up the profile for an AI level.

    Raises:
        ValueError: If level is not 1-5
    """
    if isinstance(level, bool) or level not in DIFFICULTY_PROFILES:
        raise ValueError(f"Unknown difficulty level {level!r}; expected 1-5")
    return DIFFICULTY_PROFILES[level]
