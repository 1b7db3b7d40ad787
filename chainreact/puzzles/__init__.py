"""
Puzzles module - Objective-driven single-player challenges.

Provides:
- Objective kinds and their pure evaluation
- Puzzle templates and run statistics
- The built-in puzzle library
- PuzzleRunner: plays a puzzle with its scripted or AI opponent
- PuzzleGenerator: random puzzles per difficulty tier
"""

from .objectives import (
    Objective,
    ObjectiveType,
    parse_objective,
    is_objective_met,
    is_puzzle_completed,
    progress,
    hint_for,
    next_hint,
    difficulty_score,
    difficulty_tier,
)
from .puzzle import Puzzle, OpponentType, OpponentMove, RunStats, parse_puzzle
from .library import (
    PuzzleCategory,
    get_puzzle,
    puzzles_by_category,
    puzzles_by_difficulty,
    next_puzzle_id,
    previous_puzzle_id,
    total_puzzle_count,
)
from .runner import PuzzleRunner, PuzzleRun, PuzzleStatus, PuzzleMoveResult, puzzle_points
from .generator import PuzzleGenerator, TierConfig, TIERS, TIER_CONFIGS

__all__ = [
    "Objective",
    "ObjectiveType",
    "parse_objective",
    "is_objective_met",
    "is_puzzle_completed",
    "progress",
    "hint_for",
    "next_hint",
    "difficulty_score",
    "difficulty_tier",
    "Puzzle",
    "OpponentType",
    "OpponentMove",
    "RunStats",
    "parse_puzzle",
    "PuzzleCategory",
    "get_puzzle",
    "puzzles_by_category",
    "puzzles_by_difficulty",
    "next_puzzle_id",
    "previous_puzzle_id",
    "total_puzzle_count",
    "PuzzleRunner",
    "PuzzleRun",
    "PuzzleStatus",
    "PuzzleMoveResult",
    "puzzle_points",
    "PuzzleGenerator",
    "TierConfig",
    "TIERS",
    "TIER_CONFIGS",
]
