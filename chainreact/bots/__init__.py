"""
Bots module - AI opponent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- PositionEvaluator: Scores boards; move_score/order_moves rank candidates
- MinimaxBot: Alpha-beta search opponent
- DifficultyProfile: Per-level search and evaluation settings
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import PositionEvaluator, EvaluationWeights, move_score, order_moves
from .personality import DifficultyProfile, DIFFICULTY_PROFILES, get_profile
from .minimax_bot import MinimaxBot, ai_select_move

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "PositionEvaluator",
    "EvaluationWeights",
    "move_score",
    "order_moves",
    "DifficultyProfile",
    "DIFFICULTY_PROFILES",
    "get_profile",
    "MinimaxBot",
    "ai_select_move",
]
