"""
Puzzle Library - Built-in puzzles, from tutorial to tactical.

Puzzles are declared as plain data and parsed on import, so a broken
entry fails loudly at startup rather than mid-game.
"""

from __future__ import annotations
from typing import Any

from .puzzle import Puzzle, parse_puzzle


class PuzzleCategory:
    TUTORIAL = "tutorial"
    TACTICAL = "tactical"
    STRATEGIC = "strategic"
    ADVANCED = "advanced"
    EXPERT = "expert"
    GENERATED = "generated"  # Built by PuzzleGenerator, never in the library


def _cell(x: int, y: int, orbs: int, owner: int) -> dict[str, int]:
    return {"x": x, "y": y, "orbs": orbs, "owner": owner}


_ELIMINATE = {"type": "eliminate_opponent", "target_player": 1}


PUZZLE_DATA: list[dict[str, Any]] = [
    # ------------------------------------------------------------------
    # Tutorial: static opponents, one concept each
    # ------------------------------------------------------------------
    {
        "puzzle_id": "tutorial_001",
        "title": "First Steps",
        "category": PuzzleCategory.TUTORIAL,
        "difficulty": 1,
        "summary": "Create an explosion in 1 move",
        "width": 6,
        "height": 4,
        "max_moves": 1,
        "initial_orbs": [
            _cell(2, 1, 3, 0),
            _cell(3, 1, 2, 1),
            _cell(2, 2, 1, 1),
        ],
        "objectives": [{"type": "maximize_explosions", "target": 1}],
        "solution": [(2, 1)],
        "hints": [
            "Look for cells that are close to their critical mass",
            "The cell with 3 orbs is ready to explode!",
        ],
        "explanation": (
            "When a cell reaches its critical mass it explodes and sends one orb "
            "to each neighbor, converting them to your color."
        ),
    },
    {
        "puzzle_id": "tutorial_002",
        "title": "Strategic Capture",
        "category": PuzzleCategory.TUTORIAL,
        "difficulty": 2,
        "summary": "Capture every opponent cell in 2 moves",
        "width": 6,
        "height": 4,
        "max_moves": 2,
        "initial_orbs": [
            _cell(2, 1, 3, 0),
            _cell(3, 1, 2, 1),
            _cell(3, 2, 1, 1),
            _cell(2, 2, 1, 1),
        ],
        "objectives": [_ELIMINATE],
        "solution": [(2, 1), (3, 1)],
        "hints": [
            "You have a cell ready to explode! Use it strategically",
            "The first explosion should capture 2 opponent cells",
            "Use your second move to capture the remaining opponent cell",
        ],
        "explanation": (
            "Your first explosion captures two opponent cells. One of them is now "
            "yours and close to bursting: push it over to take the last cell."
        ),
    },
    {
        "puzzle_id": "tutorial_003",
        "title": "Chain Reaction Mastery",
        "category": PuzzleCategory.TUTORIAL,
        "difficulty": 3,
        "summary": "Eliminate all opponent cells in 3 moves",
        "width": 6,
        "height": 4,
        "max_moves": 3,
        "initial_orbs": [
            _cell(2, 1, 3, 0),
            _cell(3, 1, 1, 0),
            _cell(1, 1, 1, 1),
            _cell(4, 1, 1, 1),
            _cell(2, 2, 1, 1),
            _cell(3, 2, 1, 1),
        ],
        "objectives": [_ELIMINATE],
        "solution": [(2, 1), (3, 1), (3, 1)],
        "hints": [
            "Start by exploding your cell that's ready to explode",
            "The first explosion should capture 2 opponent cells",
            "Build up a second cell until its explosion reaches the rest",
        ],
        "explanation": (
            "Start with an explosion that captures several cells, then build a "
            "second explosion that reaches the cells the first one missed."
        ),
    },
    {
        "puzzle_id": "tutorial_004",
        "title": "AI Challenge",
        "category": PuzzleCategory.TUTORIAL,
        "difficulty": 3,
        "summary": "Defeat the AI by eliminating all their cells in 4 moves",
        "width": 6,
        "height": 4,
        "max_moves": 4,
        "opponent": "ai",
        "ai_difficulty": 1,
        "initial_orbs": [
            _cell(2, 1, 2, 0),
            _cell(3, 1, 1, 0),
            _cell(1, 1, 2, 1),
            _cell(4, 1, 1, 1),
            _cell(2, 2, 1, 1),
            _cell(3, 2, 1, 1),
        ],
        "objectives": [_ELIMINATE],
        "hints": [
            "Build up your cell to 3 orbs - you need to explode to capture AI cells",
            "The AI will try to build up its cells, so be strategic about your captures",
            "Try to eliminate AI cells before they can build up too many orbs",
        ],
        "explanation": (
            "Your first game against a live opponent. It answers every move, so "
            "plan explosions that leave it nothing to build on."
        ),
    },
    {
        "puzzle_id": "tutorial_005",
        "title": "Grandmaster Challenge",
        "category": PuzzleCategory.TUTORIAL,
        "difficulty": 5,
        "summary": "Control at least 3 corners and a quarter of the board in 8 moves",
        "width": 10,
        "height": 8,
        "max_moves": 8,
        "opponent": "ai",
        "ai_difficulty": 2,
        "initial_orbs": [
            _cell(4, 3, 3, 0),
            _cell(5, 3, 2, 0),
            _cell(3, 4, 1, 0),
            _cell(6, 4, 1, 0),
            _cell(3, 3, 2, 1),
            _cell(6, 3, 2, 1),
            _cell(1, 2, 1, 1),
            _cell(8, 2, 1, 1),
            _cell(2, 5, 1, 1),
            _cell(7, 5, 1, 1),
            _cell(4, 4, 2, 1),
            _cell(5, 4, 2, 1),
            _cell(0, 0, 1, 1),
            _cell(9, 0, 1, 1),
            _cell(0, 7, 1, 1),
            _cell(9, 7, 1, 1),
        ],
        "objectives": [
            {"type": "capture_corners", "target": 3},
            {"type": "control_territory", "target": 25},
        ],
        "hints": [
            "You have a cell ready to explode that can capture multiple AI cells",
            "The corners are strategically important - control them to limit AI options",
            "Use chain reactions to efficiently capture multiple cells",
            "Remember: corners provide strategic advantage in larger boards",
        ],
        "explanation": (
            "Corners need only two orbs to burst, so a single orb there is easy "
            "to flip. Take them while your central explosions spread your color."
        ),
    },
    # ------------------------------------------------------------------
    # Tactical: specific combinations
    # ------------------------------------------------------------------
    {
        "puzzle_id": "tactical_001",
        "title": "Corner Trap",
        "category": PuzzleCategory.TACTICAL,
        "difficulty": 3,
        "summary": "Eliminate all opponent cells with a corner trap in 4 moves",
        "width": 8,
        "height": 6,
        "max_moves": 4,
        "initial_orbs": [
            _cell(0, 0, 1, 0),
            _cell(1, 0, 2, 0),
            _cell(0, 1, 2, 0),
            _cell(1, 1, 1, 1),
            _cell(2, 0, 1, 1),
            _cell(0, 2, 1, 1),
            _cell(2, 1, 1, 1),
            _cell(1, 2, 1, 1),
            _cell(3, 0, 1, 1),
            _cell(0, 3, 1, 1),
        ],
        "objectives": [_ELIMINATE],
        "solution": [(1, 0), (1, 1), (0, 2), (2, 0)],
        "hints": [
            "You control a corner with cells ready to explode",
            "Use the corner position to trap opponent cells",
            "Chain your explosions to capture multiple cells at once",
            "Plan your moves to eliminate all opponent cells efficiently",
        ],
        "explanation": (
            "Corner and edge cells burst with fewer orbs. Trigger them in sequence "
            "so each explosion primes the next."
        ),
    },
    {
        "puzzle_id": "tactical_002",
        "title": "AI Counter-Attack",
        "category": PuzzleCategory.TACTICAL,
        "difficulty": 4,
        "summary": "Defeat the AI from the center in 4 moves",
        "width": 8,
        "height": 6,
        "max_moves": 4,
        "opponent": "ai",
        "ai_difficulty": 2,
        "initial_orbs": [
            _cell(3, 2, 3, 0),
            _cell(4, 2, 2, 0),
            _cell(3, 3, 2, 0),
            _cell(4, 3, 2, 0),
            _cell(2, 2, 2, 1),
            _cell(5, 2, 2, 1),
            _cell(2, 3, 1, 1),
            _cell(5, 3, 1, 1),
            _cell(1, 2, 1, 1),
            _cell(6, 2, 1, 1),
            _cell(1, 3, 1, 1),
            _cell(6, 3, 1, 1),
            _cell(0, 0, 1, 1),
            _cell(7, 0, 1, 1),
            _cell(0, 5, 1, 1),
            _cell(7, 5, 1, 1),
        ],
        "objectives": [_ELIMINATE],
        "hints": [
            "You control the center with a cell ready to explode",
            "The AI will try to counter your moves - plan accordingly",
            "Focus on eliminating AI cells while maintaining your position",
        ],
        "explanation": (
            "A strong center position is only worth what you do with it: the AI "
            "answers each move, so chain explosions before it can regroup."
        ),
    },
    # ------------------------------------------------------------------
    # Strategic: scripted opponents, longer goals
    # ------------------------------------------------------------------
    {
        "puzzle_id": "strategic_001",
        "title": "Hold the Line",
        "category": PuzzleCategory.STRATEGIC,
        "difficulty": 2,
        "summary": "Survive 3 turns while taking 2 corners",
        "width": 5,
        "height": 5,
        "max_moves": 3,
        "initial_orbs": [
            _cell(0, 0, 1, 0),
            _cell(4, 4, 1, 1),
            _cell(3, 4, 1, 1),
        ],
        "opponent_moves": [
            {"turn": 1, "x": 4, "y": 4},
            {"turn": 2, "x": 3, "y": 4},
            {"turn": 3, "x": 3, "y": 3},
        ],
        "objectives": [
            {"type": "survive_turns", "target": 3},
            {"type": "capture_corners", "target": 2},
        ],
        "solution": [(4, 0), (0, 4), (0, 0)],
        "hints": [
            "The opponent is busy in its own corner",
            "Empty corners are free for the taking",
        ],
        "explanation": (
            "Territory you are not contesting is the cheapest territory there is. "
            "Take the open corners and stay out of the opponent's explosions."
        ),
    },
]


def _build_library() -> dict[str, list[Puzzle]]:
    library: dict[str, list[Puzzle]] = {}
    for data in PUZZLE_DATA:
        puzzle = parse_puzzle(data)
        library.setdefault(puzzle.category, []).append(puzzle)
    return library


PUZZLE_LIBRARY: dict[str, list[Puzzle]] = _build_library()

# Play order across all categories
ALL_PUZZLES: list[Puzzle] = [p for puzzles in PUZZLE_LIBRARY.values() for p in puzzles]


def get_puzzle(puzzle_id: str) -> Puzzle | None:
    """Get a puzzle by ID."""
    for puzzle in ALL_PUZZLES:
        if puzzle.puzzle_id == puzzle_id:
            return puzzle
    return None


def puzzles_by_category(category: str) -> list[Puzzle]:
    return list(PUZZLE_LIBRARY.get(category, []))


def puzzles_by_difficulty(min_difficulty: int, max_difficulty: int) -> list[Puzzle]:
    """Puzzles whose author rating is within [min_difficulty, max_difficulty]."""
    return [p for p in ALL_PUZZLES if min_difficulty <= p.difficulty <= max_difficulty]


def total_puzzle_count() -> int:
    return len(ALL_PUZZLES)


def next_puzzle_id(puzzle_id: str) -> str | None:
    """ID of the puzzle after `puzzle_id` in play order, or None at the end."""
    ids = [p.puzzle_id for p in ALL_PUZZLES]
    if puzzle_id not in ids:
        return None
    i = ids.index(puzzle_id)
    return ids[i + 1] if i + 1 < len(ids) else None


def previous_puzzle_id(puzzle_id: str) -> str | None:
    ids = [p.puzzle_id for p in ALL_PUZZLES]
    if puzzle_id not in ids:
        return None
    i = ids.index(puzzle_id)
    return ids[i - 1] if i > 0 else None
