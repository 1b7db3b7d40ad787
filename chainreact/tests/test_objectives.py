"""
Tests for puzzle objectives.

Tests:
- Parsing and validation of descriptors
- Each objective kind
- Completion, progress and hints
- Difficulty scoring
"""

import pytest

from ..engine_core.board import Board, create_board
from ..engine_core.errors import ObjectiveError
from ..engine_core.state import Player
from ..puzzles import (
    Objective,
    ObjectiveType,
    RunStats,
    difficulty_score,
    difficulty_tier,
    hint_for,
    is_objective_met,
    is_puzzle_completed,
    next_hint,
    parse_objective,
    progress,
)
from ..puzzles.objectives import ALL_DONE_HINT


@pytest.fixture
def players():
    return [Player(0, "You"), Player(1, "Opponent")]


@pytest.fixture
def territory_board() -> Board:
    """4x4 board, player 0 owns 8 of 16 cells including 2 corners."""
    layout = [{"x": x, "y": y, "orbs": 1, "owner": 0} for y in range(2) for x in range(4)]
    layout.append({"x": 3, "y": 3, "orbs": 1, "owner": 1})
    return Board.from_layout(4, 4, layout)


class TestParseObjective:
    """Tests for building objectives from plain data."""

    def test_basic(self):
        objective = parse_objective({"type": "control_territory", "target": 50})
        assert objective.type == ObjectiveType.CONTROL_TERRITORY
        assert objective.target == 50
        assert objective.player == 0

    def test_eliminate_target_optional(self):
        objective = parse_objective({"type": "eliminate_opponent"})
        assert objective.target_player == 1

    def test_legacy_keys(self):
        """maxMoves, targetTurn and targetPlayer are accepted."""
        assert parse_objective({"type": "efficiency", "maxMoves": 3}).target == 3
        assert parse_objective({"type": "timing", "targetTurn": 5}).target == 5
        objective = parse_objective({"type": "eliminate_opponent", "targetPlayer": 2})
        assert objective.target_player == 2

    def test_unknown_type(self):
        with pytest.raises(ObjectiveError) as exc_info:
            parse_objective({"type": "win_somehow", "target": 1})
        assert "unknown objective type" in exc_info.value.errors[0]

    def test_missing_type(self):
        with pytest.raises(ObjectiveError):
            parse_objective({"target": 1})

    def test_missing_target(self):
        with pytest.raises(ObjectiveError, match="missing objective target"):
            parse_objective({"type": "capture_corners"})

    @pytest.mark.parametrize("target", [-1, "3", True])
    def test_bad_target(self, target):
        with pytest.raises(ObjectiveError):
            parse_objective({"type": "capture_corners", "target": target})

    def test_bad_measure(self):
        with pytest.raises(ObjectiveError):
            parse_objective({"type": "create_chain", "target": 2, "measure": "length"})

    def test_collects_all_errors(self):
        """Every problem is reported at once."""
        with pytest.raises(ObjectiveError) as exc_info:
            parse_objective({"type": "nope", "target": -1, "player": -2})
        assert len(exc_info.value.errors) == 3

    def test_objective_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_objective({})


class TestObjectiveKinds:
    """Tests for each objective kind."""

    def test_control_territory(self, territory_board, players):
        """8 of 16 cells is exactly 50%."""
        met = Objective(ObjectiveType.CONTROL_TERRITORY, target=50)
        unmet = Objective(ObjectiveType.CONTROL_TERRITORY, target=51)
        assert is_objective_met(territory_board, players, met, RunStats())
        assert not is_objective_met(territory_board, players, unmet, RunStats())

    def test_eliminate_opponent(self, players):
        board = Board.from_layout(4, 4, [{"x": 0, "y": 0, "orbs": 1, "owner": 0}])
        objective = Objective(ObjectiveType.ELIMINATE_OPPONENT, target_player=1)
        assert is_objective_met(board, players, objective, RunStats())

    def test_eliminate_opponent_unmet(self, territory_board, players):
        objective = Objective(ObjectiveType.ELIMINATE_OPPONENT, target_player=1)
        assert not is_objective_met(territory_board, players, objective, RunStats())

    def test_create_chain_by_explosions(self, players, empty_board):
        objective = Objective(ObjectiveType.CREATE_CHAIN, target=3)
        assert is_objective_met(empty_board, players, objective, RunStats(max_chain_length=3))
        assert not is_objective_met(empty_board, players, objective, RunStats(max_chain_length=2))

    def test_create_chain_by_rounds(self, players, empty_board):
        objective = Objective(ObjectiveType.CREATE_CHAIN, target=2, measure="rounds")
        assert is_objective_met(empty_board, players, objective, RunStats(max_chain_rounds=2))
        assert not is_objective_met(empty_board, players, objective, RunStats(max_chain_length=5))

    def test_survive_turns(self, territory_board, players):
        objective = Objective(ObjectiveType.SURVIVE_TURNS, target=3)
        assert is_objective_met(territory_board, players, objective, RunStats(turn=3))
        assert not is_objective_met(territory_board, players, objective, RunStats(turn=2))

    def test_survive_turns_fails_when_wiped_out(self, players):
        board = Board.from_layout(4, 4, [
            {"x": 0, "y": 0, "orbs": 1, "owner": 1},
            {"x": 3, "y": 3, "orbs": 1, "owner": 1},
        ])
        objective = Objective(ObjectiveType.SURVIVE_TURNS, target=1)
        assert not is_objective_met(board, players, objective, RunStats(turn=5))

    def test_efficiency(self, players, empty_board):
        objective = Objective(ObjectiveType.EFFICIENCY, target=3)
        assert is_objective_met(empty_board, players, objective, RunStats(moves_played=3))
        assert not is_objective_met(empty_board, players, objective, RunStats(moves_played=4))

    def test_timing(self, players, empty_board):
        objective = Objective(ObjectiveType.TIMING, target=2)
        assert is_objective_met(empty_board, players, objective, RunStats(turn=2))
        assert not is_objective_met(empty_board, players, objective, RunStats(turn=3))

    def test_capture_corners(self, territory_board, players):
        assert is_objective_met(
            territory_board, players, Objective(ObjectiveType.CAPTURE_CORNERS, target=2), RunStats()
        )
        assert not is_objective_met(
            territory_board, players, Objective(ObjectiveType.CAPTURE_CORNERS, target=3), RunStats()
        )

    def test_maximize_explosions(self, players, empty_board):
        objective = Objective(ObjectiveType.MAXIMIZE_EXPLOSIONS, target=4)
        assert is_objective_met(empty_board, players, objective, RunStats(explosions_created=4))
        assert not is_objective_met(empty_board, players, objective, RunStats(explosions_created=3))


class TestCompletion:
    """Tests for puzzle completion, progress and hints."""

    @pytest.fixture
    def objectives(self):
        return [
            Objective(ObjectiveType.CONTROL_TERRITORY, target=50),
            Objective(ObjectiveType.CAPTURE_CORNERS, target=4),
        ]

    def test_all_objectives_required(self, territory_board, players, objectives):
        assert not is_puzzle_completed(territory_board, players, objectives, RunStats())
        assert is_puzzle_completed(territory_board, players, objectives[:1], RunStats())

    def test_no_objectives_is_complete(self, players, empty_board):
        assert is_puzzle_completed(empty_board, players, [], RunStats())
        assert progress(empty_board, players, [], RunStats()) == 100.0

    def test_progress_is_percentage(self, territory_board, players, objectives):
        assert progress(territory_board, players, objectives, RunStats()) == 50.0

    def test_next_hint_targets_first_unmet(self, territory_board, players, objectives):
        hint = next_hint(territory_board, players, objectives, RunStats())
        assert hint == "Capture at least 4 corner positions"

    def test_all_done_hint(self, territory_board, players, objectives):
        assert next_hint(territory_board, players, objectives[:1], RunStats()) == ALL_DONE_HINT

    def test_hint_texts(self):
        assert hint_for(Objective(ObjectiveType.CONTROL_TERRITORY, target=60)) == (
            "Try to control at least 60% of the board"
        )
        assert hint_for(Objective(ObjectiveType.CREATE_CHAIN, target=3, measure="rounds")) == (
            "Create a chain reaction lasting at least 3 rounds"
        )

    def test_description_defaults_to_hint(self):
        objective = Objective(ObjectiveType.TIMING, target=4)
        assert objective.to_dict()["description"] == "Complete the objective by turn 4"


class TestDifficulty:
    """Tests for difficulty scoring."""

    def test_score_formula(self):
        """10 per objective + half the area + move pressure + kind complexity."""
        objectives = [Objective(ObjectiveType.CAPTURE_CORNERS, target=2)]
        # 10 + 12 + (50 - 40) * 2 + 8
        assert difficulty_score(objectives, 6, 4, move_limit=40) == 50

    def test_score_is_clamped(self):
        objectives = [Objective(ObjectiveType.EFFICIENCY, target=1)] * 5
        assert difficulty_score(objectives, 20, 20, move_limit=1) == 100
        assert difficulty_score([], 1, 1) == 1

    @pytest.mark.parametrize("score,tier", [
        (10, "beginner"),
        (20, "beginner"),
        (35, "easy"),
        (60, "medium"),
        (75, "hard"),
        (95, "expert"),
    ])
    def test_tiers(self, score, tier):
        assert difficulty_tier(score) == tier

    def test_board_size_raises_score(self):
        objectives = [Objective(ObjectiveType.ELIMINATE_OPPONENT)]
        assert difficulty_score(objectives, 8, 8) > difficulty_score(objectives, 4, 4)
