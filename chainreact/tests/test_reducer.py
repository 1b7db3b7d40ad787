"""
Tests for the reducer (run transitions).

Tests:
- Move application and turn order
- Validation
- Elimination and game over
- Pause, resume and restart
"""

import pytest

from ..engine_core.action import ErrorCode, Move
from ..engine_core.board import Board
from ..engine_core.reducer import Reducer, new_game, place_orb, pause, resume, restart, start_run
from ..engine_core.state import GameStatus, Player, check_elimination


class TestNewGame:
    """Tests for starting runs."""

    def test_initial_state(self, two_player_run):
        run = two_player_run
        assert run.turn == 1
        assert run.current_player.name == "Alice"
        assert run.status == GameStatus.PLAYING
        assert run.winner is None
        assert run.board.total_orbs() == 0

    def test_needs_two_players(self):
        with pytest.raises(ValueError):
            new_game(4, 4, ["Solo"])

    def test_ai_flags(self):
        run = new_game(4, 4, ["Human", "AI"], ai_players=[1])
        assert not run.players[0].is_ai
        assert run.players[1].is_ai

    def test_to_dict(self, two_player_run):
        data = two_player_run.to_dict()
        assert data["game_id"] == "test_game"
        assert data["status"] == "playing"
        assert data["moves_played"] == 0
        assert len(data["board"]) == 4


class TestPlaceOrb:
    """Tests for the place_orb transition."""

    def test_move_advances_turn(self, two_player_run):
        """A legal move passes the turn to the next seat."""
        result = place_orb(two_player_run, Move(0, 0, 0))

        assert result.success
        run = result.new_state
        assert run.board.cell(0, 0).owner == 0
        assert run.current_player_idx == 1
        assert run.turn == 2
        assert run.move_history == [Move(0, 0, 0)]
        assert run.last_cascade is result.cascade

    def test_input_run_unchanged(self, two_player_run):
        place_orb(two_player_run, Move(0, 0, 0))
        assert two_player_run.board.total_orbs() == 0
        assert two_player_run.current_player_idx == 0

    def test_wrong_player_rejected(self, two_player_run):
        result = place_orb(two_player_run, Move(0, 0, 1))
        assert not result.success
        assert result.error_code == ErrorCode.NOT_YOUR_TURN
        assert "turn" in result.error.lower()

    def test_opponent_cell_rejected(self, two_player_run):
        run = place_orb(two_player_run, Move(1, 1, 0)).new_state
        result = place_orb(run, Move(1, 1, 1))
        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_MOVE

    def test_out_of_bounds_rejected(self, two_player_run):
        result = place_orb(two_player_run, Move(9, 9, 0))
        assert result.error_code == ErrorCode.ILLEGAL_MOVE

    def test_unknown_player_rejected(self, two_player_run):
        result = place_orb(two_player_run, Move(0, 0, 5))
        assert result.error_code == ErrorCode.ILLEGAL_MOVE

    def test_keep_turn(self, two_player_run):
        """keep_turn leaves the same seat to move."""
        result = Reducer().place_orb(two_player_run, Move(0, 0, 0), keep_turn=True)
        assert result.new_state.current_player_idx == 0
        assert result.new_state.turn == 2

    def test_state_changes_describe_move(self, two_player_run):
        result = place_orb(two_player_run, Move(2, 3, 0))
        assert result.state_changes[0] == "Alice placed an orb at (2, 3)"


class TestElimination:
    """Tests for elimination and game over."""

    def test_grace_window_protects_unplaced_player(self, two_player_run):
        """Bob owns nothing after Alice's first move but is still in."""
        result = place_orb(two_player_run, Move(0, 0, 0))
        assert result.eliminated == []
        assert not result.new_state.players[1].eliminated
        assert result.new_state.status == GameStatus.PLAYING

    def test_wipe_out_ends_game(self, winning_run):
        """Capturing every opponent orb eliminates them and ends the game."""
        result = place_orb(winning_run, Move(0, 0, 0))

        run = result.new_state
        assert result.eliminated == [1]
        assert run.players[1].eliminated
        assert run.status == GameStatus.GAME_OVER
        assert run.winner == 0
        assert "Game over" in result.state_changes

    def test_no_moves_after_game_over(self, winning_run):
        run = place_orb(winning_run, Move(0, 0, 0)).new_state
        result = place_orb(run, Move(3, 3, 0))
        assert result.error_code == ErrorCode.GAME_NOT_ACTIVE

    def test_check_elimination_past_grace(self):
        board = Board.from_layout(4, 4, [
            {"x": 0, "y": 0, "orbs": 1, "owner": 0},
            {"x": 3, "y": 3, "orbs": 1, "owner": 0},
        ])
        players = [Player(0, "A"), Player(1, "B")]
        assert check_elimination(board, players) == [1]

    def test_check_elimination_inside_custom_grace(self):
        """Inside the grace window a player with somewhere to play survives."""
        board = Board.from_layout(4, 4, [
            {"x": 0, "y": 0, "orbs": 1, "owner": 0},
            {"x": 3, "y": 3, "orbs": 1, "owner": 0},
        ])
        players = [Player(0, "A"), Player(1, "B")]
        assert check_elimination(board, players, grace_orbs=10) == []

    def test_no_legal_moves_eliminates_inside_grace(self):
        """A player with no orbs and nowhere to play is out even early."""
        board = Board.from_layout(2, 1, [
            {"x": 0, "y": 0, "orbs": 1, "owner": 0},
            {"x": 1, "y": 0, "orbs": 1, "owner": 0},
        ])
        players = [Player(0, "A"), Player(1, "B")]
        assert check_elimination(board, players, grace_orbs=10) == [1]

    def test_elimination_is_permanent(self):
        board = Board.from_layout(4, 4, [{"x": 1, "y": 1, "orbs": 2, "owner": 1}])
        players = [Player(0, "A"), Player(1, "B", eliminated=True)]
        assert 1 in check_elimination(board, players)

    def test_turn_order_skips_eliminated(self):
        board = Board.from_layout(4, 4, [
            {"x": 0, "y": 0, "orbs": 1, "owner": 0},
            {"x": 3, "y": 3, "orbs": 1, "owner": 2},
        ])
        run = start_run(board, ["A", "B", "C"])
        run = run._copy_with(players=[run.players[0], run.players[1].with_eliminated(), run.players[2]])

        result = place_orb(run, Move(1, 1, 0))
        assert result.new_state.current_player_idx == 2


class TestRunControls:
    """Tests for pause, resume and restart."""

    def test_pause_blocks_moves(self, two_player_run):
        paused = pause(two_player_run).new_state
        assert paused.status == GameStatus.PAUSED

        result = place_orb(paused, Move(0, 0, 0))
        assert result.error_code == ErrorCode.GAME_NOT_ACTIVE

    def test_resume(self, two_player_run):
        paused = pause(two_player_run).new_state
        resumed = resume(paused).new_state
        assert resumed.status == GameStatus.PLAYING
        assert place_orb(resumed, Move(0, 0, 0)).success

    def test_cannot_pause_twice(self, two_player_run):
        paused = pause(two_player_run).new_state
        assert not pause(paused).success

    def test_cannot_resume_running_game(self, two_player_run):
        result = resume(two_player_run)
        assert not result.success
        assert result.error_code == ErrorCode.GAME_NOT_ACTIVE

    def test_restart_after_game_over(self, winning_run):
        """Restart gives an empty board with everyone back in."""
        finished = place_orb(winning_run, Move(0, 0, 0)).new_state
        fresh = restart(finished).new_state

        assert fresh.status == GameStatus.PLAYING
        assert fresh.board.total_orbs() == 0
        assert fresh.turn == 1
        assert fresh.current_player_idx == 0
        assert not any(p.eliminated for p in fresh.players)
        assert fresh.game_id == finished.game_id
