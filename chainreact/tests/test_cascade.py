"""
Tests for move application and cascade resolution.

Tests:
- Single explosions (interior, corner, capture)
- Chains and their statistics
- Conservation, determinism and idempotence
- Observable modes and the round cap
"""

import logging

import pytest

from ..engine_core.board import Board, create_board
from ..engine_core.cascade import (
    apply_move,
    iter_cascade,
    resolve_cascade,
    settle,
    simulate_move,
)
from ..engine_core.errors import InvalidMoveError


def drain(generator):
    """Collect the yielded rounds and the returned result of iter_cascade."""
    rounds = []
    while True:
        try:
            rounds.append(next(generator))
        except StopIteration as stop:
            return rounds, stop.value


@pytest.fixture
def chain_board() -> Board:
    """Alice's primed corner next to Bob's primed edge: a two-round chain."""
    return Board.from_layout(4, 4, [
        {"x": 0, "y": 0, "orbs": 1, "owner": 0},
        {"x": 1, "y": 0, "orbs": 2, "owner": 1},
    ])


class TestApplyMove:
    """Tests for placing a single orb."""

    def test_adds_orb_and_owner(self, empty_board):
        board = apply_move(empty_board, 2, 1, 0)
        cell = board.cell(2, 1)
        assert cell.orb_count == 1
        assert cell.owner == 0

    def test_does_not_modify_input(self, empty_board):
        apply_move(empty_board, 2, 1, 0)
        assert empty_board.total_orbs() == 0

    def test_opponent_cell_raises(self):
        """Applying a move the legality check rejects is a contract violation."""
        board = Board.from_layout(4, 4, [{"x": 1, "y": 1, "orbs": 1, "owner": 1}])
        with pytest.raises(InvalidMoveError) as exc_info:
            apply_move(board, 1, 1, 0)
        assert exc_info.value.reason == "cell owned by another player"

    def test_out_of_bounds_raises(self, empty_board):
        with pytest.raises(ValueError):
            apply_move(empty_board, 4, 4, 0)


class TestSingleExplosion:
    """Tests for one cell bursting."""

    def test_interior_explosion(self):
        """A 4-orb interior cell empties and feeds its four neighbors."""
        board = Board.from_layout(4, 4, [{"x": 1, "y": 1, "orbs": 3, "owner": 0}])
        result = resolve_cascade(apply_move(board, 1, 1, 0))
        final = result.final_board

        assert final.cell(1, 1).orb_count == 0
        assert final.cell(1, 1).owner is None
        for x, y in [(0, 1), (2, 1), (1, 0), (1, 2)]:
            assert final.cell(x, y).orb_count == 1
            assert final.cell(x, y).owner == 0
        assert result.round_count == 1
        assert result.explosion_count == 1
        assert not result.is_chain_reaction

    def test_corner_explosion(self):
        """A corner bursts at two orbs into its two neighbors."""
        board = Board.from_layout(4, 4, [{"x": 0, "y": 0, "orbs": 1, "owner": 0}])
        final = resolve_cascade(apply_move(board, 0, 0, 0)).final_board

        assert final.cell(0, 0).is_empty
        assert final.cell(1, 0).orb_count == 1
        assert final.cell(0, 1).orb_count == 1
        assert final.total_orbs() == 2

    def test_explosion_captures_neighbors(self):
        """Neighbors change owner to the exploding player."""
        board = Board.from_layout(4, 4, [
            {"x": 1, "y": 1, "orbs": 3, "owner": 0},
            {"x": 2, "y": 1, "orbs": 2, "owner": 1},
        ])
        final = resolve_cascade(apply_move(board, 1, 1, 0)).final_board

        assert final.cell(2, 1).orb_count == 3
        assert final.cell(2, 1).owner == 0
        assert final.orbs_of(1) == 0

    def test_conservation(self):
        """A single explosion moves orbs without creating or destroying any."""
        board = Board.from_layout(4, 4, [
            {"x": 1, "y": 1, "orbs": 3, "owner": 0},
            {"x": 2, "y": 2, "orbs": 1, "owner": 1},
        ])
        placed = apply_move(board, 1, 1, 0)
        result = resolve_cascade(placed)
        assert result.final_board.total_orbs() == placed.total_orbs() == 5

    def test_explosion_record(self):
        """The trace records position, owner and orbs at burst time."""
        board = Board.from_layout(4, 4, [{"x": 0, "y": 0, "orbs": 1, "owner": 0}])
        result = resolve_cascade(apply_move(board, 0, 0, 0))
        explosion = result.explosion_history[0][0]
        assert explosion.to_dict() == {"x": 0, "y": 0, "owner": 0, "orb_count": 2}


class TestChain:
    """Tests for multi-round cascades."""

    def test_two_round_chain(self, chain_board):
        """The captured edge cell reaches capacity and bursts next round."""
        result = resolve_cascade(apply_move(chain_board, 0, 0, 0))
        final = result.final_board

        assert result.round_count == 2
        assert result.explosion_count == 2
        assert result.is_chain_reaction
        assert final.orbs_of(1) == 0
        assert final.orbs_of(0) == 4
        for x, y in [(0, 0), (0, 1), (2, 0), (1, 1)]:
            assert final.cell(x, y).orb_count == 1
        assert final.cell(1, 0).is_empty
        assert final.is_stable()

    def test_later_exploder_wins_conflicts(self):
        """Two owners feeding one cell in the same round: row-major later wins."""
        board = create_board(3, 3)
        left, right, center = board.index(0, 1), board.index(2, 1), board.index(1, 1)
        board.orbs[left], board.owners[left] = 3, 0
        board.orbs[right], board.owners[right] = 3, 1

        result = resolve_cascade(board)
        final = result.final_board

        assert result.round_count == 1
        assert result.explosion_count == 2
        assert final.orbs[center] == 2
        assert final.owners[center] == 1
        assert final.cell(0, 0).owner == 0
        assert final.cell(2, 2).owner == 1

    def test_determinism(self, chain_board):
        """Identical inputs give identical outputs."""
        placed = apply_move(chain_board, 0, 0, 0)
        first = resolve_cascade(placed)
        second = resolve_cascade(placed)
        assert first.final_board == second.final_board
        assert first.explosion_history == second.explosion_history

    def test_stable_board_is_unchanged(self, chain_board):
        """Resolving a stable board is a no-op."""
        result = resolve_cascade(chain_board)
        assert result.final_board == chain_board
        assert result.round_count == 0
        assert not result.had_explosion


class TestObservableModes:
    """Tests for the generator and callback modes."""

    def test_iter_cascade_matches_resolve(self, chain_board):
        """Iterating yields every round and returns the same result."""
        placed = apply_move(chain_board, 0, 0, 0)
        rounds, result = drain(iter_cascade(placed))

        assert [r.number for r in rounds] == [1, 2]
        assert result.final_board == resolve_cascade(placed).final_board
        assert result.round_count == 2

    def test_round_snapshots_flag_exploding_cells(self, chain_board):
        """Each snapshot is taken before the burst with the exploders marked."""
        placed = apply_move(chain_board, 0, 0, 0)
        rounds, _ = drain(iter_cascade(placed))

        first = rounds[0].board
        assert first.cell(0, 0).exploding
        assert first.cell(0, 0).orb_count == 2
        assert not first.cell(1, 0).exploding

        second = rounds[1].board
        assert second.cell(1, 0).exploding
        assert second.cell(1, 0).orb_count == 3

    def test_on_round_callback(self, chain_board):
        seen = []
        resolve_cascade(apply_move(chain_board, 0, 0, 0), on_round=seen.append)
        assert [len(r.explosions) for r in seen] == [1, 1]

    def test_settle_matches_resolve(self, chain_board):
        """The fast path reaches the same stable board."""
        placed = apply_move(chain_board, 0, 0, 0)
        assert settle(placed) == resolve_cascade(placed).final_board

    def test_simulate_move(self, chain_board):
        board = simulate_move(chain_board, 0, 0, 0)
        assert board.orbs_of(1) == 0
        assert chain_board.orbs_of(1) == 2


class TestRoundCap:
    """Tests for the loop-safety bound."""

    def test_cap_stops_resolution(self, chain_board, caplog):
        """Hitting the cap leaves the board unstable and logs a warning."""
        placed = apply_move(chain_board, 0, 0, 0)
        with caplog.at_level(logging.WARNING, logger="chainreact.engine_core.cascade"):
            result = resolve_cascade(placed, max_rounds=1)

        assert result.capped
        assert result.round_count == 1
        assert not result.final_board.is_stable()
        assert "round cap" in caplog.text

    def test_generous_cap_not_reported(self, chain_board):
        result = resolve_cascade(apply_move(chain_board, 0, 0, 0), max_rounds=10)
        assert not result.capped
