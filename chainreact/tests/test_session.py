"""
Tests for sessions, the game loop and result publishing.

Tests:
- Session lifecycle
- Human moves with automatic AI replies
- Undo history
- Summaries, points and sink isolation
"""

import logging

import pytest

from ..engine_core.action import ErrorCode
from ..engine_core.errors import InvalidBoardError
from ..engine_core.reducer import pause, start_run
from ..engine_core.state import GameStatus
from ..session import (
    Achievement,
    GameLoop,
    GameSummary,
    InMemoryResultSink,
    LoopState,
    NullResultSink,
    SessionManager,
    SessionState,
    publish_result,
    summarize_game,
)


@pytest.fixture
def manager(sink):
    return SessionManager(sink=sink)


@pytest.fixture
def session(manager):
    return manager.create_session(4, 4, ai_difficulty=1, seed=7)


class TestSessionManager:
    """Tests for session lifecycle."""

    def test_create_session(self, session):
        assert session.state == SessionState.ACTIVE
        assert session.run.num_players == 2
        assert set(session.bots) == {1}
        assert session.run.players[1].is_ai
        assert session.metadata["ai_difficulty"] == 1
        assert session.run.game_id == session.session_id

    def test_bad_ai_seat(self, manager):
        with pytest.raises(ValueError, match="seat"):
            manager.create_session(4, 4, ai_seats=(2,))

    def test_bad_difficulty(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(4, 4, ai_difficulty=9)

    def test_bad_board(self, manager):
        with pytest.raises(InvalidBoardError):
            manager.create_session(0, 4)

    def test_get_and_end(self, manager, session):
        assert manager.get_session(session.session_id) is session
        assert manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert session.state == SessionState.ABANDONED
        assert not manager.end_session(session.session_id)

    def test_list_active(self, manager, session):
        other = manager.create_session(3, 3, ai_difficulty=1)
        assert set(manager.list_active_sessions()) == {session.session_id, other.session_id}

    def test_cleanup_stale(self, manager, session):
        """Only finished sessions past the age limit are removed."""
        fresh = manager.create_session(3, 3, ai_difficulty=1)
        session.state = SessionState.GAME_OVER
        session.created_at -= 7200
        fresh.created_at -= 7200

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(session.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh


class TestGameLoop:
    """Tests for turn processing."""

    def test_human_move_triggers_ai_reply(self, session, sink):
        loop = GameLoop(session, sink)
        result = loop.play_human_move(0, 0)

        assert result.success
        assert len(result.moves) == 2
        assert result.moves[0] == {"x": 0, "y": 0, "player": 0, "explosions": 0}
        assert result.moves[1]["player"] == 1
        assert "explanation" in result.moves[1]
        assert result.loop_state == LoopState.WAITING_HUMAN_MOVE
        assert session.run.current_player_idx == 0
        assert session.run.board.total_orbs() == 2

    def test_rejected_move_keeps_state(self, session):
        loop = GameLoop(session)
        result = loop.play_human_move(7, 7)
        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_MOVE
        assert session.run.board.total_orbs() == 0
        assert len(session.history) == 0

    def test_ai_moves_first(self, manager):
        """With the AI in seat 0, the human must wait for it."""
        session = manager.create_session(4, 4, player_names=("AI", "Player"), ai_seats=(0,), ai_difficulty=1)
        loop = GameLoop(session)
        assert loop.state == LoopState.RUNNING_AI

        blocked = loop.play_human_move(0, 0)
        assert not blocked.success
        assert blocked.error_code == ErrorCode.NOT_YOUR_TURN

        result = loop.run_ai_turns()
        assert len(result.moves) == 1
        assert loop.state == LoopState.WAITING_HUMAN_MOVE

    def test_paused_state(self, session):
        session.run = pause(session.run).new_state
        loop = GameLoop(session)
        assert loop.state == LoopState.PAUSED
        result = loop.play_human_move(0, 0)
        assert result.error_code == ErrorCode.GAME_NOT_ACTIVE

    def test_ai_versus_ai(self, manager):
        session = manager.create_session(3, 3, player_names=("Red", "Blue"), ai_seats=(0, 1), ai_difficulty=1, seed=3)
        result = GameLoop(session).run_ai_turns(max_moves=200)

        assert 0 < len(result.moves) <= 200
        if session.run.is_over:
            assert result.winner in (0, 1)
            assert result.loop_state == LoopState.GAME_OVER


class TestUndo:
    """Tests for the undo history."""

    def test_undo_reverts_move_and_reply(self, session):
        loop = GameLoop(session)
        loop.play_human_move(0, 0)
        assert session.undo()
        assert session.run.board.total_orbs() == 0
        assert session.run.current_player_idx == 0

    def test_nothing_to_undo(self, session):
        assert not session.undo()

    def test_history_is_bounded(self, session):
        for _ in range(session.history.maxlen + 3):
            session.push_snapshot(session.run)
        assert len(session.history) == session.history.maxlen


class TestGameOver:
    """Tests for finishing a game."""

    @pytest.fixture
    def final_session(self, session, winning_run):
        """Session one human move from winning."""
        session.run = start_run(winning_run.board, ["Player", "AI"], ai_players=[1], game_id=session.session_id)
        return session

    def test_win_publishes_summary(self, final_session, sink):
        loop = GameLoop(final_session, sink)
        result = loop.play_human_move(0, 0)

        assert result.loop_state == LoopState.GAME_OVER
        assert result.winner == 0
        assert final_session.state == SessionState.GAME_OVER
        summary = result.summary
        assert summary.human_won
        assert summary.points == 50
        assert summary.achievements == [Achievement.AI_VICTORY]
        assert sink.records == [summary]

    def test_summary_published_once(self, final_session, sink):
        loop = GameLoop(final_session, sink)
        loop.play_human_move(0, 0)
        again = loop.run_ai_turns()
        assert again.summary is None
        assert len(sink.records) == 1

    def test_undo_out_of_game_over_publishes_again(self, final_session, sink):
        """A finished game that is undone and finished again reports again."""
        loop = GameLoop(final_session, sink)
        loop.play_human_move(0, 0)
        assert final_session.undo()
        assert not final_session.summary_published
        assert final_session.state == SessionState.ACTIVE

        replay = loop.play_human_move(0, 0)
        assert replay.summary is not None
        assert len(sink.records) == 2


class TestResults:
    """Tests for summaries and sinks."""

    def test_loss_against_ai(self, winning_run):
        run = start_run(winning_run.board, ["Player", "AI"], ai_players=[1])
        run = run._copy_with(status=GameStatus.GAME_OVER, winner=1)
        summary = summarize_game(run, human_player=0)
        assert not summary.human_won
        assert summary.vs_ai
        assert summary.points == 10
        assert summary.winner_name == "AI"

    def test_no_points_without_ai(self, winning_run):
        run = winning_run._copy_with(status=GameStatus.GAME_OVER, winner=0)
        summary = summarize_game(run)
        assert summary.human_won
        assert summary.points == 0
        assert summary.to_dict()["kind"] == "game"

    def test_publish_to_memory(self):
        sink = InMemoryResultSink()
        summary = GameSummary("g", 0, "A", True, True, 5, points=50, achievements=["AI_VICTORY"])
        assert publish_result(sink, summary)
        assert publish_result(sink, summary)
        assert sink.total_points() == 100
        assert sink.achievements() == ["AI_VICTORY"]

    def test_publish_without_sink(self):
        summary = GameSummary("g", None, None, False, False, 0)
        assert not publish_result(None, summary)
        assert publish_result(NullResultSink(), summary)

    def test_sink_failure_is_isolated(self, caplog):
        """A failing sink is logged, never raised."""
        class BrokenSink(NullResultSink):
            def record(self, summary):
                raise RuntimeError("ledger offline")

        summary = GameSummary("g", 0, "A", True, True, 5)
        with caplog.at_level(logging.ERROR):
            assert not publish_result(BrokenSink(), summary)
        assert "ledger offline" in caplog.text
