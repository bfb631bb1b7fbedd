"""
Tests for undo/redo state management.

Covers:
- HistoryManager as a standalone state stack
- Deep copy isolation of committed and returned snapshots
- Redo tail truncation
- Cap eviction
- Listener notifications, including failing listeners
- Session-level undo/redo through the model snapshot API
"""
import pytest

from utils.history_manager import HistoryManager, HistoryEntry


# ══════════════════════════════════════════════════════════════════════════
# HistoryManager (standalone state stack)
# ══════════════════════════════════════════════════════════════════════════

class TestHistoryManagerStack:
    """Unit tests for the generic HistoryManager, no model involved."""

    @pytest.fixture
    def hm(self):
        return HistoryManager()

    # ── basic operations ────────────────────────────────────────────

    def test_initial_state_empty(self, hm):
        assert not hm.can_undo()
        assert not hm.can_redo()
        assert hm.current_index == -1
        assert len(hm) == 0

    def test_single_commit_no_undo(self, hm):
        hm.commit([1], "first")
        assert not hm.can_undo()
        assert not hm.can_redo()

    def test_undo_returns_previous(self, hm):
        hm.commit([1], "first")
        hm.commit([2], "second")
        assert hm.undo() == [1]
        assert hm.redo() == [2]

    def test_undo_at_start_returns_none(self, hm):
        hm.commit([1], "first")
        assert hm.undo() is None

    def test_redo_at_end_returns_none(self, hm):
        hm.commit([1], "first")
        assert hm.redo() is None

    def test_commit_truncates_redo_tail(self, hm):
        for v in range(4):
            hm.commit([v], f"v{v}")
        hm.undo()
        hm.undo()
        hm.commit(["branch"], "branch")
        assert not hm.can_redo()
        assert [entry.snapshot for entry in hm.history] == [[0], [1], ["branch"]]

    def test_entries_carry_metadata(self, hm):
        first = hm.commit([1], "first")
        second = hm.commit([2], "second")
        assert isinstance(first, HistoryEntry)
        assert first.description == "first"
        assert second.timestamp >= first.timestamp

    def test_clear(self, hm):
        hm.commit([1])
        hm.commit([2])
        hm.clear()
        assert len(hm) == 0
        assert not hm.can_undo()

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            HistoryManager(max_history=0)

    # ── deep copy isolation ─────────────────────────────────────────

    def test_committed_state_is_deep_copy(self, hm):
        data = [{"nested": [1, 2]}]
        hm.commit(data, "save")
        data[0]["nested"].append(99)
        assert hm.current_snapshot() == [{"nested": [1, 2]}]

    def test_returned_state_is_deep_copy(self, hm):
        hm.commit([{"v": 1}], "a")
        hm.commit([{"v": 2}], "b")
        state = hm.undo()
        state[0]["v"] = 999
        hm.redo()
        assert hm.undo() == [{"v": 1}]

    # ── undo/redo symmetry ──────────────────────────────────────────

    @pytest.mark.parametrize("k", [1, 3, 7])
    def test_k_undos_then_k_redos_restore(self, hm, k):
        for v in range(10):
            hm.commit([v])
        before = hm.current_snapshot()
        for _ in range(k):
            hm.undo()
        state = None
        for _ in range(k):
            state = hm.redo()
        assert state == before

    # ── trimming ────────────────────────────────────────────────────

    def test_cap_evicts_oldest_fifo(self, hm):
        for v in range(50):
            hm.commit([v], f"v{v}")
        assert len(hm) == 30
        assert hm.history[0].snapshot == [20]
        assert hm.history[-1].snapshot == [49]
        assert hm.current_index == 29

    def test_undo_stops_at_oldest_kept(self):
        hm = HistoryManager(max_history=3)
        for v in range(5):
            hm.commit([v])
        assert hm.undo() == [3]
        assert hm.undo() == [2]
        assert hm.undo() is None

    # ── descriptions ────────────────────────────────────────────────

    def test_descriptions(self, hm):
        hm.commit([0], "start")
        hm.commit([1], "add rose")
        assert hm.get_current_description() == "add rose"
        assert hm.get_undo_description() == "add rose"
        hm.undo()
        assert hm.get_redo_description() == "add rose"
        assert hm.get_undo_description() == ""


# ══════════════════════════════════════════════════════════════════════════
# Listeners
# ══════════════════════════════════════════════════════════════════════════

class TestListeners:

    def test_listener_notified(self):
        hm = HistoryManager()
        calls = []
        hm.add_listener(lambda u, r: calls.append((u, r)))
        hm.commit([0])
        hm.commit([1])
        hm.undo()
        assert calls == [(False, False), (True, False), (False, True)]

    def test_remove_listener(self):
        hm = HistoryManager()
        calls = []
        listener = lambda u, r: calls.append((u, r))
        hm.add_listener(listener)
        hm.remove_listener(listener)
        hm.commit([0])
        assert calls == []

    def test_failing_listener_does_not_break_commit(self, caplog):
        hm = HistoryManager()
        calls = []

        def broken(can_undo, can_redo):
            raise RuntimeError("boom")

        hm.add_listener(broken)
        hm.add_listener(lambda u, r: calls.append(u))
        hm.commit([0])
        hm.commit([1])
        assert len(hm) == 2
        assert calls == [False, True]
        assert "Error notifying history listener" in caplog.text


# ══════════════════════════════════════════════════════════════════════════
# Session undo/redo
# ══════════════════════════════════════════════════════════════════════════

class TestSessionHistory:

    def test_initial_empty_commit(self, session):
        assert len(session.history) == 1
        assert not session.can_undo()

    def test_first_action_undoable(self, session, red_rose):
        session.add(red_rose)
        assert session.undo()
        assert session.model.item_count == 0
        assert not session.undo()

    def test_k_undos_then_k_redos_restore_arrangement(self, session, red_rose, eucalyptus):
        first = session.add(red_rose)
        session.add(eucalyptus)
        session.rotate_item(first)
        session.duplicate_item(first)
        session.remove(first)
        before = session.model.get_snapshot()
        for _ in range(4):
            session.undo()
        assert session.model.get_snapshot() != before
        for _ in range(4):
            session.redo()
        assert session.model.get_snapshot() == before

    def test_undo_restores_same_ids(self, session, red_rose):
        instance_id = session.add(red_rose)
        rotation = session.model.get_item(instance_id).rotation
        session.rotate_item(instance_id)
        session.undo()
        assert session.model.has_item(instance_id)
        assert session.model.get_item(instance_id).rotation == rotation

    def test_no_commit_while_applying_history(self, session, red_rose):
        session.add(red_rose)
        count = len(session.history)
        session._is_applying_history = True
        session.add(red_rose)
        session._is_applying_history = False
        assert len(session.history) == count

    def test_restore_failure_resets_guard(self, session, red_rose):
        session.add(red_rose)
        with pytest.raises(ValueError):
            session._restore_state([{'x': 1.0}])
        assert session._is_applying_history is False

    def test_noop_actions_do_not_commit(self, session):
        session.update('missing', rotation=5)
        session.remove('missing')
        session.rotate_item('missing')
        session.duplicate_item('missing')
        session.clear()
        assert len(session.history) == 1

    def test_style_changes_not_in_history(self, session, red_rose):
        session.add(red_rose)
        count = len(session.history)
        session.set_wrap_style('fabric')
        session.set_ribbon_color('gold')
        session.set_size('large')
        assert len(session.history) == count
        session.undo()
        assert session.model.wrap_style == 'fabric'

    def test_sessions_do_not_share_history(self, red_rose):
        from session import BuilderSession
        a, b = BuilderSession(), BuilderSession()
        a.add(red_rose)
        assert len(a.history) == 2
        assert len(b.history) == 1
        assert b.model.item_count == 0

    def test_history_cap_from_config(self, red_rose):
        from session import BuilderSession
        from models.config import EngineConfig
        s = BuilderSession(EngineConfig(history_cap=5))
        for _ in range(10):
            s.add(red_rose)
        assert len(s.history) == 5
