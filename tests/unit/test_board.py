"""
Unit tests for Board class.

Tests mine assignment, flood reveal, flagging, win/lose conditions,
observers, and observation generation.
"""
import pytest
import numpy as np
from hexsweeper import Board, BoardEvent, CellState, GameState


# ============================================================================
# Mine Assignment Tests
# ============================================================================

class TestAssignMines:
    """Test threshold-driven mine assignment."""

    def test_mines_follow_threshold(self, line_board: Board) -> None:
        """Cells with count >= threshold are mines."""
        mines = [cell.id for cell in line_board.cells if cell.is_mine]
        assert mines == [3]

    def test_threshold_is_inclusive(self, registry_factory) -> None:
        """A count equal to the threshold is a mine."""
        board = Board(registry_factory([15, 14.9], []), threshold=15)
        assert board.get_cell(0).is_mine is True
        assert board.get_cell(1).is_mine is False

    def test_adjacent_mine_counts(self, line_board: Board) -> None:
        """Each cell counts its mine neighbors."""
        assert [cell.adjacent_mines for cell in line_board.cells] == [0, 0, 1, 0, 1]

    def test_total_safe_excludes_mines_and_inert(self, numbered_board: Board) -> None:
        """Only playable non-mine cells are safe."""
        assert numbered_board.total_safe == 3

    def test_inert_cells_never_mines(self, registry_factory) -> None:
        """A missing count is never a mine, whatever the threshold."""
        board = Board(registry_factory([None, 0], [(0, 1)]), threshold=0)
        assert board.get_cell(0).is_mine is False
        assert board.get_cell(1).is_mine is True

    def test_assignment_is_idempotent(self, numbered_board: Board) -> None:
        """Assigning twice with the same threshold changes nothing."""
        numbered_board.assign_mines(15)
        first = [(c.is_mine, c.adjacent_mines) for c in numbered_board.cells]
        safe = numbered_board.total_safe
        numbered_board.assign_mines(15)
        second = [(c.is_mine, c.adjacent_mines) for c in numbered_board.cells]
        assert first == second
        assert numbered_board.total_safe == safe

    def test_threshold_reclassification(self, line_board: Board) -> None:
        """Raising the threshold turns a mine safe and updates neighbors."""
        assert line_board.get_cell(3).is_mine is True
        line_board.assign_mines(25)
        assert line_board.get_cell(3).is_mine is False
        assert line_board.get_cell(2).adjacent_mines == 0
        assert line_board.get_cell(4).adjacent_mines == 0
        assert line_board.total_safe == 5

        line_board.assign_mines(15)
        assert line_board.get_cell(3).is_mine is True
        assert line_board.get_cell(2).adjacent_mines == 1

    def test_assignment_resets_play(self, line_board: Board) -> None:
        """Assignment hides all cells and restarts the game."""
        line_board.reveal(3)
        assert line_board.is_lost
        line_board.assign_mines()
        assert line_board.is_playing
        assert line_board.revealed_count == 0
        for cell in line_board.cells:
            assert cell.is_hidden
            assert cell.boom is False

    def test_none_keeps_current_threshold(self, line_board: Board) -> None:
        """Calling without a threshold reuses the last one."""
        line_board.assign_mines(25)
        line_board.assign_mines()
        assert line_board.threshold == 25

    @pytest.mark.parametrize("threshold", [0, 2, 3, 4, 15, 21])
    def test_safe_count_invariant(self, registry_factory, threshold: float) -> None:
        """total_safe equals the number of non-inert non-mine cells."""
        registry = registry_factory([1, 2, None, 3, 20], [(0, 1), (1, 3), (3, 4)])
        board = Board(registry, threshold=threshold)
        expected = sum(1 for c in board.cells if not c.is_zero and not c.is_mine)
        assert board.total_safe == expected


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test revealing cells."""

    def test_reveal_numbered_cell_only(self, numbered_board: Board) -> None:
        """A cell with adjacent mines reveals alone."""
        assert numbered_board.reveal(0) is True
        assert numbered_board.get_cell(0).is_revealed
        assert numbered_board.get_cell(1).is_hidden
        assert numbered_board.revealed_count == 1

    def test_reveal_twice_is_noop(self, numbered_board: Board) -> None:
        """Revealing a revealed cell changes nothing."""
        numbered_board.reveal(0)
        assert numbered_board.reveal(0) is False
        assert numbered_board.revealed_count == 1

    def test_reveal_flagged_is_noop(self, numbered_board: Board) -> None:
        """Flagged cells must be unflagged first."""
        numbered_board.flag(0)
        assert numbered_board.reveal(0) is False
        assert numbered_board.get_cell(0).is_flagged

    def test_reveal_unknown_id_is_noop(self, numbered_board: Board) -> None:
        """Ids outside the registry are ignored."""
        assert numbered_board.reveal(99) is False

    def test_reveal_inert_is_noop(self, numbered_board: Board) -> None:
        """Inert cells cannot be revealed."""
        assert numbered_board.reveal(4) is False
        assert numbered_board.get_cell(4).is_hidden

    def test_revealed_count_monotonic(self, line_board: Board) -> None:
        """The counter only grows during play."""
        seen = [line_board.revealed_count]
        for cell_id in (4, 0, 2, 1):
            line_board.reveal(cell_id)
            seen.append(line_board.revealed_count)
        assert seen == sorted(seen)
        assert seen[-1] <= line_board.total_safe


# ============================================================================
# Flood Reveal Tests
# ============================================================================

class TestFloodReveal:
    """Test breadth-first flood reveal."""

    def test_flood_stops_at_numbered_boundary(self, line_board: Board) -> None:
        """Zero cells propagate, numbered cells are revealed but stop."""
        line_board.reveal(0)
        states = [cell.is_revealed for cell in line_board.cells]
        assert states == [True, True, True, False, False]
        assert line_board.revealed_count == 3
        assert line_board.is_playing

    def test_flood_never_reveals_mines(self, line_board: Board) -> None:
        """The mine behind the boundary stays hidden."""
        line_board.reveal(1)
        assert line_board.get_cell(3).is_hidden
        assert line_board.get_cell(3).boom is False

    def test_flood_terminates_on_cycles(self, mine_free_cycle: Board) -> None:
        """Cyclic adjacency is visited once per cell."""
        mine_free_cycle.reveal(0)
        assert all(cell.is_revealed for cell in mine_free_cycle.cells)
        assert mine_free_cycle.revealed_count == 6
        assert mine_free_cycle.is_won

    def test_flood_skips_inert_cells(self, registry_factory) -> None:
        """Inert cells neither reveal nor carry the flood."""
        board = Board(registry_factory([1, None, 1], [(0, 1), (1, 2)]), threshold=15)
        board.reveal(0)
        assert board.get_cell(1).is_hidden
        assert board.get_cell(2).is_hidden
        assert board.revealed_count == 1

    def test_flood_reveals_flagged_safe_cells(self, registry_factory) -> None:
        """A flag on a safe cell does not stop the flood."""
        board = Board(registry_factory([1, 1, 1], [(0, 1), (1, 2)]), threshold=15)
        board.flag(1)
        board.reveal(0)
        assert board.get_cell(1).is_revealed
        assert board.get_cell(2).is_revealed
        assert board.revealed_count == 3

    def test_flood_counts_each_cell_once(self, registry_factory) -> None:
        """Dense graphs never double count revealed cells."""
        edges = [(a, b) for a in range(5) for b in range(a + 1, 5)]
        board = Board(registry_factory([1] * 5, edges), threshold=15)
        board.reveal(2)
        assert board.revealed_count == 5


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flagging behavior."""

    def test_flag_hidden_cell_succeeds(self, numbered_board: Board) -> None:
        """Flagging hidden cell should succeed."""
        assert numbered_board.flag(0) is True
        assert numbered_board.get_cell(0).state == CellState.FLAGGED

    def test_unflag_returns_to_hidden(self, numbered_board: Board) -> None:
        """Unflagging should return cell to hidden."""
        numbered_board.flag(0)
        numbered_board.flag(0)
        assert numbered_board.get_cell(0).is_hidden is True

    def test_flag_revealed_cell_fails(self, numbered_board: Board) -> None:
        """Cannot flag a revealed cell."""
        numbered_board.reveal(0)
        assert numbered_board.flag(0) is False

    def test_flag_inert_cell_fails(self, numbered_board: Board) -> None:
        """Inert cells cannot be flagged."""
        assert numbered_board.flag(4) is False
        assert numbered_board.get_cell(4).is_hidden

    def test_flag_mine_then_reveal_is_noop(self, numbered_board: Board) -> None:
        """A flagged mine is protected from a direct reveal."""
        numbered_board.flag(3)
        assert numbered_board.reveal(3) is False
        assert numbered_board.is_playing


# ============================================================================
# Win/Lose Condition Tests
# ============================================================================

class TestGameEndConditions:
    """Test win and lose conditions."""

    def test_win_after_last_safe_reveal(self, numbered_board: Board) -> None:
        """Revealing three of three safe cells wins on the third."""
        numbered_board.reveal(0)
        assert numbered_board.is_playing
        numbered_board.reveal(1)
        assert numbered_board.is_playing
        numbered_board.reveal(2)
        assert numbered_board.is_won
        assert numbered_board.revealed_count == numbered_board.total_safe

    def test_reveal_mine_loses_game(self, numbered_board: Board) -> None:
        """Revealing a mine ends the game and exposes the board."""
        numbered_board.reveal(0)
        assert numbered_board.reveal(3) is True
        assert numbered_board.is_lost
        assert numbered_board.revealed_count == numbered_board.total_safe

        cells = numbered_board.cells
        assert [cell.boom for cell in cells] == [False, False, False, True, False]
        assert all(cell.is_revealed for cell in cells if not cell.is_zero)
        assert cells[4].is_hidden

    def test_loss_reveals_flagged_cells(self, numbered_board: Board) -> None:
        """Flags are cleared when the board is exposed."""
        numbered_board.flag(1)
        numbered_board.reveal(3)
        assert numbered_board.get_cell(1).is_revealed

    def test_only_triggered_mine_booms(self, registry_factory) -> None:
        """Other mines are revealed without boom."""
        board = Board(registry_factory([20, 30, 1], [(0, 2), (1, 2)]), threshold=15)
        board.reveal(1)
        assert board.get_cell(1).boom is True
        assert board.get_cell(0).boom is False
        assert board.get_cell(0).is_revealed

    def test_cannot_act_after_loss(self, line_board: Board) -> None:
        """Reveal and flag are locked once the game is lost."""
        line_board.reveal(3)
        assert line_board.reveal(0) is False
        assert line_board.flag(0) is False
        assert line_board.is_lost

    def test_cannot_act_after_win(self, mine_free_cycle: Board) -> None:
        """Reveal and flag are locked once the game is won."""
        mine_free_cycle.reveal(0)
        assert mine_free_cycle.flag(1) is False
        assert mine_free_cycle.reveal(1) is False

    def test_no_win_without_safe_cells(self, registry_factory) -> None:
        """A board of only mines and inert cells is never won."""
        board = Board(registry_factory([20, None], [(0, 1)]), threshold=15)
        assert board.total_safe == 0
        assert board.is_playing
        assert board.check_win() is False
        assert board.is_playing

    def test_check_win_reports_state(self, numbered_board: Board) -> None:
        """check_win is False until every safe cell is revealed."""
        numbered_board.reveal(0)
        numbered_board.reveal(1)
        assert numbered_board.check_win() is False
        numbered_board.reveal(2)
        assert numbered_board.check_win() is True

    def test_check_win_after_loss(self, numbered_board: Board) -> None:
        """A lost game never turns into a win."""
        numbered_board.reveal(3)
        assert numbered_board.check_win() is False
        assert numbered_board.is_lost

    def test_outcome_messages(self, numbered_board: Board) -> None:
        """Finished games expose a title and message."""
        assert numbered_board.outcome_message() is None
        numbered_board.reveal(3)
        assert numbered_board.outcome_message() == (
            "Game Over", "You clicked on a mine."
        )


# ============================================================================
# Observer Tests
# ============================================================================

class TestObservers:
    """Test board events for presentation code."""

    def test_reveal_event_lists_changed_cells(self, line_board: Board) -> None:
        """Flood reveal reports every revealed cell."""
        events = []
        line_board.subscribe(events.append)
        line_board.reveal(0)
        assert events[0] == BoardEvent("reveal", (0, 1, 2), GameState.PLAYING)

    def test_loss_and_win_events(self, numbered_board: Board) -> None:
        """Terminal transitions are announced."""
        events = []
        numbered_board.subscribe(events.append)
        for cell_id in (0, 1, 2):
            numbered_board.reveal(cell_id)
        assert [event.kind for event in events] == ["reveal", "reveal", "reveal", "won"]
        assert events[-1].game_state == GameState.WON

    def test_ignored_actions_emit_nothing(self, numbered_board: Board) -> None:
        """No-op actions do not notify listeners."""
        events = []
        numbered_board.subscribe(events.append)
        numbered_board.reveal(4)
        numbered_board.flag(4)
        assert events == []

    def test_unsubscribe(self, numbered_board: Board) -> None:
        """Removed listeners receive nothing further."""
        events = []
        unsubscribe = numbered_board.subscribe(events.append)
        numbered_board.flag(0)
        unsubscribe()
        numbered_board.flag(0)
        assert [event.kind for event in events] == ["flag"]

    def test_reset_event(self, numbered_board: Board) -> None:
        """Reassignment reports all cells."""
        events = []
        numbered_board.subscribe(events.append)
        numbered_board.reset()
        assert events[0].kind == "reset"
        assert events[0].cell_ids == (0, 1, 2, 3, 4)


# ============================================================================
# Observation Tests
# ============================================================================

class TestObservation:
    """Test observation vector and valid actions."""

    def test_observation_shape_and_dtype(self, numbered_board: Board) -> None:
        """One int8 entry per cell."""
        obs = numbered_board.get_observation()
        assert obs.shape == (5,)
        assert obs.dtype == np.int8

    def test_initial_observation(self, numbered_board: Board) -> None:
        """Playable cells are hidden, inert cells are marked."""
        obs = numbered_board.get_observation()
        assert obs.tolist() == [-1, -1, -1, -1, -3]

    def test_observation_after_moves(self, numbered_board: Board) -> None:
        """Revealed counts and flags show up."""
        numbered_board.reveal(0)
        numbered_board.flag(1)
        assert numbered_board.get_observation().tolist() == [1, -2, -1, -1, -3]

    def test_valid_actions(self, numbered_board: Board) -> None:
        """Only hidden playable cells are valid."""
        numbered_board.reveal(0)
        numbered_board.flag(1)
        assert numbered_board.get_valid_actions() == [2, 3]

    def test_status_text(self, numbered_board: Board) -> None:
        """Progress line reports revealed and safe counts."""
        numbered_board.reveal(0)
        assert numbered_board.status_text() == "Playing: 1/3 safe cells revealed"
