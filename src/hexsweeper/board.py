"""
Board module for hex minesweeper.

Implements mine assignment by count threshold, adjacency counts, flood
reveal over the neighbor graph, flagging, and win/lose detection.
Presentation code observes the board through BoardEvent listeners.
"""
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple

import numpy as np
import structlog

from .cell import Cell, CellState
from .registry import CellRegistry

logger = structlog.get_logger()


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


DEFAULT_THRESHOLD = 15

OUTCOME_MESSAGES = {
    GameState.WON: ("Nice!", "You revealed all safe cells."),
    GameState.LOST: ("Game Over", "You clicked on a mine."),
}


@dataclass(frozen=True)
class BoardEvent:
    """
    Notification of a board state change.

    Attributes:
        kind: One of "reset", "reveal", "flag", "lost", "won".
        cell_ids: Cells whose state changed.
        game_state: Game state after the change.
    """

    kind: str
    cell_ids: Tuple[int, ...]
    game_state: GameState


Listener = Callable[[BoardEvent], None]


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Hex minesweeper game board.

    Owns the play state of every cell in the registry together with the
    revealed and safe counters. Mines are fully determined by the count
    threshold, so there is no random placement.
    """

    registry: CellRegistry
    threshold: float = DEFAULT_THRESHOLD
    _game_state: GameState = GameState.PLAYING
    _revealed_count: int = 0
    _total_safe: int = 0
    _listeners: List[Listener] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Assign mines for the initial threshold."""
        self.assign_mines()

    # ========================================================================
    # Mine Assignment (Low-level)
    # ========================================================================

    def assign_mines(self, threshold: Optional[float] = None) -> None:
        """
        Recompute mines and reset play state.

        Every cell with a count at or above the threshold becomes a mine,
        adjacency counts are recomputed, all cells are hidden again, and
        the game restarts. Repeating with the same threshold yields the
        same board.

        Args:
            threshold: New mine threshold; keeps the current one if None.
        """
        if threshold is not None:
            self.threshold = threshold

        for cell in self.registry:
            cell.reset(cell.count is not None and cell.count >= self.threshold)
        self._calculate_adjacent_mines()

        self._revealed_count = 0
        self._total_safe = sum(
            1 for cell in self.registry if not cell.is_zero and not cell.is_mine
        )
        self._game_state = GameState.PLAYING

        logger.info(
            "Mines assigned",
            threshold=self.threshold,
            mines=sum(1 for cell in self.registry if cell.is_mine),
            total_safe=self._total_safe,
        )
        self._emit("reset", tuple(cell.id for cell in self.registry))

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for cell in self.registry:
            cell.adjacent_mines = sum(
                1 for neighbor_id in cell.neighbors
                if self.registry[neighbor_id].is_mine
            )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, cell_id: int) -> bool:
        """
        Reveal a cell.

        A mine ends the game and exposes the whole board. A safe cell
        without adjacent mines starts a flood reveal; any other safe cell
        is revealed alone.

        Args:
            cell_id: Cell to reveal.

        Returns:
            True if the board changed, False if the action was ignored.
        """
        if not self._can_reveal(cell_id):
            return False

        cell = self.registry[cell_id]
        if cell.is_mine:
            self._lose(cell)
            return True

        if cell.adjacent_mines == 0:
            changed = self._flood_reveal(cell_id)
        else:
            cell.reveal()
            self._revealed_count += 1
            changed = [cell_id]

        self._emit("reveal", tuple(changed))
        self.check_win()
        return True

    def _can_reveal(self, cell_id: int) -> bool:
        """Check if a cell can be revealed."""
        if self._game_state != GameState.PLAYING:
            return False
        cell = self.registry.get(cell_id)
        if cell is None or cell.is_zero:
            return False
        return cell.state == CellState.HIDDEN

    def _flood_reveal(self, start_id: int) -> List[int]:
        """
        Breadth-first reveal from a cell with no adjacent mines.

        Only zero-count cells propagate; numbered cells are revealed as the
        boundary. Mines and inert cells are never queued.

        Returns:
            Ids of the cells revealed.
        """
        queue = deque([start_id])
        seen = set()
        revealed = []

        while queue:
            current_id = queue.popleft()
            if current_id in seen:
                continue
            seen.add(current_id)

            cell = self.registry[current_id]
            if not cell.reveal():
                continue
            self._revealed_count += 1
            revealed.append(current_id)

            if cell.adjacent_mines != 0:
                continue
            for neighbor_id in cell.neighbors:
                neighbor = self.registry[neighbor_id]
                if (
                    neighbor_id not in seen
                    and not neighbor.is_revealed
                    and not neighbor.is_mine
                    and not neighbor.is_zero
                ):
                    queue.append(neighbor_id)

        return revealed

    def _lose(self, trigger: Cell) -> None:
        """Expose every mine and safe cell after a mine was hit."""
        trigger.boom = True
        changed = []
        for cell in self.registry:
            if cell.is_zero:
                continue
            if cell.reveal():
                changed.append(cell.id)
        self._revealed_count = self._total_safe
        self._game_state = GameState.LOST

        logger.info("Game lost", cell=trigger.id)
        self._emit("lost", tuple(changed))

    def check_win(self) -> bool:
        """
        Move to WON once every safe cell is revealed.

        Returns:
            True if the game is won.
        """
        if self._game_state == GameState.PLAYING and (
            self._total_safe > 0 and self._revealed_count >= self._total_safe
        ):
            self._game_state = GameState.WON
            logger.info("Game won", revealed=self._revealed_count)
            self._emit("won", ())
        return self._game_state == GameState.WON

    def flag(self, cell_id: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            cell_id: Cell to flag or unflag.

        Returns:
            True if flag was toggled, False otherwise.
        """
        if self._game_state != GameState.PLAYING:
            return False
        cell = self.registry.get(cell_id)
        if cell is None or cell.is_zero:
            return False
        if not cell.toggle_flag():
            return False
        self._emit("flag", (cell_id,))
        return True

    # ========================================================================
    # Observers
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for board events.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str, cell_ids: Tuple[int, ...]) -> None:
        event = BoardEvent(kind, cell_ids, self._game_state)
        for listener in list(self._listeners):
            listener(event)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def revealed_count(self) -> int:
        """Number of revealed safe cells."""
        return self._revealed_count

    @property
    def total_safe(self) -> int:
        """Number of playable cells that are not mines."""
        return self._total_safe

    @property
    def num_cells(self) -> int:
        return len(self.registry)

    @property
    def cells(self) -> List[Cell]:
        return list(self.registry)

    def get_cell(self, cell_id: int) -> Optional[Cell]:
        """Get cell by id, or None if invalid."""
        return self.registry.get(cell_id)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy vector indexed by cell id.

        Returns:
            1D int8 array, see Cell.to_observation for the codes.
        """
        return np.array(
            [cell.to_observation() for cell in self.registry], dtype=np.int8
        )

    def get_valid_actions(self) -> List[int]:
        """
        Get list of cells that can be revealed.

        Returns:
            Ids of hidden, playable cells.
        """
        return [
            cell.id for cell in self.registry
            if not cell.is_zero and cell.state == CellState.HIDDEN
        ]

    def max_observation(self) -> int:
        """Largest value an observation can take."""
        degrees = [len(cell.neighbors) for cell in self.registry]
        return max(degrees, default=0)

    def status_text(self) -> str:
        """Short progress line for display."""
        return (
            f"{self._game_state.name.title()}: "
            f"{self._revealed_count}/{self._total_safe} safe cells revealed"
        )

    def outcome_message(self) -> Optional[Tuple[str, str]]:
        """Title and message for a finished game, None while playing."""
        return OUTCOME_MESSAGES.get(self._game_state)

    def reset(self) -> None:
        """Start a new game with the current threshold."""
        self.assign_mines()
