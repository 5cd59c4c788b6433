"""
Cell module for hex minesweeper.

Represents one hex polygon of the source grid with its geometry, point
count, neighbor ids, and play state (hidden/revealed/flagged).
"""
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Observation codes; revealed safe cells report their adjacent mine count.
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_INERT = -3
OBS_MINE = -4


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    A single hex cell of the board.

    Attributes:
        id: Index of the source feature.
        count: Point count, or None when the source has no usable value.
        centroid: (lon, lat) of the polygon.
        ring: Outer polygon ring in source coordinates.
        path: Drawable path of the ring in view coordinates.
        neighbors: Ids of adjacent cells.
        is_mine: Whether this cell is a mine at the current threshold.
        adjacent_mines: Count of mines among the neighbors.
        state: Current visual state (hidden, revealed, or flagged).
        boom: Whether this is the mine the player triggered.
    """

    id: int
    count: Optional[float] = None
    centroid: Tuple[float, float] = (0.0, 0.0)
    ring: Sequence[Sequence[float]] = field(default=(), repr=False)
    path: str = field(default="", repr=False)
    neighbors: List[int] = field(default_factory=list)
    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN
    boom: bool = False

    @property
    def is_zero(self) -> bool:
        """Cells without a count are inert and never take part in play."""
        return self.count is None

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if the cell changed state, False if it was already revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    def reset(self, is_mine: bool) -> None:
        """Return to a fresh hidden state for a new mine assignment."""
        self.is_mine = is_mine
        self.adjacent_mines = 0
        self.state = CellState.HIDDEN
        self.boom = False

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to an observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Inert cell (no count data)
            -4: Revealed mine
            0+: Revealed cell with adjacent mine count
        """
        if self.is_zero:
            return OBS_INERT
        if self.state == CellState.HIDDEN:
            return OBS_HIDDEN
        if self.state == CellState.FLAGGED:
            return OBS_FLAGGED
        if self.is_mine:
            return OBS_MINE
        return self.adjacent_mines
