"""
Game session: one-shot data load followed by play.

A session starts NOT_READY. Loading either produces a board (READY) or
leaves the session without one (FAILED) and records the reason in the
status text.
"""
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Union

import structlog

from .board import Board
from .config import GameConfig
from .histogram import Histogram, count_histogram
from .registry import CellRegistry, LoadError

logger = structlog.get_logger()


class SessionState(Enum):
    """Load status of a session."""

    NOT_READY = auto()
    READY = auto()
    FAILED = auto()


class Session:
    """Owns the loaded registry, its board, and the status line."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.state = SessionState.NOT_READY
        self.status = "Loading..."
        self.registry: Optional[CellRegistry] = None
        self.board: Optional[Board] = None
        self.histogram: Optional[Histogram] = None

    @property
    def ready(self) -> bool:
        return self.state == SessionState.READY

    def load(self, path: Union[str, Path, None] = None) -> bool:
        """
        Load the dataset and set up the board.

        Args:
            path: GeoJSON file; defaults to the configured data path.

        Returns:
            True if the board is ready, False if loading failed.
        """
        if self.state != SessionState.NOT_READY:
            raise RuntimeError("Session data is loaded once per session")

        path = path or self.config.data_path
        try:
            registry = CellRegistry.load(path, self.config)
        except LoadError as exc:
            self.state = SessionState.FAILED
            logger.error("Failed to load data", path=str(path), error=str(exc))
            self._set_status(f"Error: {exc}")
            return False

        self._set_status(f"Loaded {len(registry)} cells.")
        self.registry = registry
        self.histogram = count_histogram(registry.counts())
        self.board = Board(registry, threshold=self.config.threshold)
        self.state = SessionState.READY

        grid = self.config.grid
        self._set_status(
            f"Ready. Safe cells: {self.board.total_safe} "
            f"(H={grid.h:g}m, V={grid.v:g}m)"
        )
        return True

    def _set_status(self, status: str) -> None:
        self.status = status
        logger.info("Status changed", status=status)
