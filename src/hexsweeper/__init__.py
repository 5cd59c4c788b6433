"""
Hex minesweeper over geographic point-count grids.

Provides geometry helpers, neighbor graph construction, the cell registry,
and the game board with its session and gymnasium wrappers.
"""
from .cell import Cell, CellState
from .config import GameConfig, GridConfig
from .geometry import GeometryError, build_view_transform, centroid, haversine
from .neighbors import DistanceBands, SpatialHash, build_neighbor_graph
from .registry import CellRegistry, LoadError, parse_count
from .board import Board, BoardEvent, GameState, DEFAULT_THRESHOLD
from .histogram import Histogram, count_histogram
from .session import Session, SessionState
from .environment import HexMinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "GameConfig",
    "GridConfig",
    "GeometryError",
    "build_view_transform",
    "centroid",
    "haversine",
    "DistanceBands",
    "SpatialHash",
    "build_neighbor_graph",
    "CellRegistry",
    "LoadError",
    "parse_count",
    "Board",
    "BoardEvent",
    "GameState",
    "DEFAULT_THRESHOLD",
    "Histogram",
    "count_histogram",
    "Session",
    "SessionState",
    "HexMinesweeperEnv",
]
