"""
Pytest configuration and shared fixtures.
"""
import math
import pytest
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hexsweeper import Board, Cell, CellRegistry, GameConfig, GridConfig


# ============================================================================
# Hex Grid Helpers
# ============================================================================

METERS_PER_DEGREE = math.pi * 6371000.0 / 180.0
ORIGIN = (23.70, 37.98)  # lon, lat
HEX_WIDTH = 316.0
HEX_PITCH = 274.0


def offset_meters(lon: float, lat: float, dx: float, dy: float) -> Tuple[float, float]:
    """Shift a (lon, lat) point by meters east/north."""
    d_lat = dy / METERS_PER_DEGREE
    d_lon = dx / (METERS_PER_DEGREE * math.cos(math.radians(lat)))
    return lon + d_lon, lat + d_lat


def hex_center(row: int, col: int) -> Tuple[float, float]:
    """Centre of a flat-top hex; odd columns sit half a pitch higher."""
    dx = col * 0.75 * HEX_WIDTH
    dy = row * HEX_PITCH + (HEX_PITCH / 2 if col % 2 else 0.0)
    return offset_meters(ORIGIN[0], ORIGIN[1], dx, dy)


def hex_centroids(rows: int, cols: int) -> List[Tuple[float, float]]:
    """Centroids in row-major order (id = row * cols + col)."""
    return [hex_center(r, c) for r in range(rows) for c in range(cols)]


def hex_ring(lon: float, lat: float) -> List[List[float]]:
    """Closed flat-top hex ring around a centre."""
    radius = HEX_WIDTH / 2
    ring = []
    for k in range(6):
        angle = math.radians(60 * k)
        x, y = offset_meters(lon, lat, radius * math.cos(angle), radius * math.sin(angle))
        ring.append([x, y])
    ring.append(list(ring[0]))
    return ring


def make_feature_collection(
    rows: int,
    cols: int,
    counts: Optional[Sequence] = None,
    multipolygon_ids: Sequence[int] = (),
) -> Dict:
    """GeoJSON feature collection of a rows x cols hex grid."""
    features = []
    for index, (lon, lat) in enumerate(hex_centroids(rows, cols)):
        ring = hex_ring(lon, lat)
        if index in multipolygon_ids:
            geometry = {"type": "MultiPolygon", "coordinates": [[ring]]}
        else:
            geometry = {"type": "Polygon", "coordinates": [ring]}
        count = counts[index] if counts is not None else 1
        features.append({
            "type": "Feature",
            "properties": {"NUMPOINTS": count},
            "geometry": geometry,
        })
    return {"type": "FeatureCollection", "features": features}


def make_registry(
    counts: Sequence[Optional[float]],
    edges: Sequence[Tuple[int, int]],
) -> CellRegistry:
    """Registry with explicit counts and undirected edges, no geometry."""
    neighbors: List[List[int]] = [[] for _ in counts]
    for a, b in edges:
        neighbors[a].append(b)
        neighbors[b].append(a)
    cells = [
        Cell(id=index, count=count, neighbors=sorted(ids))
        for index, (count, ids) in enumerate(zip(counts, neighbors))
    ]
    return CellRegistry(cells)


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def grid_config() -> GridConfig:
    """Default spacing model (316 m x 274 m)."""
    return GridConfig()


@pytest.fixture
def game_config() -> GameConfig:
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def feature_collection_factory():
    """Factory for hex grid feature collections."""
    return make_feature_collection


@pytest.fixture
def hex_grid_collection() -> Dict:
    """4x4 hex grid with a count of 1 in every cell."""
    return make_feature_collection(4, 4)


@pytest.fixture
def geojson_file(tmp_path: Path, hex_grid_collection: Dict) -> Path:
    """The 4x4 hex grid written to disk."""
    import json

    path = tmp_path / "cells.geojson"
    path.write_text(json.dumps(hex_grid_collection), encoding="utf-8")
    return path


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def registry_factory():
    """Factory for registries with explicit counts and edges."""
    return make_registry


@pytest.fixture
def line_board() -> Board:
    """
    Path 0-1-2-3-4 where cell 3 is the only mine (threshold 15).

    Adjacent counts: [0, 0, 1, 0, 1].
    """
    registry = make_registry([1, 2, 3, 20, 4], [(0, 1), (1, 2), (2, 3), (3, 4)])
    return Board(registry, threshold=15)


@pytest.fixture
def numbered_board() -> Board:
    """
    Three safe cells all touching the single mine 3, plus an inert cell 4.

    Every safe cell has one adjacent mine, so reveals never flood.
    """
    registry = make_registry(
        [1, 2, 3, 20, None],
        [(0, 3), (1, 3), (2, 3), (0, 1), (1, 2), (2, 4)],
    )
    return Board(registry, threshold=15)


@pytest.fixture
def mine_free_cycle() -> Board:
    """Six cells in a cycle with a chord and no mines."""
    edges = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 0), (0, 3)]
    return Board(make_registry([1, 1, 1, 1, 1, 1], edges), threshold=15)
