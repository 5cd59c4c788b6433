"""
Neighbor graph construction for flat-top hex cells.

Cells are matched by the great-circle distance between their centroids.
A pair is adjacent when the distance falls inside the tolerance band of
either the horizontal (0.75 * H) or the diagonal (V) neighbor spacing.
A uniform spatial hash over the centroids limits every cell to the
candidates in its own and the eight surrounding buckets.
"""
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Set, Tuple

import structlog

from .config import GridConfig
from .geometry import Point, haversine

logger = structlog.get_logger()

METERS_PER_DEGREE = math.pi * 6371000.0 / 180.0

BucketKey = Tuple[int, int]


# ============================================================================
# Distance Bands
# ============================================================================

@dataclass(frozen=True)
class DistanceBands:
    """Acceptance intervals for horizontal and diagonal neighbors."""

    min_h: float
    max_h: float
    min_d: float
    max_d: float

    @classmethod
    def from_config(cls, config: GridConfig) -> "DistanceBands":
        d_horiz = 0.75 * config.h
        d_diag = config.v
        tol = config.tolerance
        return cls(
            min_h=d_horiz * (1 - tol),
            max_h=d_horiz * (1 + tol),
            min_d=d_diag * (1 - tol),
            max_d=d_diag * (1 + tol),
        )

    def accepts(self, distance: float) -> bool:
        """Check if a distance falls in either band."""
        return (
            self.min_h <= distance <= self.max_h
            or self.min_d <= distance <= self.max_d
        )

    @property
    def reach(self) -> float:
        """Largest accepted distance."""
        return max(self.max_h, self.max_d)


# ============================================================================
# Spatial Hash
# ============================================================================

class SpatialHash:
    """
    Uniform grid of buckets over (lon, lat) points.

    Buckets are keyed by (floor(lat / size), floor(lon / size)).
    """

    def __init__(self, bucket_size: float) -> None:
        self.bucket_size = bucket_size
        self._buckets: Dict[BucketKey, List[int]] = defaultdict(list)

    def key(self, point: Point) -> BucketKey:
        lon, lat = point
        return (
            math.floor(lat / self.bucket_size),
            math.floor(lon / self.bucket_size),
        )

    def insert(self, item: int, point: Point) -> None:
        self._buckets[self.key(point)].append(item)

    def candidates(self, point: Point) -> Iterator[int]:
        """Yield items in the point's bucket and the 8 around it."""
        row, col = self.key(point)
        for d_row in (-1, 0, 1):
            for d_col in (-1, 0, 1):
                bucket = self._buckets.get((row + d_row, col + d_col))
                if bucket:
                    yield from bucket

    def __len__(self) -> int:
        return len(self._buckets)


# ============================================================================
# Graph Builder
# ============================================================================

def build_neighbor_graph(
    centroids: Sequence[Point],
    config: GridConfig,
) -> List[List[int]]:
    """
    Compute hex adjacency between cells.

    Args:
        centroids: (lon, lat) centroid per cell, indexed by cell id.
        config: Grid spacing model.

    Returns:
        Sorted neighbor id list per cell. Every accepted pair is stored on
        both endpoints, so the relation is symmetric and has no self-loops.
    """
    bands = DistanceBands.from_config(config)
    spatial = SpatialHash(config.bucket_size)
    for cell_id, point in enumerate(centroids):
        spatial.insert(cell_id, point)

    _warn_if_buckets_too_small(centroids, config, bands)

    adjacency: List[Set[int]] = [set() for _ in centroids]
    for cell_id, (lon, lat) in enumerate(centroids):
        for other_id in spatial.candidates((lon, lat)):
            if other_id <= cell_id:
                continue
            other_lon, other_lat = centroids[other_id]
            distance = haversine(lat, lon, other_lat, other_lon)
            if bands.accepts(distance):
                adjacency[cell_id].add(other_id)
                adjacency[other_id].add(cell_id)

    neighbors = [sorted(ids) for ids in adjacency]
    edges = sum(len(ids) for ids in neighbors) // 2
    isolated = sum(1 for ids in neighbors if not ids)
    logger.info(
        "Neighbor graph built",
        cells=len(neighbors),
        edges=edges,
        isolated=isolated,
        buckets=len(spatial),
    )
    return neighbors


def _warn_if_buckets_too_small(
    centroids: Sequence[Point],
    config: GridConfig,
    bands: DistanceBands,
) -> None:
    """Log when the 3x3 bucket window can be narrower than the bands."""
    if not centroids:
        return
    mean_lat = sum(lat for _, lat in centroids) / len(centroids)
    lon_extent = (
        config.bucket_size * METERS_PER_DEGREE * math.cos(math.radians(mean_lat))
    )
    lat_extent = config.bucket_size * METERS_PER_DEGREE
    if min(lon_extent, lat_extent) < bands.reach:
        logger.warning(
            "Spatial hash buckets smaller than neighbor reach",
            bucket_m=round(min(lon_extent, lat_extent), 1),
            reach_m=round(bands.reach, 1),
        )
