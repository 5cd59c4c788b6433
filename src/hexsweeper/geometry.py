"""
Geometry utilities for hex cell polygons.

Works on GeoJSON outer rings: bounding boxes, area-weighted centroids,
great-circle distances, and the linear fit of source coordinates into the
output view frame.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, NamedTuple, Sequence, Tuple

import numpy as np


# ============================================================================
# Constants
# ============================================================================

EARTH_RADIUS_M = 6371000.0
DEGENERATE_AREA = 1e-12

Point = Tuple[float, float]
Ring = Sequence[Sequence[float]]


class GeometryError(ValueError):
    """Raised when a geometry cannot be used as a cell outline."""


class BoundingBox(NamedTuple):
    """Axis-aligned bounds of a ring."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box containing both boxes."""
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )


# ============================================================================
# Ring Helpers
# ============================================================================

def outer_ring(geometry: Dict[str, Any]) -> Ring:
    """
    Extract the outer ring of a Polygon or MultiPolygon geometry.

    For a MultiPolygon only the first polygon is used.

    Raises:
        GeometryError: If the geometry is missing or of another type.
    """
    if not isinstance(geometry, dict):
        raise GeometryError("Feature has no geometry")

    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    try:
        if geom_type == "Polygon":
            return coordinates[0]
        if geom_type == "MultiPolygon":
            return coordinates[0][0]
    except (IndexError, TypeError) as exc:
        raise GeometryError(f"{geom_type} has no coordinates") from exc
    raise GeometryError(f"Unsupported geometry type: {geom_type}")


def _as_array(ring: Ring) -> np.ndarray:
    try:
        points = np.asarray(ring, dtype=float)
    except (TypeError, ValueError) as exc:
        raise GeometryError("Ring coordinates must be numeric points") from exc
    if points.size == 0:
        raise GeometryError("Ring is empty")
    if points.ndim != 2 or points.shape[1] < 2:
        raise GeometryError("Ring must be a sequence of (x, y) points")
    points = points[:, :2]
    if not np.isfinite(points).all():
        raise GeometryError("Ring coordinates must be finite")
    return points


def bounding_box(ring: Ring) -> BoundingBox:
    """
    Compute the bounding box of a ring.

    Raises:
        GeometryError: If the ring is empty.
    """
    points = _as_array(ring)
    min_x, min_y = points.min(axis=0)
    max_x, max_y = points.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


def centroid(ring: Ring) -> Point:
    """
    Area-weighted centroid of a ring (shoelace formula).

    The ring is expected closed (first point repeated last), as in GeoJSON.
    When the signed area is numerically zero the arithmetic mean of the
    vertices is returned instead.

    Args:
        ring: Sequence of (x, y) points.

    Returns:
        (cx, cy) in source coordinate units.
    """
    points = _as_array(ring)
    x1, y1 = points[:-1, 0], points[:-1, 1]
    x2, y2 = points[1:, 0], points[1:, 1]
    cross = x1 * y2 - x2 * y1

    area = 0.5 * cross.sum()
    if abs(area) < DEGENERATE_AREA:
        mean = points.mean(axis=0)
        return float(mean[0]), float(mean[1])

    cx = ((x1 + x2) * cross).sum() / (6.0 * area)
    cy = ((y1 + y2) * cross).sum() / (6.0 * area)
    return float(cx), float(cy)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two (lat, lon) points."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


# ============================================================================
# View Transform
# ============================================================================

@dataclass(frozen=True)
class ViewTransform:
    """
    Linear map from source coordinates to the output frame.

    The Y axis is flipped so that north stays up on screen.
    """

    min_x: float
    max_y: float
    scale_x: float
    scale_y: float
    width: float
    height: float

    def __call__(self, x: float, y: float) -> Point:
        return (x - self.min_x) * self.scale_x, (self.max_y - y) * self.scale_y

    @property
    def view_box(self) -> str:
        """SVG viewBox attribute for the output frame."""
        return f"0 0 {self.width:g} {self.height:g}"


def build_view_transform(
    rings: Iterable[Ring],
    width: float = 1000.0,
    padding: float = 0.04,
) -> ViewTransform:
    """
    Fit the union bounding box of all rings into a frame of fixed width.

    Args:
        rings: Outer rings of every cell.
        width: Output frame width; height follows the padded aspect ratio.
        padding: Fraction of the extent added on each side of each axis.

    Raises:
        GeometryError: If there are no rings or the extent is zero.
    """
    box = None
    for ring in rings:
        ring_box = bounding_box(ring)
        box = ring_box if box is None else box.union(ring_box)
    if box is None:
        raise GeometryError("No geometry to fit")

    pad_x = (box.max_x - box.min_x) * padding
    pad_y = (box.max_y - box.min_y) * padding
    min_x, max_x = box.min_x - pad_x, box.max_x + pad_x
    min_y, max_y = box.min_y - pad_y, box.max_y + pad_y

    span_x = max_x - min_x
    span_y = max_y - min_y
    if span_x <= 0 or span_y <= 0:
        raise GeometryError("Geometry extent is degenerate")

    height = width * span_y / span_x
    return ViewTransform(
        min_x=min_x,
        max_y=max_y,
        scale_x=width / span_x,
        scale_y=height / span_y,
        width=width,
        height=height,
    )


def ring_to_path(ring: Ring, transform: ViewTransform) -> str:
    """Drawable SVG path of a ring in view coordinates."""
    parts = []
    for index, point in enumerate(ring):
        x, y = transform(point[0], point[1])
        parts.append(f"{'L' if index else 'M'}{x:.3f} {y:.3f}")
    return " ".join(parts) + " Z"
