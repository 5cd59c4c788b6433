"""
Cell registry: loads a GeoJSON feature collection into cells.

Each feature becomes one Cell with its centroid, drawable path, and parsed
point count. The neighbor graph is built once after all cells exist.
"""
import json
import math
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

import structlog

from .cell import Cell
from .config import GameConfig
from .geometry import (
    GeometryError,
    ViewTransform,
    build_view_transform,
    centroid,
    outer_ring,
    ring_to_path,
)
from .neighbors import build_neighbor_graph

logger = structlog.get_logger()


class LoadError(Exception):
    """Raised when the source data cannot be turned into a board."""


def parse_count(raw: Any) -> Optional[float]:
    """
    Parse a count attribute into a number, or None when unusable.

    Finite numbers pass through; strings are parsed as floats. Missing,
    empty, boolean, non-finite, and unparseable values are absent.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


# ============================================================================
# Cell Registry
# ============================================================================

class CellRegistry:
    """
    In-memory store of all cells of one loaded dataset.

    Cell ids equal their position in the registry.
    """

    def __init__(
        self,
        cells: Sequence[Cell],
        transform: Optional[ViewTransform] = None,
    ) -> None:
        for index, cell in enumerate(cells):
            if cell.id != index:
                raise ValueError(f"Cell id {cell.id} does not match position {index}")
        self._cells: List[Cell] = list(cells)
        self.transform = transform

    # ========================================================================
    # Loading
    # ========================================================================

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        config: Optional[GameConfig] = None,
    ) -> "CellRegistry":
        """
        Load a registry from a GeoJSON file.

        Raises:
            LoadError: If the file is unreadable, not JSON, or not a
                usable feature collection.
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except OSError as exc:
            raise LoadError(f"Failed to load {path}: {exc.strerror or exc}") from exc
        except json.JSONDecodeError as exc:
            raise LoadError(f"Failed to parse {path}: {exc.msg}") from exc
        except UnicodeDecodeError as exc:
            raise LoadError(f"Failed to parse {path}: {exc.reason}") from exc
        return cls.from_feature_collection(data, config)

    @classmethod
    def from_feature_collection(
        cls,
        data: Any,
        config: Optional[GameConfig] = None,
    ) -> "CellRegistry":
        """
        Build a registry from a decoded GeoJSON feature collection.

        Raises:
            LoadError: If the collection has no features or a feature has
                unusable geometry.
        """
        config = config or GameConfig()
        features = data.get("features") if isinstance(data, Mapping) else None
        if not isinstance(features, list) or not features:
            raise LoadError("GeoJSON has no features")

        rings = []
        for index, feature in enumerate(features):
            if not isinstance(feature, Mapping):
                raise LoadError(f"Feature {index} is not an object")
            try:
                rings.append(outer_ring(feature.get("geometry")))
            except GeometryError as exc:
                raise LoadError(f"Feature {index}: {exc}") from exc

        try:
            transform = build_view_transform(
                rings, width=config.view_width, padding=config.view_padding
            )
            cells = [
                cls._make_cell(index, feature, ring, transform, config.count_field)
                for index, (feature, ring) in enumerate(zip(features, rings))
            ]
        except GeometryError as exc:
            raise LoadError(str(exc)) from exc

        logger.info("Loaded cells", cells=len(cells), count_field=config.count_field)

        registry = cls(cells, transform)
        registry.set_neighbors(
            build_neighbor_graph([cell.centroid for cell in cells], config.grid)
        )
        return registry

    @staticmethod
    def _make_cell(
        index: int,
        feature: Mapping[str, Any],
        ring: Sequence[Sequence[float]],
        transform: ViewTransform,
        count_field: str,
    ) -> Cell:
        properties = feature.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise LoadError(f"Feature {index}: properties must be an object")
        raw = properties.get(count_field)
        count = parse_count(raw)
        if count is None and raw not in (None, ""):
            logger.debug("Ignoring unparseable count", cell=index, value=raw)
        return Cell(
            id=index,
            count=count,
            centroid=centroid(ring),
            ring=ring,
            path=ring_to_path(ring, transform),
        )

    def set_neighbors(self, neighbors: Sequence[Sequence[int]]) -> None:
        """Attach neighbor id lists, one per cell."""
        if len(neighbors) != len(self._cells):
            raise ValueError("Neighbor lists must match the number of cells")
        for cell, ids in zip(self._cells, neighbors):
            cell.neighbors = list(ids)

    # ========================================================================
    # Accessors
    # ========================================================================

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, cell_id: int) -> Cell:
        return self._cells[cell_id]

    def get(self, cell_id: int) -> Optional[Cell]:
        """Get cell by id, or None if out of range."""
        if 0 <= cell_id < len(self._cells):
            return self._cells[cell_id]
        return None

    def counts(self) -> List[Optional[float]]:
        """Point count per cell, None for inert cells."""
        return [cell.count for cell in self._cells]

    def neighbor_lists(self) -> List[List[int]]:
        """Neighbor ids per cell."""
        return [list(cell.neighbors) for cell in self._cells]

    @property
    def view_box(self) -> Optional[str]:
        """View box of the output frame, if geometry was loaded."""
        return self.transform.view_box if self.transform else None

    def summary(self) -> Dict[str, int]:
        """Basic statistics of the loaded grid."""
        return {
            "cells": len(self._cells),
            "inert": sum(1 for cell in self._cells if cell.is_zero),
            "edges": sum(len(cell.neighbors) for cell in self._cells) // 2,
        }
