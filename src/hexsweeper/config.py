"""
Configuration for hex minesweeper.

Holds the grid spacing model used by the neighbor graph builder and the
game-level settings (data source, count attribute, mine threshold, view).
"""
from dataclasses import dataclass, field


# ============================================================================
# Grid Configuration
# ============================================================================

@dataclass
class GridConfig:
    """
    Spacing model of a flat-top hex grid.

    Attributes:
        h: Horizontal cell width in meters.
        v: Vertical cell-to-cell pitch in meters.
        tolerance: Relative band around each target distance.
        bucket_size: Spatial hash bucket size in degrees.
    """

    h: float = 316.0
    v: float = 274.0
    tolerance: float = 0.20
    bucket_size: float = 0.01

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.h <= 0 or self.v <= 0:
            raise ValueError("Grid spacing must be positive")
        if not 0 < self.tolerance < 1:
            raise ValueError("Tolerance must be between 0 and 1")
        if self.bucket_size <= 0:
            raise ValueError("Bucket size must be positive")


# ============================================================================
# Game Configuration
# ============================================================================

@dataclass
class GameConfig:
    """
    Settings for loading a dataset and playing on it.

    Attributes:
        data_path: GeoJSON feature collection to load.
        count_field: Feature property holding the point count.
        threshold: Minimum count at which a cell is a mine.
        view_width: Width of the output frame.
        view_padding: Fraction of the extent added on each axis.
        grid: Neighbor spacing model.
    """

    data_path: str = "data/athens_hex_counts.geojson"
    count_field: str = "NUMPOINTS"
    threshold: float = 15
    view_width: float = 1000.0
    view_padding: float = 0.04
    grid: GridConfig = field(default_factory=GridConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if not self.count_field:
            raise ValueError("Count field must be set")
        if self.view_width <= 0:
            raise ValueError("View width must be positive")
        if self.view_padding < 0:
            raise ValueError("View padding cannot be negative")
