"""Distribution of point counts for display next to the board."""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

MIN_BIN_SIZE = 5
TARGET_BINS = 20


@dataclass(frozen=True)
class Histogram:
    """Equal-width bins starting at zero."""

    bin_size: int
    labels: List[str]
    counts: List[int]

    def rows(self) -> List[str]:
        """Plain text bar per bin."""
        widest = max(self.counts, default=0) or 1
        label_width = max((len(label) for label in self.labels), default=0)
        return [
            f"{label:>{label_width}} | {'#' * round(40 * count / widest)} {count}"
            for label, count in zip(self.labels, self.counts)
        ]


def count_histogram(counts: Iterable[Optional[float]]) -> Histogram:
    """
    Bin point counts; cells without a count are binned as zero.

    The bin width is max(5, ceil(max / 20)) and values beyond the last
    bin start fall into the last bin.
    """
    values = np.array([count or 0.0 for count in counts], dtype=float)
    values = np.clip(values, 0.0, None)
    max_value = float(values.max()) if values.size else 0.0

    bin_size = max(MIN_BIN_SIZE, math.ceil(max_value / TARGET_BINS))
    starts = np.arange(0, max_value + 1e-9, bin_size).astype(int)

    indices = np.minimum((values // bin_size).astype(int), len(starts) - 1)
    counts_per_bin = np.bincount(indices, minlength=len(starts))

    return Histogram(
        bin_size=bin_size,
        labels=[f"{start}-{start + bin_size}" for start in starts],
        counts=[int(value) for value in counts_per_bin],
    )
