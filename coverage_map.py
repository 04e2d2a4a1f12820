"""Grid map of the cells drones have flown over."""

from dataclasses import dataclass, field
from typing import Dict, Optional
import math

import numpy as np

UNVISITED = -1


@dataclass
class CoverageMap:
    """
    Tracks which grid cells have been visited by a drone.

    Each cell stores the id of the first drone that flew over it, or
    UNVISITED. This measures drone spatial coverage, as opposed to the
    field-coverage metric, which measures how much of the grid is above
    the detection threshold.
    """
    width: int
    height: int
    visited_by: Optional[np.ndarray] = field(default=None, repr=False)
    _visited_count: int = 0

    def __post_init__(self):
        """Initialize the grid of cells."""
        self.visited_by = np.full((self.height, self.width), UNVISITED, dtype=int)
        self._visited_count = 0

    @property
    def total_cells(self) -> int:
        return self.width * self.height

    @property
    def visited_count(self) -> int:
        return self._visited_count

    def world_to_grid(self, x: float, y: float) -> Optional[tuple]:
        """Convert a position to grid indices, or None outside the grid."""
        col = int(math.floor(x))
        row = int(math.floor(y))
        if 0 <= col < self.width and 0 <= row < self.height:
            return col, row
        return None

    def mark_visited(self, x: float, y: float, drone_id: int) -> bool:
        """
        Mark the cell under (x, y) as visited.

        Returns:
            True if the cell had not been visited before
        """
        cell = self.world_to_grid(x, y)
        if cell is None:
            return False
        col, row = cell
        if self.visited_by[row, col] != UNVISITED:
            return False
        self.visited_by[row, col] = drone_id
        self._visited_count += 1
        return True

    def is_visited(self, x: int, y: int) -> bool:
        cell = self.world_to_grid(x, y)
        return cell is not None and self.visited_by[cell[1], cell[0]] != UNVISITED

    def get_visited_fraction(self) -> float:
        """Fraction of cells visited so far (0.0 on an empty grid)."""
        if self.total_cells == 0:
            return 0.0
        return self._visited_count / self.total_cells

    def get_coverage_stats(self) -> dict:
        """Get detailed coverage statistics."""
        ids, counts = np.unique(self.visited_by[self.visited_by != UNVISITED],
                                return_counts=True)
        visited_by_drone: Dict[int, int] = {
            int(i): int(c) for i, c in zip(ids, counts)
        }
        return {
            'total_cells': self.total_cells,
            'visited_cells': self._visited_count,
            'unvisited_cells': self.total_cells - self._visited_count,
            'visited_fraction': self.get_visited_fraction(),
            'visited_by_drone': visited_by_drone,
            'grid_size': (self.width, self.height),
        }

    def reset(self) -> None:
        """Forget all visits."""
        self.visited_by.fill(UNVISITED)
        self._visited_count = 0
