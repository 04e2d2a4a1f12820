"""Zone partitioning of the grid for coverage planning."""

from dataclasses import dataclass
from typing import Iterator, List, Tuple
import math


@dataclass(frozen=True)
class Zone:
    """A rectangular block of grid cells, half-open: [x_min, x_max) x [y_min, y_max)."""
    id: int
    x_min: int
    x_max: int
    y_min: int
    y_max: int

    @property
    def width(self) -> int:
        return self.x_max - self.x_min

    @property
    def height(self) -> int:
        return self.y_max - self.y_min

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x_min + self.x_max) / 2, (self.y_min + self.y_max) / 2)

    def contains_cell(self, x: int, y: int) -> bool:
        """Check if a grid cell belongs to this zone."""
        return self.x_min <= x < self.x_max and self.y_min <= y < self.y_max

    def cells(self) -> Iterator[Tuple[int, int]]:
        """All cells of the zone in row-major order."""
        for y in range(self.y_min, self.y_max):
            for x in range(self.x_min, self.x_max):
                yield (x, y)


def zones_per_side(num_zones: int) -> int:
    """Side length of the square block layout used for num_zones drones."""
    return int(math.ceil(math.sqrt(num_zones)))


def partition_grid(num_zones: int, width: int, height: int) -> List[Zone]:
    """
    Divide the grid into a k x k layout of near-equal rectangles.

    k = ceil(sqrt(num_zones)). Zones are numbered row-major, so zone i sits
    at row i // k, column i % k. All k*k zones are returned; when num_zones
    is not a perfect square the trailing ones are left without a drone.
    When k exceeds a grid dimension some zones are empty.

    Args:
        num_zones: Number of drones that need a zone
        width: Grid width in cells
        height: Grid height in cells

    Returns:
        List of k*k Zone objects
    """
    k = zones_per_side(num_zones)
    x_bounds = [col * width // k for col in range(k + 1)]
    y_bounds = [row * height // k for row in range(k + 1)]

    zones = []
    for row in range(k):
        for col in range(k):
            zones.append(Zone(
                id=row * k + col,
                x_min=x_bounds[col],
                x_max=x_bounds[col + 1],
                y_min=y_bounds[row],
                y_max=y_bounds[row + 1],
            ))
    return zones
