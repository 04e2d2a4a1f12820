"""Anomaly sources and the diffusing intensity grid they produce."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import math
import random

import numpy as np

import config

# 8-neighbourhood offsets as (dy, dx)
NEIGHBOR_OFFSETS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
                    if not (dy == 0 and dx == 0)]


@dataclass
class AnomalySource:
    """A decaying point contributor to the intensity field."""
    x: float
    y: float
    intensity: float
    created_at: float = 0.0

    def decay(self, rate: float) -> None:
        """Scale intensity down by one tick of decay."""
        self.intensity *= rate

    def is_alive(self) -> bool:
        """Check if the source still contributes to the field."""
        return self.intensity >= config.ANOMALY_MIN_INTENSITY

    def cell(self) -> Tuple[int, int]:
        """Grid cell nearest to the source (rounded half up)."""
        return int(math.floor(self.x + 0.5)), int(math.floor(self.y + 0.5))


@dataclass
class AnomalyField:
    """
    Intensity grid derived each tick from the live anomaly sources.

    The grid is indexed [y, x] and every cell stays within [0, 1]. It is
    rebuilt from scratch every update rather than accumulated, so its
    magnitude is bounded by the sources' decay.
    """
    width: int
    height: int
    spawn_probability: float = config.ANOMALY_SPAWN_PROBABILITY
    decay_rate: float = config.ANOMALY_DECAY_RATE
    diffusion_factor: float = config.ANOMALY_DIFFUSION_FACTOR
    rng: random.Random = field(default_factory=random.Random, repr=False)
    elapsed_time: float = 0.0
    _sources: List[AnomalySource] = field(default_factory=list, repr=False)
    _grid: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        """Allocate the empty grid."""
        self._grid = np.zeros((self.height, self.width), dtype=float)

    @property
    def sources(self) -> Tuple[AnomalySource, ...]:
        """Live anomaly sources (read-only view)."""
        return tuple(self._sources)

    @property
    def grid(self) -> np.ndarray:
        """The current grid. Callers must not mutate it; use snapshot()."""
        return self._grid

    def snapshot(self) -> np.ndarray:
        """Copy of the current intensity grid."""
        return self._grid.copy()

    def add_source(self, x: float, y: float, intensity: float) -> AnomalySource:
        """Inject an anomaly source at the given position."""
        source = AnomalySource(x=x, y=y, intensity=intensity,
                               created_at=self.elapsed_time)
        self._sources.append(source)
        return source

    def update(self, dt: float) -> List[AnomalySource]:
        """
        Advance the field by one tick.

        Order: spawn, decay, rebuild grid from sources, diffuse, clamp,
        drop dead sources.

        Args:
            dt: Simulated seconds elapsed this tick

        Returns:
            Sources spawned during this tick (zero or one)
        """
        self.elapsed_time += dt

        spawned = []
        if self.rng.random() < self.spawn_probability:
            spawned.append(self._spawn())

        for source in self._sources:
            source.decay(self.decay_rate)

        self._rebuild()
        self._grid = np.clip(self._diffuse(self._grid), 0.0, 1.0)

        self._sources = [s for s in self._sources if s.is_alive()]
        return spawned

    def _spawn(self) -> AnomalySource:
        """Create a source at a uniformly random cell."""
        x = self.rng.randrange(self.width)
        y = self.rng.randrange(self.height)
        low, high = config.ANOMALY_SPAWN_INTENSITY
        intensity = self.rng.uniform(low, high)
        return self.add_source(float(x), float(y), intensity)

    def _rebuild(self) -> None:
        """Clear the grid and accumulate every source into its cell."""
        self._grid.fill(0.0)
        for source in self._sources:
            ix, iy = source.cell()
            if 0 <= ix < self.width and 0 <= iy < self.height:
                self._grid[iy, ix] += source.intensity

    def _diffuse(self, grid: np.ndarray) -> np.ndarray:
        """
        Spread a share of every cell to its 8 neighbours.

        The spread is read from the input grid and written to a new buffer,
        so values diffused this step never act as diffusion sources.
        Border cells spread to fewer neighbours (no wraparound).
        """
        result = grid.copy()
        if self.diffusion_factor == 0.0:
            return result

        spread = np.where(grid > 0.0, grid * self.diffusion_factor / 8.0, 0.0)
        h, w = grid.shape
        for dy, dx in NEIGHBOR_OFFSETS:
            # destination rows/cols that have a source at (row - dy, col - dx)
            dst_y = slice(max(dy, 0), h + min(dy, 0))
            dst_x = slice(max(dx, 0), w + min(dx, 0))
            src_y = slice(max(-dy, 0), h + min(-dy, 0))
            src_x = slice(max(-dx, 0), w + min(-dx, 0))
            result[dst_y, dst_x] += spread[src_y, src_x]
        return result

    def sample_at(self, x: float, y: float) -> float:
        """Intensity of the cell containing (x, y); 0.0 outside the grid."""
        ix = int(math.floor(x))
        iy = int(math.floor(y))
        if ix < 0 or ix >= self.width or iy < 0 or iy >= self.height:
            return 0.0
        return float(self._grid[iy, ix])

    def hotspots(self, threshold: float) -> List[Tuple[int, int]]:
        """Cells with intensity strictly above threshold, in row-major order."""
        ys, xs = np.nonzero(self._grid > threshold)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def fraction_above(self, threshold: float) -> float:
        """Fraction of grid cells with intensity strictly above threshold."""
        total = self._grid.size
        if total == 0:
            return 0.0
        return float(np.count_nonzero(self._grid > threshold)) / total

    def reset(self) -> None:
        """Remove all sources, zero the grid and rewind the clock."""
        self._sources = []
        self._grid.fill(0.0)
        self.elapsed_time = 0.0
