"""Drone agent class for the anomaly-tracking fleet."""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterable, List, Optional, Tuple
import math

import config

Point = Tuple[float, float]

# Energy counters are floats; treat anything this small as exhausted.
_EPSILON = 1e-9


class DroneStatus(Enum):
    """Lifecycle state of a drone."""
    ROAMING = "roaming"
    SENSING = "sensing"
    RETURNING = "returning"
    CHARGING = "charging"


class Effect(Enum):
    """Side effects a status transition asks the drone to apply."""
    TARGET_BASE = "target_base"
    START_RECHARGE = "start_recharge"
    UPLOAD = "upload"
    REFILL_ENERGY = "refill_energy"


@dataclass(frozen=True)
class TransitionInputs:
    """What the state machine looks at after a tick's work is done."""
    energy: float
    timer: float = 0.0  # measurement or recharge countdown, by status
    at_base: bool = False


def transition(status: DroneStatus,
               inputs: TransitionInputs) -> Tuple[DroneStatus, Tuple[Effect, ...]]:
    """
    Pure drone state machine.

    ROAMING -> RETURNING when energy is exhausted.
    SENSING -> ROAMING when the measurement timer runs out, or RETURNING
    when energy runs out first (energy wins if both happen).
    RETURNING -> CHARGING on reaching base, uploading measurements.
    CHARGING -> ROAMING when the recharge timer runs out, with full energy.

    Returns:
        (next status, effects to apply)
    """
    exhausted = inputs.energy <= _EPSILON

    if status == DroneStatus.ROAMING:
        if exhausted:
            return DroneStatus.RETURNING, (Effect.TARGET_BASE,)

    elif status == DroneStatus.SENSING:
        if exhausted:
            return DroneStatus.RETURNING, (Effect.TARGET_BASE,)
        if inputs.timer <= _EPSILON:
            return DroneStatus.ROAMING, ()

    elif status == DroneStatus.RETURNING:
        if inputs.at_base:
            return DroneStatus.CHARGING, (Effect.START_RECHARGE, Effect.UPLOAD)

    elif status == DroneStatus.CHARGING:
        if inputs.timer <= _EPSILON:
            return DroneStatus.ROAMING, (Effect.REFILL_ENERGY,)

    return status, ()


@dataclass(frozen=True)
class Measurement:
    """A sensor reading logged by a drone."""
    intensity: float
    timestamp: float
    x: float
    y: float


@dataclass
class Drone:
    """
    An autonomous sensing drone.

    Flies its waypoint queue while ROAMING, spending one unit of energy per
    simulated second, and heads back to base to recharge when it runs dry.
    The queue is only ever replaced through assign_path().
    """
    id: int
    x: float = 0.0
    y: float = 0.0
    speed: float = config.DRONE_SPEED
    energy_capacity: float = config.DRONE_AUTONOMY
    recharge_duration: float = config.DRONE_RECHARGE_TIME
    measurement_duration: float = config.MEASUREMENT_DURATION
    arrival_tolerance: float = config.ARRIVAL_TOLERANCE
    base: Point = config.BASE_POSITION
    status: DroneStatus = DroneStatus.ROAMING
    measurements: List[Measurement] = field(default_factory=list)

    _target: Optional[Point] = field(default=None, repr=False)
    _waypoints: Deque[Point] = field(default_factory=deque, repr=False)
    _measurement_timer: float = field(default=0.0, repr=False)
    _recharge_timer: float = field(default=0.0, repr=False)
    _energy: Optional[float] = field(default=None, repr=False)

    def __post_init__(self):
        """Start fully charged, holding the starting position."""
        if self._energy is None:
            self._energy = self.energy_capacity
        if self._target is None:
            self._target = (self.x, self.y)

    # ========== Path management ==========

    def assign_path(self, points: Iterable[Point]) -> None:
        """
        Replace the waypoint queue wholesale.

        Any unfinished path is discarded. Planners are expected to end the
        path with the base coordinate.
        """
        self._waypoints = deque((float(px), float(py)) for px, py in points)

    @property
    def waypoints(self) -> Tuple[Point, ...]:
        """Pending waypoints, head first."""
        return tuple(self._waypoints)

    @property
    def target(self) -> Point:
        """Position the drone is currently flying toward."""
        return self._target

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def energy(self) -> float:
        """Remaining autonomy in seconds, never below zero."""
        return max(self._energy, 0.0)

    @property
    def measurement_timer(self) -> float:
        return self._measurement_timer

    @property
    def recharge_timer(self) -> float:
        return self._recharge_timer

    def distance_to(self, x: float, y: float) -> float:
        """Euclidean distance from the drone to a point."""
        return math.hypot(self.x - x, self.y - y)

    def is_at_base(self) -> bool:
        return self.distance_to(*self.base) < self.arrival_tolerance

    # ========== Measurements ==========

    def record_measurement(self, intensity: float, timestamp: float,
                           x: float, y: float) -> Measurement:
        """Append a sensor reading to the local log."""
        measurement = Measurement(intensity=intensity, timestamp=timestamp, x=x, y=y)
        self.measurements.append(measurement)
        return measurement

    def clear_measurements(self) -> None:
        """Drop the local log (data uploaded to base)."""
        self.measurements.clear()

    def start_sensing(self) -> bool:
        """
        Hold position and sample for the measurement duration.

        Only a ROAMING drone can start sensing.

        Returns:
            True if the drone entered SENSING
        """
        if self.status != DroneStatus.ROAMING:
            return False
        self.status = DroneStatus.SENSING
        self._measurement_timer = self.measurement_duration
        return True

    # ========== Motion ==========

    def _advance_waypoint(self) -> None:
        """Drop reached waypoints and target the next one."""
        while self._waypoints:
            head = self._waypoints[0]
            self._target = head
            if self.distance_to(*head) < self.arrival_tolerance:
                self._waypoints.popleft()
            else:
                break

    def move_toward(self, tx: float, ty: float, dt: float) -> None:
        """Move toward (tx, ty) at fixed speed without overshooting."""
        dx = tx - self.x
        dy = ty - self.y
        distance = math.sqrt(dx * dx + dy * dy)

        if distance < 0.01:  # Essentially there
            return

        move_dist = min(self.speed * dt, distance)
        self.x += dx / distance * move_dist
        self.y += dy / distance * move_dist

    def advance(self, dt: float) -> Tuple[DroneStatus, DroneStatus]:
        """
        Update the drone for one timestep.

        Args:
            dt: Simulated seconds elapsed

        Returns:
            (status before, status after) so callers can log transitions
        """
        previous = self.status
        timer = 0.0

        if self.status == DroneStatus.ROAMING:
            self._advance_waypoint()
            self.move_toward(*self._target, dt)
            self._energy -= dt

        elif self.status == DroneStatus.SENSING:
            self._measurement_timer -= dt
            self._energy -= dt
            timer = self._measurement_timer

        elif self.status == DroneStatus.RETURNING:
            if not self.is_at_base():
                self.move_toward(*self.base, dt)
                self._energy -= dt

        elif self.status == DroneStatus.CHARGING:
            self._recharge_timer -= dt
            timer = self._recharge_timer

        inputs = TransitionInputs(energy=self._energy, timer=timer,
                                  at_base=self.is_at_base())
        self.status, effects = transition(self.status, inputs)
        self._apply_effects(effects)

        return previous, self.status

    def _apply_effects(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if effect == Effect.TARGET_BASE:
                self._target = self.base
                self._measurement_timer = 0.0
            elif effect == Effect.START_RECHARGE:
                self._recharge_timer = self.recharge_duration
            elif effect == Effect.UPLOAD:
                self.clear_measurements()
            elif effect == Effect.REFILL_ENERGY:
                self._energy = self.energy_capacity
                self._recharge_timer = 0.0

    def reset(self, x: float = 0.0, y: float = 0.0) -> None:
        """Return to a fresh state at (x, y): full energy, empty logs and queue."""
        self.x = x
        self.y = y
        self.status = DroneStatus.ROAMING
        self._energy = self.energy_capacity
        self.measurements = []
        self._target = (x, y)
        self._waypoints = deque()
        self._measurement_timer = 0.0
        self._recharge_timer = 0.0
