"""Simulation engine for the anomaly-tracking drone fleet."""

from collections import deque
from typing import Deque, Dict, List, Optional, Tuple
import random

import numpy as np

import config
from config import SimulationParams
from anomaly_field import AnomalyField
from coordinator import Coordinator
from coverage_map import CoverageMap
from drone import Drone, DroneStatus, Point
from events import EventCategory, EventLog
from metrics import SimulationMetrics


class Simulation:
    """
    Owns the clock and the per-tick ordering of every component.

    Each tick runs, in order: field update, drone updates with passive
    detection, periodic re-tasking, metrics, clock advance. Nothing happens
    unless the simulation has been started.
    """

    def __init__(
        self,
        params: Optional[SimulationParams] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize the simulation.

        Args:
            params: Run parameters (defaults to config values)
            rng: Random source for spawning and sensor noise
            seed: Seed for a fresh random source; reset() re-seeds with it
            verbose: If True, print events as they are recorded
        """
        self.params = params or SimulationParams()
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        if rng is not None and seed is not None:
            self.rng.seed(seed)

        p = self.params
        self.field = AnomalyField(
            width=p.grid_width,
            height=p.grid_height,
            spawn_probability=p.spawn_probability,
            decay_rate=p.decay_rate,
            diffusion_factor=p.diffusion_factor,
            rng=self.rng,
        )
        self.coordinator = Coordinator(
            hotspot_threshold=p.hotspot_threshold,
            retask_radius=p.retask_radius,
        )
        self.coverage_map = CoverageMap(width=p.grid_width, height=p.grid_height)
        self.metrics = SimulationMetrics(
            detection_threshold=p.detection_threshold,
            snapshot_interval=p.snapshot_interval,
        )
        self.events = EventLog(verbose=verbose)

        # Drones start at base
        base_x, base_y = config.BASE_POSITION
        self.drones: List[Drone] = [
            Drone(
                id=i,
                x=base_x,
                y=base_y,
                speed=p.drone_speed,
                energy_capacity=p.energy_capacity,
                recharge_duration=p.recharge_duration,
                measurement_duration=p.measurement_duration,
            )
            for i in range(p.num_drones)
        ]
        self.trajectories: Dict[int, Deque[Point]] = {}

        self.tick_count = 0
        self.is_running = False

        self._initialize_trajectories()
        self._assign_coverage_plan()

    # ========== Lifecycle ==========

    def start(self) -> None:
        self.is_running = True

    def stop(self) -> None:
        self.is_running = False

    def reset(self) -> None:
        """Return every component to its initial state and stop."""
        self.is_running = False
        self.tick_count = 0
        if self.seed is not None:
            self.rng.seed(self.seed)

        self.field.reset()
        base_x, base_y = config.BASE_POSITION
        for drone in self.drones:
            drone.reset(base_x, base_y)
        self.coverage_map.reset()
        self.metrics.reset()
        self.events.clear()
        self._initialize_trajectories()
        self._assign_coverage_plan()

    @property
    def simulation_time(self) -> float:
        """Simulated seconds elapsed since the last reset."""
        return self.tick_count * self.params.tick_duration

    def _initialize_trajectories(self) -> None:
        self.trajectories = {
            d.id: deque([d.position], maxlen=self.params.trajectory_length)
            for d in self.drones
        }

    def _assign_coverage_plan(self) -> None:
        """Give every drone its initial sweep path."""
        plan = self.coordinator.plan_coverage(
            len(self.drones), self.params.grid_width, self.params.grid_height
        )
        for drone, path in zip(self.drones, plan):
            drone.assign_path(path)

    # ========== Tick ==========

    def tick(self) -> bool:
        """
        Advance the simulation by one fixed timestep.

        Returns:
            False if the simulation is stopped and nothing happened
        """
        if not self.is_running:
            return False

        dt = self.params.tick_duration
        now = self.simulation_time

        spawned = self.field.update(dt)
        for source in spawned:
            self.events.record(
                now, EventCategory.FIELD,
                f"Anomaly spawned at ({source.x:.0f}, {source.y:.0f}) "
                f"intensity {source.intensity:.2f}"
            )

        for drone in self.drones:
            self._update_drone(drone, dt, now)

        if self.tick_count % self.params.retask_interval == 0:
            self._retask(now)

        self.metrics.update(self.drones, self.field, self.coverage_map, now)

        self.tick_count += 1
        return True

    def _update_drone(self, drone: Drone, dt: float, now: float) -> None:
        """Advance one drone, then detect, log and record its position."""
        before, after = drone.advance(dt)
        if before != after:
            self.events.record(
                now, EventCategory.DRONE,
                f"Drone {drone.id}: {before.value.upper()} -> {after.value.upper()} "
                f"at ({drone.x:.1f}, {drone.y:.1f}), energy {drone.energy:.1f}s"
            )

        if drone.status == DroneStatus.ROAMING:
            intensity = self.field.sample_at(drone.x, drone.y)
            if intensity > self.params.detection_threshold:
                noise = self.params.measurement_noise
                measured = intensity + self.rng.uniform(-noise, noise)
                drone.record_measurement(measured, now, drone.x, drone.y)
                self.events.record(
                    now, EventCategory.DETECTION,
                    f"Drone {drone.id} measured {measured:.3f} "
                    f"at ({drone.x:.1f}, {drone.y:.1f})"
                )

        if drone.status in (DroneStatus.ROAMING, DroneStatus.SENSING):
            self.coverage_map.mark_visited(drone.x, drone.y, drone.id)
        self.trajectories[drone.id].append(drone.position)

    def _retask(self, now: float) -> List[Tuple[int, Point]]:
        assignments = self.coordinator.retask(self.drones, self.field)
        for drone_id, (hx, hy) in assignments:
            self.events.record(
                now, EventCategory.RETASK,
                f"Drone {drone_id} redirected to hotspot ({hx:.0f}, {hy:.0f})"
            )
        return assignments

    # ========== Queries ==========

    def get_drone(self, drone_id: int) -> Optional[Drone]:
        for drone in self.drones:
            if drone.id == drone_id:
                return drone
        return None

    def grid_snapshot(self) -> np.ndarray:
        return self.field.snapshot()

    def all_measurements(self) -> Dict[int, list]:
        """Measurements currently held by each drone, keyed by drone id."""
        return {d.id: list(d.measurements) for d in self.drones}

    def get_status(self) -> Dict:
        """Get current status of the field and all drones."""
        return {
            'time': self.simulation_time,
            'running': self.is_running,
            'tick': self.tick_count,
            'drones': [
                {
                    'id': d.id,
                    'position': d.position,
                    'status': d.status.value,
                    'energy': d.energy,
                    'measurements': len(d.measurements),
                    'pending_waypoints': len(d.waypoints),
                    'target': d.target,
                }
                for d in self.drones
            ],
            'live_anomalies': self.metrics.live_anomaly_count,
            'field_coverage_fraction': self.metrics.field_coverage_fraction,
            'visited_fraction': self.metrics.visited_fraction,
            'snapshots': len(self.metrics.history),
            'events': len(self.events),
        }

    # ========== Headless run ==========

    def run(self, max_time: float = 300.0) -> dict:
        """
        Run ticks until max_time seconds of simulated time have passed.

        The loop does not pace against the wall clock.
        """
        self.start()
        self.events.record(self.simulation_time, EventCategory.SIMULATION,
                           f"Started, running until {max_time:.1f}s")
        while self.is_running and self.simulation_time < max_time:
            self.tick()
        self.stop()
        self.events.record(self.simulation_time, EventCategory.SIMULATION,
                           f"Completed at {self.simulation_time:.1f}s")

        return {
            'final_time': self.simulation_time,
            'status': self.get_status(),
            'history': list(self.metrics.history),
        }

    def print_final_stats(self) -> None:
        """Print final simulation statistics."""
        status = self.get_status()
        states: Dict[str, int] = {}
        for d in status['drones']:
            states[d['status']] = states.get(d['status'], 0) + 1

        print("\n" + "=" * 50)
        print("SIMULATION COMPLETE")
        print("=" * 50)
        print(f"Total time: {self.simulation_time:.1f} seconds ({self.tick_count} ticks)")
        print(f"Live anomalies: {status['live_anomalies']}")
        print(f"Field above threshold: {status['field_coverage_fraction']:.1%}")
        print(f"Cells visited by drones: {status['visited_fraction']:.1%}")
        print("Drone states: " + ", ".join(f"{k}={v}" for k, v in sorted(states.items())))
        print(f"Metric snapshots: {status['snapshots']}")
        print("=" * 50)
