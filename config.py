"""Configuration constants for the anomaly-tracking drone fleet."""

from dataclasses import dataclass

# Grid dimensions (cells)
GRID_WIDTH = 50
GRID_HEIGHT = 50

# Simulation
TICK_DURATION = 0.2  # seconds of simulated time per tick

# Drone configuration
NUM_DRONES = 7
DRONE_SPEED = 2.0  # cells per second
DRONE_AUTONOMY = 30 * 60.0  # seconds of flight per charge
DRONE_RECHARGE_TIME = 10 * 60.0  # seconds at base to recharge
MEASUREMENT_DURATION = 10.0  # seconds to hold position while sensing
ARRIVAL_TOLERANCE = 0.5  # distance at which a waypoint counts as reached
BASE_POSITION = (0.0, 0.0)

# Anomaly field
ANOMALY_SPAWN_PROBABILITY = 0.05  # per tick
ANOMALY_DECAY_RATE = 0.95  # intensity *= rate per tick
ANOMALY_DIFFUSION_FACTOR = 0.10  # fraction spread to the 8 neighbours
ANOMALY_MIN_INTENSITY = 0.01  # sources below this are removed
ANOMALY_SPAWN_INTENSITY = (0.5, 1.0)

# Detection
DETECTION_THRESHOLD = 0.3
MEASUREMENT_NOISE = 0.05  # uniform jitter amplitude

# Adaptive re-tasking
HOTSPOT_THRESHOLD = 0.7
RETASK_RADIUS = 5.0  # a roaming drone this close already covers a hotspot
RETASK_INTERVAL_TICKS = 30

# Metrics / history
SNAPSHOT_INTERVAL = 5.0  # seconds of simulated time between snapshots
TRAJECTORY_LENGTH = 500  # positions kept per drone

# Rendering
CELL_SIZE_PX = 12


class ConfigurationError(ValueError):
    """Raised when simulation parameters describe a degenerate setup."""


@dataclass(frozen=True)
class SimulationParams:
    """All tunable knobs of one simulation run.

    Scenario presets are just different instances of this class, see
    scenarios.apply_scenario().
    """

    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    num_drones: int = NUM_DRONES
    tick_duration: float = TICK_DURATION
    drone_speed: float = DRONE_SPEED
    energy_capacity: float = DRONE_AUTONOMY
    recharge_duration: float = DRONE_RECHARGE_TIME
    measurement_duration: float = MEASUREMENT_DURATION
    spawn_probability: float = ANOMALY_SPAWN_PROBABILITY
    decay_rate: float = ANOMALY_DECAY_RATE
    diffusion_factor: float = ANOMALY_DIFFUSION_FACTOR
    detection_threshold: float = DETECTION_THRESHOLD
    hotspot_threshold: float = HOTSPOT_THRESHOLD
    retask_radius: float = RETASK_RADIUS
    retask_interval: int = RETASK_INTERVAL_TICKS
    snapshot_interval: float = SNAPSHOT_INTERVAL
    measurement_noise: float = MEASUREMENT_NOISE
    trajectory_length: int = TRAJECTORY_LENGTH

    def __post_init__(self) -> None:
        if self.grid_width < 1 or self.grid_height < 1:
            raise ConfigurationError("grid dimensions must be >= 1")
        if self.num_drones < 1:
            raise ConfigurationError("num_drones must be >= 1")
        if self.tick_duration <= 0:
            raise ConfigurationError("tick_duration must be > 0")
        if self.drone_speed <= 0:
            raise ConfigurationError("drone_speed must be > 0")
        if self.energy_capacity <= 0:
            raise ConfigurationError("energy_capacity must be > 0")
        if self.recharge_duration < 0:
            raise ConfigurationError("recharge_duration must be >= 0")
        if self.measurement_duration < 0:
            raise ConfigurationError("measurement_duration must be >= 0")
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ConfigurationError("spawn_probability must be in [0.0, 1.0]")
        if not 0.0 < self.decay_rate < 1.0:
            raise ConfigurationError("decay_rate must be in (0.0, 1.0)")
        if not 0.0 <= self.diffusion_factor <= 1.0:
            raise ConfigurationError("diffusion_factor must be in [0.0, 1.0]")
        if not 0.0 <= self.detection_threshold <= 1.0:
            raise ConfigurationError("detection_threshold must be in [0.0, 1.0]")
        if not 0.0 <= self.hotspot_threshold <= 1.0:
            raise ConfigurationError("hotspot_threshold must be in [0.0, 1.0]")
        if self.retask_radius < 0:
            raise ConfigurationError("retask_radius must be >= 0")
        if self.retask_interval < 1:
            raise ConfigurationError("retask_interval must be >= 1")
        if self.snapshot_interval <= 0:
            raise ConfigurationError("snapshot_interval must be > 0")
        if self.measurement_noise < 0:
            raise ConfigurationError("measurement_noise must be >= 0")
        if self.trajectory_length < 1:
            raise ConfigurationError("trajectory_length must be >= 1")
