"""Predefined anomaly regimes for simulation runs."""

from dataclasses import replace
from enum import Enum
from typing import Optional

from config import SimulationParams


class Scenario(Enum):
    """Anomaly regime as (label, spawn probability, decay rate, diffusion)."""
    NO_ANOMALIES = ("No anomalies", 0.0, 0.90, 0.05)
    SPARSE_ANOMALIES = ("Sparse anomalies", 0.02, 0.93, 0.08)
    NORMAL = ("Normal", 0.05, 0.95, 0.10)
    HEAVY_POLLUTION = ("Heavy pollution", 0.15, 0.92, 0.15)
    RAPIDLY_SPREADING = ("Rapidly spreading", 0.08, 0.90, 0.20)

    def __init__(self, label: str, spawn_probability: float,
                 decay_rate: float, diffusion_factor: float):
        self.label = label
        self.spawn_probability = spawn_probability
        self.decay_rate = decay_rate
        self.diffusion_factor = diffusion_factor

    @classmethod
    def from_name(cls, name: str) -> 'Scenario':
        """Look up a scenario by case-insensitive member name."""
        try:
            return cls[name.upper().replace('-', '_')]
        except KeyError:
            choices = ', '.join(s.name.lower() for s in cls)
            raise ValueError(f"Unknown scenario '{name}' (choose from: {choices})") from None


def apply_scenario(scenario: Scenario,
                   params: Optional[SimulationParams] = None) -> SimulationParams:
    """
    Return a copy of params with the scenario's anomaly settings applied.

    Args:
        scenario: The preset to apply
        params: Base parameters (defaults to config values)

    Returns:
        New SimulationParams; the input is left untouched
    """
    base = params or SimulationParams()
    return replace(
        base,
        spawn_probability=scenario.spawn_probability,
        decay_rate=scenario.decay_rate,
        diffusion_factor=scenario.diffusion_factor,
    )
