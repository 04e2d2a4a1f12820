"""Shared fixtures for the simulator tests."""

import os
import random

# Headless rendering for visualization tests; must be set before pyplot loads.
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from anomaly_field import AnomalyField


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def quiet_field(rng: random.Random) -> AnomalyField:
    """10x10 field with no random spawning."""
    return AnomalyField(
        width=10,
        height=10,
        spawn_probability=0.0,
        decay_rate=0.9,
        diffusion_factor=0.1,
        rng=rng,
    )
