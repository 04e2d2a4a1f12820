"""Tests for parameter validation and scenario presets."""

import dataclasses

import pytest

import config
from config import ConfigurationError, SimulationParams
from scenarios import Scenario, apply_scenario


class TestSimulationParams:
    def test_defaults_come_from_config(self) -> None:
        params = SimulationParams()
        assert params.grid_width == config.GRID_WIDTH
        assert params.num_drones == config.NUM_DRONES
        assert params.tick_duration == config.TICK_DURATION
        assert params.retask_interval == config.RETASK_INTERVAL_TICKS

    def test_params_are_frozen(self) -> None:
        params = SimulationParams()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.num_drones = 3  # type: ignore[misc]

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="num_drones"):
            SimulationParams(num_drones=0)

    @pytest.mark.parametrize("overrides", [
        dict(drone_speed=0.0),
        dict(energy_capacity=0.0),
        dict(recharge_duration=-1.0),
        dict(diffusion_factor=-0.1),
        dict(detection_threshold=1.2),
        dict(retask_interval=0),
        dict(snapshot_interval=0.0),
        dict(trajectory_length=0),
    ])
    def test_invalid_values_rejected(self, overrides: dict) -> None:
        with pytest.raises(ConfigurationError):
            SimulationParams(**overrides)


class TestScenarios:
    def test_apply_replaces_anomaly_settings_only(self) -> None:
        base = SimulationParams(num_drones=3, grid_width=30)
        params = apply_scenario(Scenario.HEAVY_POLLUTION, base)

        assert params.spawn_probability == 0.15
        assert params.decay_rate == 0.92
        assert params.diffusion_factor == 0.15
        assert params.num_drones == 3
        assert params.grid_width == 30
        assert base.spawn_probability == config.ANOMALY_SPAWN_PROBABILITY

    def test_every_scenario_is_valid(self) -> None:
        for scenario in Scenario:
            params = apply_scenario(scenario)
            assert params.decay_rate == scenario.decay_rate

    def test_no_anomalies_never_spawns(self) -> None:
        assert apply_scenario(Scenario.NO_ANOMALIES).spawn_probability == 0.0

    @pytest.mark.parametrize("name", ["sparse_anomalies", "SPARSE_ANOMALIES", "sparse-anomalies"])
    def test_from_name(self, name: str) -> None:
        assert Scenario.from_name(name) is Scenario.SPARSE_ANOMALIES

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown scenario"):
            Scenario.from_name("tornado")
