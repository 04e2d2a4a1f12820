"""Tests for the drone state machine, motion and measurement log."""

import pytest

from drone import (
    Drone, DroneStatus, Effect, Measurement, TransitionInputs, transition,
)


class TestTransition:
    def test_roaming_with_energy_stays_roaming(self) -> None:
        assert transition(DroneStatus.ROAMING, TransitionInputs(energy=5.0)) == (
            DroneStatus.ROAMING, ())

    def test_roaming_out_of_energy_returns(self) -> None:
        status, effects = transition(DroneStatus.ROAMING, TransitionInputs(energy=0.0))
        assert status == DroneStatus.RETURNING
        assert effects == (Effect.TARGET_BASE,)

    def test_roaming_negative_energy_returns(self) -> None:
        status, _ = transition(DroneStatus.ROAMING, TransitionInputs(energy=-0.3))
        assert status == DroneStatus.RETURNING

    def test_sensing_timer_done_goes_roaming(self) -> None:
        status, effects = transition(DroneStatus.SENSING,
                                     TransitionInputs(energy=3.0, timer=0.0))
        assert status == DroneStatus.ROAMING
        assert effects == ()

    def test_sensing_keeps_sensing_while_timer_runs(self) -> None:
        status, _ = transition(DroneStatus.SENSING, TransitionInputs(energy=3.0, timer=1.0))
        assert status == DroneStatus.SENSING

    def test_sensing_energy_wins_over_timer(self) -> None:
        status, effects = transition(DroneStatus.SENSING,
                                     TransitionInputs(energy=0.0, timer=0.0))
        assert status == DroneStatus.RETURNING
        assert Effect.TARGET_BASE in effects

    def test_returning_at_base_starts_charging_and_uploads(self) -> None:
        status, effects = transition(DroneStatus.RETURNING,
                                     TransitionInputs(energy=-1.0, at_base=True))
        assert status == DroneStatus.CHARGING
        assert set(effects) == {Effect.START_RECHARGE, Effect.UPLOAD}

    def test_returning_away_from_base_keeps_returning(self) -> None:
        status, effects = transition(DroneStatus.RETURNING,
                                     TransitionInputs(energy=-1.0, at_base=False))
        assert status == DroneStatus.RETURNING
        assert effects == ()

    def test_charging_done_refills(self) -> None:
        status, effects = transition(DroneStatus.CHARGING,
                                     TransitionInputs(energy=-1.0, timer=0.0, at_base=True))
        assert status == DroneStatus.ROAMING
        assert effects == (Effect.REFILL_ENERGY,)


class TestEnergy:
    def test_budget_runs_out_on_fifth_tick(self) -> None:
        drone = Drone(id=0, energy_capacity=1000)
        for _ in range(4):
            drone.advance(200)
            assert drone.status == DroneStatus.ROAMING
        drone.advance(200)
        assert drone.status == DroneStatus.RETURNING
        assert drone.energy == 0
        assert drone.target == (0.0, 0.0)

    def test_returning_triggers_on_the_tick_energy_crosses_zero(self) -> None:
        drone = Drone(id=0, x=3.0, y=3.0, energy_capacity=1.0)
        while drone.status == DroneStatus.ROAMING:
            drone.advance(0.3)
            if drone.energy <= 0:
                assert drone.status == DroneStatus.RETURNING

    def test_full_cycle_returning_charging_roaming(self) -> None:
        drone = Drone(id=1, x=1.0, y=0.0, speed=1.0,
                      energy_capacity=1.0, recharge_duration=2.0)
        drone.record_measurement(0.8, 0.0, 1.0, 0.0)

        drone.advance(1.0)
        assert drone.status == DroneStatus.RETURNING

        drone.advance(1.0)
        assert drone.status == DroneStatus.CHARGING
        assert drone.position == pytest.approx((0.0, 0.0))
        assert drone.measurements == []
        assert drone.recharge_timer == pytest.approx(2.0)

        drone.advance(1.0)
        assert drone.status == DroneStatus.CHARGING
        assert drone.energy == 0.0  # not refilled until charging completes

        drone.advance(1.0)
        assert drone.status == DroneStatus.ROAMING
        assert drone.energy == pytest.approx(1.0)

    def test_energy_reads_zero_during_long_flight_home(self) -> None:
        drone = Drone(id=0, x=40.0, y=40.0, speed=2.0, energy_capacity=1.0)
        for _ in range(21):
            drone.advance(1.0)
        assert drone.status == DroneStatus.RETURNING
        assert drone.energy == 0.0

    def test_returning_ignores_waypoints(self) -> None:
        drone = Drone(id=0, x=4.0, y=0.0, speed=1.0, energy_capacity=0.5)
        drone.assign_path([(10.0, 0.0), (0.0, 0.0)])
        drone.advance(0.5)
        assert drone.status == DroneStatus.RETURNING
        x_before = drone.x
        drone.advance(1.0)
        assert drone.x == pytest.approx(x_before - 1.0)
        assert drone.y == pytest.approx(0.0)


class TestMotion:
    def test_moves_at_speed_toward_target(self) -> None:
        drone = Drone(id=0, speed=2.0)
        drone.assign_path([(10.0, 0.0)])
        drone.advance(1.0)
        assert drone.position == pytest.approx((2.0, 0.0))

    def test_never_overshoots(self) -> None:
        drone = Drone(id=0, speed=2.0)
        drone.assign_path([(1.0, 0.0)])
        drone.advance(1.0)
        assert drone.position == pytest.approx((1.0, 0.0))

    def test_reached_waypoint_is_dequeued(self) -> None:
        drone = Drone(id=0, speed=2.0)
        drone.assign_path([(0.3, 0.0), (5.0, 0.0), (0.0, 0.0)])
        drone.advance(0.1)
        assert drone.waypoints == ((5.0, 0.0), (0.0, 0.0))
        assert drone.target == (5.0, 0.0)
        assert drone.position == pytest.approx((0.2, 0.0))

    def test_empty_queue_holds_position(self) -> None:
        drone = Drone(id=0, x=3.0, y=4.0)
        drone.advance(1.0)
        assert drone.position == (3.0, 4.0)

    def test_stays_at_last_target_after_queue_empties(self) -> None:
        drone = Drone(id=0, speed=10.0)
        drone.assign_path([(2.0, 0.0)])
        drone.advance(1.0)
        drone.advance(1.0)
        drone.advance(1.0)
        assert drone.waypoints == ()
        assert drone.position == pytest.approx((2.0, 0.0))

    def test_assign_path_replaces_queue(self) -> None:
        drone = Drone(id=0)
        drone.assign_path([(1.0, 1.0), (2.0, 2.0), (0.0, 0.0)])
        drone.assign_path([(7.0, 7.0), (0.0, 0.0)])
        assert drone.waypoints == ((7.0, 7.0), (0.0, 0.0))


class TestSensing:
    def test_sensing_holds_position_then_resumes(self) -> None:
        drone = Drone(id=0, energy_capacity=100.0, measurement_duration=1.0)
        drone.assign_path([(10.0, 0.0)])
        assert drone.start_sensing()

        drone.advance(0.5)
        assert drone.status == DroneStatus.SENSING
        assert drone.position == (0.0, 0.0)
        assert drone.energy == pytest.approx(99.5)

        drone.advance(0.5)
        assert drone.status == DroneStatus.ROAMING

    def test_sensing_aborted_by_empty_battery(self) -> None:
        drone = Drone(id=0, energy_capacity=0.5, measurement_duration=10.0)
        drone.start_sensing()
        drone.advance(0.5)
        assert drone.status == DroneStatus.RETURNING

    def test_only_roaming_drone_can_start_sensing(self) -> None:
        drone = Drone(id=0, status=DroneStatus.CHARGING)
        assert not drone.start_sensing()
        assert drone.status == DroneStatus.CHARGING


class TestMeasurements:
    def test_record_and_clear(self) -> None:
        drone = Drone(id=0)
        m = drone.record_measurement(0.5, 1.2, 3.0, 4.0)
        assert m == Measurement(intensity=0.5, timestamp=1.2, x=3.0, y=4.0)
        assert drone.measurements == [m]
        drone.clear_measurements()
        assert drone.measurements == []


class TestReset:
    def test_reset_restores_fresh_state(self) -> None:
        drone = Drone(id=2, energy_capacity=5.0)
        drone.assign_path([(3.0, 3.0), (0.0, 0.0)])
        drone.record_measurement(0.4, 0.0, 0.0, 0.0)
        for _ in range(10):
            drone.advance(1.0)

        drone.reset(0.0, 0.0)

        assert drone.position == (0.0, 0.0)
        assert drone.status == DroneStatus.ROAMING
        assert drone.energy == 5.0
        assert drone.measurements == []
        assert drone.waypoints == ()
        assert drone.target == (0.0, 0.0)
