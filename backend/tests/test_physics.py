import math
import random

import pytest

from race_server.models import PlayerInput, Vec2, Vehicle
from race_server.services.games.physics import PhysicsSettings, integrate


def _car(**controls):
    vehicle = Vehicle(id='p1', position=Vec2(600.0, 400.0))
    vehicle.input = PlayerInput(**controls)
    return vehicle


def test_idle_vehicle_stays_put(settings):
    car = _car()
    integrate(car, settings)
    assert car.velocity == Vec2(0.0, 0.0)
    assert car.position == Vec2(600.0, 400.0)
    assert car.rotation == 0.0


def test_up_accelerates_along_heading(settings):
    car = _car(up=True)
    integrate(car, settings)
    # heading 0 points toward negative y
    assert car.velocity.x == pytest.approx(0.0)
    assert car.velocity.y == pytest.approx(-settings.accel * settings.drag)
    assert car.position.y == pytest.approx(400.0 - settings.accel * settings.drag)


def test_down_reverses(settings):
    car = _car(down=True)
    integrate(car, settings)
    assert car.velocity.y == pytest.approx(settings.reverse_accel * settings.drag)


def test_up_takes_priority_over_down(settings):
    both = _car(up=True, down=True)
    only_up = _car(up=True)
    integrate(both, settings)
    integrate(only_up, settings)
    assert both.velocity == only_up.velocity


def test_speed_rises_monotonically_then_holds_at_max(settings):
    car = _car(up=True)
    speeds = []
    for _ in range(200):
        integrate(car, settings)
        speeds.append(car.speed)
    for before, after in zip(speeds, speeds[1:]):
        assert after >= before - 1e-9
    assert speeds[-1] == pytest.approx(settings.max_speed)
    assert max(speeds) <= settings.max_speed + 1e-9


def test_no_steering_below_min_turn_speed(settings):
    car = _car(left=True)
    integrate(car, settings)
    assert car.rotation == 0.0


def test_steering_scales_with_speed(settings):
    car = _car(right=True)
    car.velocity = Vec2(0.0, -settings.max_speed / 2)
    integrate(car, settings)
    assert car.rotation == pytest.approx(settings.turn_rate * 0.5)

    car = _car(left=True)
    car.velocity = Vec2(0.0, -settings.max_speed)
    integrate(car, settings)
    assert car.rotation == pytest.approx(-settings.turn_rate)


def test_wall_clamps_position_but_keeps_velocity(settings):
    car = _car(up=True)
    car.position = Vec2(100.0, settings.boundary_padding + 1.0)
    car.velocity = Vec2(0.0, -5.0)
    integrate(car, settings)
    assert car.position.y == settings.boundary_padding
    assert car.velocity.y < 0


def test_position_never_leaves_track(settings):
    rng = random.Random(7)
    car = Vehicle(id='p1')
    pad = settings.boundary_padding
    for _ in range(2000):
        car.input = PlayerInput(
            up=rng.random() < 0.7,
            down=rng.random() < 0.2,
            left=rng.random() < 0.3,
            right=rng.random() < 0.3,
        )
        integrate(car, settings)
        assert pad <= car.position.x <= settings.track_width - pad
        assert pad <= car.position.y <= settings.track_height - pad
        assert not math.isnan(car.rotation)


def test_settings_from_config():
    custom = PhysicsSettings.from_config({'MAX_SPEED': '12', 'TRACK_WIDTH': 500})
    assert custom.max_speed == 12.0
    assert custom.track_width == 500.0
    assert custom.drag == PhysicsSettings().drag
