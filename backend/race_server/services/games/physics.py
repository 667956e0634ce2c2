from dataclasses import dataclass
from typing import Any, Mapping
import math

from race_server.models import Vehicle


@dataclass(frozen=True)
class PhysicsSettings:
    """Process-wide vehicle tuning. Units are world units per tick."""

    accel: float = 0.5
    reverse_accel: float = 0.25
    turn_rate: float = 0.06
    min_turn_speed: float = 0.1
    max_speed: float = 8.0
    drag: float = 0.95
    track_width: float = 1200.0
    track_height: float = 800.0
    boundary_padding: float = 20.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'PhysicsSettings':
        defaults = cls()
        return cls(
            accel=float(config.get('ACCEL', defaults.accel)),
            reverse_accel=float(config.get('REVERSE_ACCEL', defaults.reverse_accel)),
            turn_rate=float(config.get('TURN_RATE', defaults.turn_rate)),
            min_turn_speed=float(config.get('MIN_TURN_SPEED', defaults.min_turn_speed)),
            max_speed=float(config.get('MAX_SPEED', defaults.max_speed)),
            drag=float(config.get('DRAG', defaults.drag)),
            track_width=float(config.get('TRACK_WIDTH', defaults.track_width)),
            track_height=float(config.get('TRACK_HEIGHT', defaults.track_height)),
            boundary_padding=float(config.get('BOUNDARY_PADDING', defaults.boundary_padding)),
        )


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def integrate(vehicle: Vehicle, settings: PhysicsSettings) -> None:
    """Advance ``vehicle`` by one simulation tick using its current input.

    Only the given vehicle is mutated. Hitting the track edge reprojects the
    position but keeps the velocity, so cars slide along the wall.
    """
    controls = vehicle.input
    vel = vehicle.velocity

    fx = math.sin(vehicle.rotation)
    fy = -math.cos(vehicle.rotation)

    # up wins when both are held
    if controls.up:
        vel.x += settings.accel * fx
        vel.y += settings.accel * fy
    elif controls.down:
        vel.x -= settings.reverse_accel * fx
        vel.y -= settings.reverse_accel * fy

    speed = vel.length()
    if speed > settings.min_turn_speed:
        turn = settings.turn_rate * min(speed, settings.max_speed) / settings.max_speed
        if controls.left:
            vehicle.rotation -= turn
        if controls.right:
            vehicle.rotation += turn

    vel.x *= settings.drag
    vel.y *= settings.drag

    speed = vel.length()
    if speed > settings.max_speed:
        scale = settings.max_speed / speed
        vel.x *= scale
        vel.y *= scale

    pad = settings.boundary_padding
    pos = vehicle.position
    pos.x = _clamp(pos.x + vel.x, pad, settings.track_width - pad)
    pos.y = _clamp(pos.y + vel.y, pad, settings.track_height - pad)
