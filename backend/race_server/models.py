from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
import math


class Phase(str, Enum):
    WAITING = 'waiting'
    COUNTDOWN = 'countdown'
    RACING = 'racing'
    FINISHED = 'finished'


@dataclass
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass
class PlayerInput:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PlayerInput':
        data = data or {}
        return cls(
            up=bool(data.get('up')),
            down=bool(data.get('down')),
            left=bool(data.get('left')),
            right=bool(data.get('right')),
        )

    def to_dict(self):
        return {
            'up': self.up,
            'down': self.down,
            'left': self.left,
            'right': self.right,
        }


@dataclass
class Vehicle:
    """One player's car: kinematic state plus the last input received."""

    id: str
    position: Vec2 = field(default_factory=Vec2)
    velocity: Vec2 = field(default_factory=Vec2)
    rotation: float = 0.0
    input: PlayerInput = field(default_factory=PlayerInput)

    @property
    def speed(self) -> float:
        return self.velocity.length()

    def to_dict(self):
        return {
            'id': self.id,
            'position': self.position.to_dict(),
            'velocity': self.velocity.to_dict(),
            'rotation': self.rotation,
            'input': self.input.to_dict(),
        }


@dataclass
class RaceState:
    players: Dict[str, Vehicle] = field(default_factory=dict)
    phase: Phase = Phase.WAITING
    countdown: int = 0
    winner: Optional[str] = None
    start_time: Optional[float] = None

    @property
    def race_started(self) -> bool:
        return self.phase is Phase.RACING

    def to_dict(self):
        return {
            'players': {pid: v.to_dict() for pid, v in self.players.items()},
            'phase': self.phase.value,
            'raceStarted': self.race_started,
            'countdown': self.countdown,
            'winner': self.winner,
            'startTime': self.start_time,
        }
