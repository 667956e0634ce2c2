"""Race domain services: rooms, physics and timers.

This package contains the session logic that socket handlers and HTTP
routes call into, keeping transport concerns separated from the race
state machine and the vehicle simulation.
"""

from .coordinator import GameService, JoinResult
from .physics import PhysicsSettings, integrate
from .rooms import DuplicatePlayer, JoinError, RaceServerError, Room, RoomFull, RoomRegistry

__all__ = [
    'DuplicatePlayer',
    'GameService',
    'JoinError',
    'JoinResult',
    'PhysicsSettings',
    'RaceServerError',
    'Room',
    'RoomFull',
    'RoomRegistry',
    'integrate',
]
