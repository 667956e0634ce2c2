import threading
from typing import Dict, List, Optional, Set

from race_server.models import Phase, RaceState, Vehicle


class RaceServerError(Exception):
    pass


class JoinError(RaceServerError):
    message = 'Unable to join room'


class RoomFull(JoinError):
    message = 'Room is full'


class DuplicatePlayer(JoinError):
    message = 'Player is already in this room'


class Room:
    """A two-seat race session.

    All reads and writes of ``players``, ``state`` and ``rematch_requests``
    happen while holding ``lock``. ``countdown_token`` identifies the countdown
    currently allowed to fire; bumping it cancels any older timer.
    """

    def __init__(self, room_id: str, capacity: int = 2, countdown_seconds: int = 3):
        self.id = room_id
        self.capacity = capacity
        self.countdown_seconds = countdown_seconds
        self.lock = threading.RLock()
        self.players: List[str] = []
        self.state = RaceState()
        self.rematch_requests: Set[str] = set()
        self.countdown_token = 0
        self.closed = False

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.capacity

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def add_player(self, player_id: str) -> None:
        if self.is_full:
            raise RoomFull()
        if player_id in self.players:
            raise DuplicatePlayer()
        self.players.append(player_id)
        self.state.players[player_id] = Vehicle(id=player_id)
        if len(self.players) == self.capacity:
            self.begin_countdown()

    def remove_player(self, player_id: str) -> bool:
        if player_id not in self.players:
            return False
        self.players.remove(player_id)
        self.state.players.pop(player_id, None)
        self.rematch_requests.discard(player_id)
        if len(self.players) == 1:
            # a race cannot continue one-sided
            self.cancel_countdown()
            self.rematch_requests.clear()
            self.state.phase = Phase.WAITING
            self.state.countdown = 0
            self.state.start_time = None
        elif not self.players:
            self.cancel_countdown()
        return True

    def begin_countdown(self) -> int:
        self.countdown_token += 1
        self.state.phase = Phase.COUNTDOWN
        self.state.countdown = self.countdown_seconds
        return self.countdown_token

    def cancel_countdown(self) -> None:
        self.countdown_token += 1

    def reset_race(self) -> None:
        """Fresh vehicles for the seated players, back to Waiting."""
        self.cancel_countdown()
        self.state = RaceState(players={pid: Vehicle(id=pid) for pid in self.players})
        self.rematch_requests.clear()

    def summary(self):
        return {
            'id': self.id,
            'players': list(self.players),
            'phase': self.state.phase.value,
            'countdown': self.state.countdown,
        }


class RoomRegistry:
    """Room id -> Room map.

    The registry lock only guards the dict itself; it is never held while
    taking a room lock, so unrelated rooms never wait on each other.
    """

    def __init__(self, capacity: int = 2, countdown_seconds: int = 3):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()
        self.capacity = capacity
        self.countdown_seconds = countdown_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._rooms

    def get(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def create_room(self, room_id: str) -> Room:
        """Insert a new empty room. Callers check for an existing id first."""
        with self._lock:
            return self._insert(room_id)

    def get_or_create(self, room_id: str):
        """Return ``(room, created)``, creating the room atomically if absent."""
        with self._lock:
            room = self._rooms.get(room_id)
            if room is not None:
                return room, False
            return self._insert(room_id), True

    def _insert(self, room_id: str) -> Room:
        room = Room(room_id, capacity=self.capacity, countdown_seconds=self.countdown_seconds)
        self._rooms[room_id] = room
        return room

    def destroy_if_empty(self, room: Room) -> bool:
        """Drop ``room`` if it has no players. Call with ``room.lock`` held."""
        if not room.is_empty:
            return False
        room.closed = True
        room.cancel_countdown()
        with self._lock:
            if self._rooms.get(room.id) is room:
                del self._rooms[room.id]
        return True

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def rooms_with_player(self, player_id: str) -> List[Room]:
        # membership is re-checked under each room's lock by the caller
        return [room for room in self.rooms() if player_id in room.players]
