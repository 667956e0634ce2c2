import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from race_server.broadcast import BroadcastSink
from race_server.models import Phase, PlayerInput
from .physics import PhysicsSettings, integrate
from .rooms import JoinError, Room, RoomRegistry
from .scheduler import SimulationTicker, schedule_countdown


@dataclass
class JoinResult:
    success: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'success': self.success}
        if self.message is not None:
            data['message'] = self.message
        return data


class GameService:
    """Session coordinator: the only owner of the room registry.

    Inbound transport events land on the public ``handle_*``/``join_room``
    methods; countdown workers call ``countdown_step`` and the global ticker
    calls ``tick``. Every mutation of a room, and the broadcast describing it,
    happens under that room's lock so clients never see a half-applied update.
    """

    def __init__(
        self,
        broadcaster: BroadcastSink,
        scheduler,
        settings: Optional[PhysicsSettings] = None,
        logger: Optional[logging.Logger] = None,
        room_capacity: int = 2,
        countdown_seconds: int = 3,
        tick_rate: int = 60,
    ):
        self.broadcaster = broadcaster
        # anything exposing start_background_task() and sleep(), e.g. SocketIO
        self.scheduler = scheduler
        self.settings = settings or PhysicsSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.registry = RoomRegistry(capacity=room_capacity, countdown_seconds=countdown_seconds)
        self.ticker = SimulationTicker(self, tick_rate=tick_rate)

    @classmethod
    def from_config(cls, config, broadcaster: BroadcastSink, scheduler, logger=None) -> 'GameService':
        return cls(
            broadcaster,
            scheduler,
            settings=PhysicsSettings.from_config(config),
            logger=logger,
            room_capacity=int(config.get('MAX_PLAYERS_PER_ROOM', 2)),
            countdown_seconds=int(config.get('COUNTDOWN_SECONDS', 3)),
            tick_rate=int(config.get('TICK_RATE', 60)),
        )

    # ---- inbound events ----

    def join_room(
        self,
        player_id: str,
        room_id: str,
        on_admitted: Optional[Callable[[], None]] = None,
    ) -> JoinResult:
        """Seat ``player_id`` in ``room_id``, creating the room on first use.

        ``on_admitted`` runs after the player is seated and before anything is
        broadcast, so the transport can subscribe the connection to the room.
        """
        while True:
            room, created = self.registry.get_or_create(room_id)
            with room.lock:
                if room.closed:
                    # emptied and dropped between lookup and lock; look again
                    continue
                if created:
                    self.logger.info(f"[room-create] room={room_id}")
                try:
                    room.add_player(player_id)
                except JoinError as exc:
                    self.logger.info(f"[join-rejected] room={room_id} player={player_id} reason={exc.message}")
                    return JoinResult(success=False, message=exc.message)

                self.logger.info(f"[join] room={room_id} player={player_id} players={room.players}")
                if on_admitted is not None:
                    on_admitted()
                self.broadcaster.broadcast(room_id, 'playerJoined', {
                    'playerId': player_id,
                    'players': list(room.players),
                })
                if room.phase is Phase.COUNTDOWN and len(room.players) == room.capacity:
                    schedule_countdown(self, room, room.countdown_token)
                return JoinResult(success=True)

    def handle_player_input(self, player_id: str, room_id: str, controls) -> None:
        room = self.registry.get(room_id)
        if room is None:
            self.logger.debug(f"[input-ignored] unknown room={room_id}")
            return
        if controls is not None and not isinstance(controls, (PlayerInput, dict)):
            self.logger.debug(f"[input-ignored] room={room_id} player={player_id} malformed input")
            return
        if not isinstance(controls, PlayerInput):
            controls = PlayerInput.from_dict(controls)
        with room.lock:
            vehicle = room.state.players.get(player_id)
            if room.closed or vehicle is None:
                self.logger.debug(f"[input-ignored] room={room_id} unknown player={player_id}")
                return
            vehicle.input = controls
            self.broadcaster.broadcast(room_id, 'gameStateUpdate', room.state.to_dict())

    def handle_disconnect(self, player_id: str) -> None:
        for room in self.registry.rooms_with_player(player_id):
            with room.lock:
                if not room.remove_player(player_id):
                    continue
                self.logger.info(f"[leave] room={room.id} player={player_id} remaining={room.players}")
                if self.registry.destroy_if_empty(room):
                    self.logger.info(f"[room-destroy] room={room.id}")
                    continue
                self.broadcaster.broadcast(room.id, 'playerLeft', {
                    'players': list(room.players),
                    'disconnectedPlayer': player_id,
                })

    def handle_rematch_request(self, player_id: str, room_id: str) -> None:
        room = self.registry.get(room_id)
        if room is None:
            return
        with room.lock:
            if room.closed or player_id not in room.players:
                return
            room.rematch_requests.add(player_id)
            self.logger.info(f"[rematch] room={room_id} requests={sorted(room.rematch_requests)}")
            if len(room.rematch_requests) < room.capacity:
                return
            room.reset_race()
            self.broadcaster.broadcast(room_id, 'rematchAccepted')
            token = room.begin_countdown()
            schedule_countdown(self, room, token)

    # ---- timers ----

    def countdown_step(self, room: Room, token: int) -> bool:
        """Fire one countdown second. Returns True once the worker should stop."""
        with room.lock:
            if room.closed or room.countdown_token != token or room.phase is not Phase.COUNTDOWN:
                self.logger.info(f"[countdown-abort] room={room.id} token={token} current={room.countdown_token}")
                return True
            remaining = room.state.countdown
            self.broadcaster.broadcast(room.id, 'countdownUpdate', remaining)
            if remaining > 0:
                room.state.countdown = remaining - 1
                return False
            room.state.phase = Phase.RACING
            room.state.start_time = time.time()
            self.logger.info(f"[race-start] room={room.id} players={room.players}")
            self.broadcaster.broadcast(room.id, 'raceStart')
            return True

    def tick(self) -> None:
        """One simulation step for every room."""
        for room in self.registry.rooms():
            try:
                self._tick_room(room)
            except Exception:
                # one broken room must not stall the others
                self.logger.exception(f"[tick-error] room={room.id}")

    def _tick_room(self, room: Room) -> None:
        with room.lock:
            if room.closed or self.registry.destroy_if_empty(room):
                return
            if room.phase is not Phase.RACING:
                return
            for vehicle in room.state.players.values():
                integrate(vehicle, self.settings)
            self.broadcaster.broadcast(room.id, 'gameStateUpdate', room.state.to_dict())

    def start(self) -> None:
        self.ticker.start()

    def stop(self) -> None:
        self.ticker.stop()

    # ---- read-only views ----

    def get_room_players(self, room_id: str) -> List[str]:
        room = self.registry.get(room_id)
        if room is None:
            return []
        with room.lock:
            return list(room.players)

    def snapshot(self, room_id: str) -> Optional[Dict[str, Any]]:
        room = self.registry.get(room_id)
        if room is None:
            return None
        with room.lock:
            data = room.summary()
            data['state'] = room.state.to_dict()
            data['rematchRequests'] = sorted(room.rematch_requests)
            return data

    def list_rooms(self) -> List[Dict[str, Any]]:
        summaries = []
        for room in self.registry.rooms():
            with room.lock:
                if not room.closed:
                    summaries.append(room.summary())
        return summaries
