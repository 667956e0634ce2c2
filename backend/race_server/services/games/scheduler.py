import time

COUNTDOWN_INTERVAL_SEC = 1.0


def schedule_countdown(service, room, token: int) -> None:
    """Run the pre-race countdown for ``room`` in a background task.

    - First step fires immediately, then one step per second
    - Each step is validated against ``token``; a reset, a departure or room
      destruction bumps the room's token and the worker stops silently
    - The worker ends after the step that starts the race
    """

    def _worker(expected_token: int):
        while True:
            if service.countdown_step(room, expected_token):
                return
            service.scheduler.sleep(COUNTDOWN_INTERVAL_SEC)

    service.logger.info(f"[countdown-set] room={room.id} token={token} from={room.state.countdown}")
    service.scheduler.start_background_task(_worker, token)


class SimulationTicker:
    """Process-wide fixed-rate loop driving ``service.tick()``."""

    def __init__(self, service, tick_rate: int = 60):
        self.service = service
        self.interval = 1.0 / tick_rate
        self.ticks = 0
        self._running = False
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._generation += 1
        self.service.logger.info(f"[ticker-start] interval={self.interval:.4f}s generation={self._generation}")
        self.service.scheduler.start_background_task(self._run, self._generation)

    def stop(self) -> None:
        self._running = False

    def _run(self, generation: int) -> None:
        # a loop from before a stop/start pair exits on its next check
        while self._running and generation == self._generation:
            started = time.monotonic()
            self.service.tick()
            self.ticks += 1
            # keep a fixed cadence; a slow pass eats into the next sleep
            elapsed = time.monotonic() - started
            self.service.scheduler.sleep(max(0.0, self.interval - elapsed))
