"""Background game runner thread."""

import asyncio
import logging
import threading
import time
import uuid
from typing import Any, Dict, Optional, Set

import orjson

from angler.config import GameConfig
from angler.engine import FishingEngine
from angler.snapshot import GameSnapshot
from backend.runner import CommandHandlerMixin

logger = logging.getLogger(__name__)

# Longest slice of simulation time a single loop iteration may advance.
# Wall time beyond it is carried into the following iterations.
MAX_STEP_MS = 250.0


class GameRunner(CommandHandlerMixin):
    """Drives a FishingEngine in real time on a background thread.

    All engine access (ticks, intents, snapshots) goes through ``self.lock``,
    so each one is applied atomically with respect to the others.
    """

    def __init__(
        self,
        engine: Optional[FishingEngine] = None,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        game_id: Optional[str] = None,
    ):
        """Initialize the game runner.

        Args:
            engine: Pre-built engine (tests); otherwise one is created
            config: Game configuration for a new engine
            seed: Optional random seed for deterministic behavior
            game_id: Optional unique identifier for this game
        """
        self.engine = engine or FishingEngine(config=config, seed=seed)
        self.seed = seed
        self.game_id = game_id or str(uuid.uuid4())

        self.running = False
        self.thread: Optional[threading.Thread] = None
        self.lock = threading.Lock()

        self.fps = self.engine.config.arena.frame_rate
        self.frame_time = 1.0 / self.fps

        self.connected_clients: Set[Any] = set()

        self.last_fps_time = time.time()
        self.fps_frame_count = 0
        self.current_actual_fps = 0.0
        self.backlog_ms = 0.0

    def _create_error_response(self, error_msg: str) -> Dict[str, Any]:
        return {"success": False, "error": error_msg}

    def _create_ok_response(self, command: str, accepted: bool) -> Dict[str, Any]:
        return {"success": True, "command": command, "accepted": accepted}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the real-time loop in a background thread."""
        if not self.running:
            self.running = True
            self.thread = threading.Thread(target=self._run_loop, daemon=True, name="angler-loop")
            self.thread.start()

    def stop(self) -> None:
        self.running = False
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None

    def step(self, dt_ms: float) -> int:
        """Advance the engine by *dt_ms* of simulation time under the lock."""
        with self.lock:
            return self.engine.advance(dt_ms)

    def take_step_ms(self, elapsed_ms: float) -> float:
        """Add *elapsed_ms* of wall time to the backlog and return this iteration's slice."""
        self.backlog_ms += elapsed_ms
        step_ms = min(MAX_STEP_MS, self.backlog_ms)
        self.backlog_ms -= step_ms
        return step_ms

    def log_status(self) -> None:
        with self.lock:
            session = self.engine.session
            status = (session.is_playing, session.money, session.timer, session.fish_caught)
        logger.info(
            "Game %s status FPS=%.1f, Playing=%s, Money=%d, Timer=%d, Caught=%d",
            self.game_id[:8],
            self.current_actual_fps,
            *status,
        )

    def _run_loop(self) -> None:
        """Main loop: advance the engine by measured wall time each frame."""
        logger.info("Game loop: Starting")
        loop_iteration_count = 0

        # Drift correction: Track when the next frame *should* start
        next_frame_start_time = time.time()
        last_step = time.perf_counter()

        try:
            while self.running:
                try:
                    next_frame_start_time += self.frame_time
                    loop_iteration_count += 1

                    now_perf = time.perf_counter()
                    step_ms = self.take_step_ms((now_perf - last_step) * 1000)
                    last_step = now_perf

                    with self.lock:
                        try:
                            self.engine.advance(step_ms)
                        except Exception as e:
                            logger.error(
                                "Game loop: Error advancing engine at iteration %d: %s",
                                loop_iteration_count,
                                e,
                                exc_info=True,
                            )

                    self.fps_frame_count += 1
                    current_time = time.time()
                    if current_time - self.last_fps_time >= 5.0:
                        self.current_actual_fps = self.fps_frame_count / (current_time - self.last_fps_time)
                        self.fps_frame_count = 0
                        self.last_fps_time = current_time
                        self.log_status()

                    # Maintain frame rate with drift correction
                    now = time.time()
                    sleep_time = next_frame_start_time - now
                    if sleep_time > 0:
                        time.sleep(sleep_time)
                    elif sleep_time < -0.1:
                        # Too far behind: re-anchor rather than run zero-delay frames
                        next_frame_start_time = now

                except Exception as e:
                    logger.error(
                        "Game loop: Unexpected error at iteration %d: %s",
                        loop_iteration_count,
                        e,
                        exc_info=True,
                    )
                    time.sleep(self.frame_time)
                    next_frame_start_time = time.time()
                    last_step = time.perf_counter()

        finally:
            logger.info("Game loop: Ended after %d iterations", loop_iteration_count)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def get_state(self) -> GameSnapshot:
        with self.lock:
            return self.engine.snapshot()

    async def get_state_async(self) -> GameSnapshot:
        """Async wrapper to fetch state without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_state)

    def serialize_state(self, state: GameSnapshot) -> bytes:
        """Serialize a snapshot with fast JSON and log slow frames."""
        start = time.perf_counter()
        serialized = orjson.dumps(state.to_dict())
        duration_ms = (time.perf_counter() - start) * 1000
        if duration_ms > 50:
            logger.warning(
                "serialize_state: Frame %s slow serialization: %.2f ms, Size: %d bytes",
                state.frame,
                duration_ms,
                len(serialized),
            )
        return serialized

    def get_status(self) -> Dict[str, Any]:
        with self.lock:
            session = self.engine.session
            return {
                "game_id": self.game_id,
                "running": self.running,
                "is_playing": session.is_playing,
                "generation": session.generation,
                "frame": self.engine.frame_count,
                "fps": round(self.current_actual_fps, 1),
                "clients": len(self.connected_clients),
            }

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def add_client(self, websocket: Any) -> None:
        self.connected_clients.add(websocket)
        logger.info("Client connected to game %s (%d total)", self.game_id[:8], len(self.connected_clients))

    def remove_client(self, websocket: Any) -> None:
        self.connected_clients.discard(websocket)
        logger.info(
            "Client disconnected from game %s (%d remaining)",
            self.game_id[:8],
            len(self.connected_clients),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def handle_command(self, command: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Handle a command from the client.

        Args:
            command: One of 'start_game', 'move_player', 'toggle_line', 'attempt_catch'
            data: Optional command data
        """
        handlers = {
            "start_game": self._cmd_start_game,
            "move_player": self._cmd_move_player,
            "toggle_line": self._cmd_toggle_line,
            "attempt_catch": self._cmd_attempt_catch,
        }

        with self.lock:
            handler = handlers.get(command)
            if handler:
                return handler(data or {})

            logger.warning("Unknown command received: %s", command)
            return self._create_error_response(f"Unknown command: {command}")

    async def handle_command_async(
        self, command: str, data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Async wrapper to route commands off the event loop thread."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.handle_command, command, data)
