"""Push game snapshots to connected WebSocket clients."""

import asyncio
import logging
import time
from typing import Dict

from angler.config.server import WEBSOCKET_UPDATE_INTERVAL
from backend.game_runner import GameRunner

logger = logging.getLogger("angler.backend.broadcast")


def _handle_task_exception(task: asyncio.Task) -> None:
    """Handle exceptions from background tasks."""
    try:
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unhandled exception in task %s: %s",
                task.get_name(),
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
    except asyncio.CancelledError:
        logger.debug("Task %s was cancelled", task.get_name())


async def broadcast_updates(runner: GameRunner) -> None:
    """Send a snapshot to every client of *runner* whenever a new frame is ready.

    Args:
        runner: The GameRunner to broadcast for
    """
    game_id = runner.game_id
    interval = WEBSOCKET_UPDATE_INTERVAL / runner.fps
    logger.info("broadcast_updates[%s]: Task started", game_id[:8])

    last_sent_frame = -1
    last_sent_playing = None

    try:
        while True:
            clients = runner.connected_clients
            if clients:
                try:
                    state = await runner.get_state_async()
                except Exception as e:
                    logger.error(
                        "broadcast_updates[%s]: Error getting game state: %s",
                        game_id[:8],
                        e,
                        exc_info=True,
                    )
                    await asyncio.sleep(interval)
                    continue

                # Frames stop while no session runs; still push the game-over view once
                changed = (
                    state.frame != last_sent_frame
                    or state.session.is_playing != last_sent_playing
                )
                if changed:
                    last_sent_frame = state.frame
                    last_sent_playing = state.session.is_playing
                    payload = runner.serialize_state(state)

                    disconnected = set()
                    send_start = time.perf_counter()
                    for client in list(clients):
                        try:
                            await client.send_bytes(payload)
                        except Exception as e:
                            logger.warning(
                                "broadcast_updates[%s]: Error sending to client, marking for removal: %s",
                                game_id[:8],
                                e,
                            )
                            disconnected.add(client)

                    send_ms = (time.perf_counter() - send_start) * 1000
                    if send_ms > 100:
                        logger.warning(
                            "broadcast_updates[%s]: Broadcasting to %s clients took %.2f ms",
                            game_id[:8],
                            len(clients),
                            send_ms,
                        )

                    for client in disconnected:
                        runner.remove_client(client)

            await asyncio.sleep(interval)

    except asyncio.CancelledError:
        logger.info("broadcast_updates[%s]: Task cancelled", game_id[:8])
        raise
    finally:
        logger.info("broadcast_updates[%s]: Task ended", game_id[:8])


# Track broadcast tasks per game
_broadcast_tasks: Dict[str, asyncio.Task] = {}


def start_broadcast(runner: GameRunner) -> asyncio.Task:
    """Start (or return the existing) broadcast task for a game."""
    task = _broadcast_tasks.get(runner.game_id)
    if task is not None and not task.done():
        return task

    task = asyncio.create_task(
        broadcast_updates(runner),
        name=f"broadcast_{runner.game_id[:8]}",
    )
    task.add_done_callback(_handle_task_exception)
    _broadcast_tasks[runner.game_id] = task
    return task


async def stop_broadcast(runner: GameRunner) -> None:
    """Cancel the broadcast task for a game and wait for it to finish."""
    task = _broadcast_tasks.pop(runner.game_id, None)
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
