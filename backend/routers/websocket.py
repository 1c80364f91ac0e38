"""WebSocket endpoint for real-time game updates and player intents."""

from __future__ import annotations

import logging

import orjson
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.game_runner import GameRunner

logger = logging.getLogger(__name__)


def _get_client_ip(websocket: WebSocket) -> str:
    forwarded_for = websocket.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if websocket.client:
        return websocket.client.host
    return "unknown"


async def _handle_websocket(websocket: WebSocket, runner: GameRunner) -> None:
    client_ip = _get_client_ip(websocket)
    client_added = False

    try:
        await websocket.accept()
        runner.add_client(websocket)
        client_added = True

        # Initial snapshot so new clients render immediately
        try:
            state = await runner.get_state_async()
            await websocket.send_bytes(runner.serialize_state(state))
        except Exception as exc:
            logger.warning("Failed to send initial state to %s: %s", client_ip, exc)

        while True:
            try:
                message = await websocket.receive()
            except WebSocketDisconnect:
                break

            if message["type"] == "websocket.disconnect":
                break
            if message["type"] != "websocket.receive":
                continue

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if not raw:
                continue

            try:
                payload = orjson.loads(raw)
            except orjson.JSONDecodeError:
                await websocket.send_json({"success": False, "error": "Invalid JSON payload."})
                continue
            if not isinstance(payload, dict):
                await websocket.send_json({"success": False, "error": "Expected a JSON object."})
                continue

            command = payload.get("command")
            if not command:
                continue

            data = payload.get("data")
            response = await runner.handle_command_async(command, data if isinstance(data, dict) else None)
            if response is not None:
                await websocket.send_text(orjson.dumps(response).decode())
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error for client %s", client_ip)
    finally:
        if client_added:
            runner.remove_client(websocket)


def setup_router(runner: GameRunner) -> APIRouter:
    """Create the websocket router bound to *runner*."""
    router = APIRouter()

    @router.websocket("/ws")
    async def websocket_game(websocket: WebSocket) -> None:
        await _handle_websocket(websocket, runner)

    return router
