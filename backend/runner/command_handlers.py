"""Command handlers for GameRunner.

Each handler maps one client command onto an engine intent and builds the
response dict. Handlers run with the runner lock held, so an intent never
interleaves with a tick.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict

from angler.engine import Direction

if TYPE_CHECKING:
    from backend.game_runner import GameRunner

logger = logging.getLogger(__name__)


class CommandHandlerMixin:
    """Mixin class providing command handler methods for GameRunner."""

    def _cmd_start_game(self: "GameRunner", data: Dict[str, Any]) -> Dict[str, Any]:
        """Handle 'start_game' command."""
        self.engine.start_game()
        logger.info("Game %s started (generation %d)", self.game_id[:8], self.engine.generation)
        return self._create_ok_response("start_game", True)

    def _cmd_move_player(self: "GameRunner", data: Dict[str, Any]) -> Dict[str, Any]:
        """Handle 'move_player' command."""
        raw = data.get("direction")
        try:
            direction = Direction(raw)
        except ValueError:
            return self._create_error_response(f"Invalid direction: {raw!r}")
        return self._create_ok_response("move_player", self.engine.move_player(direction))

    def _cmd_toggle_line(self: "GameRunner", data: Dict[str, Any]) -> Dict[str, Any]:
        return self._create_ok_response("toggle_line", self.engine.toggle_line())

    def _cmd_attempt_catch(self: "GameRunner", data: Dict[str, Any]) -> Dict[str, Any]:
        """Handle 'attempt_catch' command."""
        result = self.engine.attempt_catch()
        response = self._create_ok_response("attempt_catch", result is not None)
        if result is not None:
            response["outcome"] = result.outcome.value
            response["money"] = self.engine.session.money
        return response
