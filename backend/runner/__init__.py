"""Backend runner package.

- CommandHandlerMixin: maps client commands onto engine intents
"""

from backend.runner.command_handlers import CommandHandlerMixin

__all__ = ["CommandHandlerMixin"]
