"""Backend package for the fishing game API.

This package provides the FastAPI web server, the real-time game loop and
WebSocket broadcasting.
"""

__version__ = "1.0.0"
