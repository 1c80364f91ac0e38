"""Server configuration constants."""

# Server Configuration
DEFAULT_API_PORT = 8000  # Default port for FastAPI backend

# Broadcast throttling: push state every N engine frames
WEBSOCKET_UPDATE_INTERVAL = 2
