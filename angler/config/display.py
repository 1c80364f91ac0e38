"""Play field and frame cadence constants."""

# Play field bounds in pixels (must match the canvas used by the frontend)
FIELD_WIDTH = 750
WATER_TOP = 280
WATER_BOTTOM = 580

# Fish spawn band (y = SPAWN_Y_MIN + U(0, SPAWN_Y_RANGE))
SPAWN_Y_MIN = 280
SPAWN_Y_RANGE = 280

# The frame rate for the game loop, in frames per second
FRAME_RATE = 60

# Boat (player) horizontal position and movement
BOAT_START_X = 400
BOAT_STEP = 15
BOAT_MIN_X = 80  # A left move is only accepted while x > BOAT_MIN_X
BOAT_MAX_X = 720  # A right move is only accepted while x < BOAT_MAX_X
