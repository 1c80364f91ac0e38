"""Fish, line, bite and catch-minigame tuning constants."""

import math

# Population
POPULATION_SIZE = 15

# Per-axis speed jitter sampled once at spawn
SPEED_JITTER_X = 0.5
SPEED_JITTER_Y = 0.3

# Oscillatory vertical swim (phase advances once per frame)
SWIM_PHASE_INCREMENT = 0.02
SWIM_PHASE_MAX = 2 * math.pi

# Fishing line (advanced by its own 50 ms tick)
LINE_TICK_MS = 50
LINE_EXTEND_STEP = 8
LINE_RETRACT_STEP = 12
LINE_MAX_LENGTH = 350
WATER_SURFACE_Y = 220  # Hook depth is WATER_SURFACE_Y + line length
RETRACT_DELAY_MS = 500  # Slack between the stop press and reel-in

# Bite resolution
BITE_RADIUS = 50  # Strict: abs(dx) < radius and abs(dy) < radius
BITE_HANDOFF_MS = 1000  # Bite feedback before the timing challenge opens
BITE_PULSE_PERIOD_MS = 250

# Timing challenge
CHALLENGE_PROGRESS_STEP = 2  # Per frame
CHALLENGE_PROGRESS_MAX = 100  # Progress wraps to 0 on reaching this
WINDOW_START_BASE = 50
WINDOW_START_SPREAD = 20
WINDOW_END_BASE = 70
WINDOW_END_SPREAD = 20
WINDOW_MIN_WIDTH = 2.0  # Applied after sorting an inverted or degenerate draw
CAUGHT_DISPLAY_MS = 1000
CHALLENGE_TIMEOUT_MS = None  # None = player may let progress wrap indefinitely
