"""Session economy constants (reference balancing)."""

STARTING_MONEY = 120
TIME_BUDGET_SECONDS = 137
COUNTDOWN_TICK_MS = 1000
