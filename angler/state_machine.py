"""State machine abstractions for explicit state management.

Each stateful component of the engine (line, timing challenge, session)
declares its states as an Enum and its legal moves as a transition table:

- All valid states are enumerated
- Valid transitions are defined explicitly
- A refused transition is reported, never silently applied
- History can be tracked for debugging

Usage:
------
    line = create_line_state_machine()
    line.transition(LineMode.EXTENDING)            # OK
    line.try_transition(LineMode.IDLE).is_err()    # True: must retract first
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from angler.exceptions import InvalidTransitionError
from angler.result import Err, Ok, Result

S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        at_ms: Simulation time (ms) when the transition occurred
        reason: Optional description of why transition happened
    """

    from_state: S
    to_state: S
    at_ms: float
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation."""

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history
        """
        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )

        self._initial_state = initial_state
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

    @property
    def state(self) -> S:
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Get transition history (empty if tracking disabled)."""
        return self._history.copy()

    def can_transition(self, target: S) -> bool:
        return target in self._transitions.get(self._state, [])

    def try_transition(self, target: S, at_ms: float = 0.0, reason: str = "") -> Result[S, str]:
        """Attempt to transition to a new state.

        Returns:
            Ok(new_state) if the table allows it, Err(message) otherwise
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target
        if self._track_history:
            self._record_transition(old_state, target, at_ms, reason)
        return Ok(target)

    def transition(self, target: S, at_ms: float = 0.0, reason: str = "") -> S:
        """Transition to a new state, raising on invalid transition.

        Use this where an invalid transition is a programming error. Use
        try_transition() where the move may legitimately be refused.

        Raises:
            InvalidTransitionError: If the transition is invalid
        """
        result = self.try_transition(target, at_ms, reason)
        if result.is_err():
            raise InvalidTransitionError(result.error)
        return result.unwrap()

    def reset(self, at_ms: float = 0.0, reason: str = "reset") -> None:
        """Return to the initial state regardless of the transition table.

        Used when a session starts or ends and every component is wiped.
        """
        old_state = self._state
        self._state = self._initial_state
        if self._track_history and old_state is not self._initial_state:
            self._record_transition(old_state, self._initial_state, at_ms, f"[RESET] {reason}")

    def _record_transition(self, from_state: S, to_state: S, at_ms: float, reason: str) -> None:
        self._history.append(
            StateTransition(from_state=from_state, to_state=to_state, at_ms=at_ms, reason=reason)
        )
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history :]

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Fishing Line
# ============================================================================


class LineMode(str, Enum):
    """Mutually exclusive modes of the fishing line."""

    IDLE = "idle"
    EXTENDING = "extending"
    RETRACTING = "retracting"


# One cast is a single trip around the cycle; there is no way back to
# EXTENDING before the line is fully in.
LINE_TRANSITIONS: Dict[LineMode, List[LineMode]] = {
    LineMode.IDLE: [LineMode.EXTENDING],
    LineMode.EXTENDING: [LineMode.RETRACTING],
    LineMode.RETRACTING: [LineMode.IDLE],
}


def create_line_state_machine(track_history: bool = False) -> StateMachine[LineMode]:
    return StateMachine(
        initial_state=LineMode.IDLE,
        valid_transitions=LINE_TRANSITIONS,
        track_history=track_history,
    )


# ============================================================================
# Timing Challenge
# ============================================================================


class ChallengeState(str, Enum):
    """Catch minigame lifecycle."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    RESOLVED = "resolved"  # Success shown to the player, awaiting clear


CHALLENGE_TRANSITIONS: Dict[ChallengeState, List[ChallengeState]] = {
    ChallengeState.INACTIVE: [ChallengeState.ACTIVE],
    # Failure and cancellation drop straight back to INACTIVE
    ChallengeState.ACTIVE: [ChallengeState.RESOLVED, ChallengeState.INACTIVE],
    ChallengeState.RESOLVED: [ChallengeState.INACTIVE],
}


def create_challenge_state_machine(track_history: bool = False) -> StateMachine[ChallengeState]:
    return StateMachine(
        initial_state=ChallengeState.INACTIVE,
        valid_transitions=CHALLENGE_TRANSITIONS,
        track_history=track_history,
    )


# ============================================================================
# Session
# ============================================================================


class SessionState(str, Enum):
    """Game session lifecycle."""

    STOPPED = "stopped"
    RUNNING = "running"


SESSION_TRANSITIONS: Dict[SessionState, List[SessionState]] = {
    SessionState.STOPPED: [SessionState.RUNNING],
    # RUNNING -> RUNNING is a manual restart
    SessionState.RUNNING: [SessionState.STOPPED, SessionState.RUNNING],
}


def create_session_state_machine(track_history: bool = True) -> StateMachine[SessionState]:
    """Create the session lifecycle machine.

    History is on by default so game-over/restart sequences can be inspected.
    """
    return StateMachine(
        initial_state=SessionState.STOPPED,
        valid_transitions=SESSION_TRANSITIONS,
        track_history=track_history,
    )
