"""Ok/Err outcome for intents the current state may refuse.

Refusals are ordinary during play (a second cast while the line is out, a
catch press with no challenge up), so the state machines hand back a
``Result`` rather than raising:

    result = line_machine.try_transition(LineMode.EXTENDING)
    if result.is_err():
        logger.debug("Cast ignored: %s", result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class Err(Generic[E]):
    """Refused transition; ``error`` says why."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err: {self.error}")

    @property
    def value(self) -> None:
        return None


Result = Union[Ok[T], Err[E]]
