"""LifecycleStateMachine: declarative table of allowed status transitions."""
from __future__ import annotations

from typing import FrozenSet, Optional, Tuple

from reservations.core.exceptions import InvalidStateTransitionError
from reservations.scheduling.types import AppointmentStatus

_S = AppointmentStatus

ALLOWED_TRANSITIONS: FrozenSet[Tuple[AppointmentStatus, AppointmentStatus]] = frozenset({
    (_S.PENDING, _S.CONFIRMED),
    (_S.PENDING, _S.CANCELLED),
    (_S.CONFIRMED, _S.CANCELLED),
    (_S.CONFIRMED, _S.COMPLETED),
})
"""Every (from, to) pair not listed here is rejected, self-transitions included."""

TERMINAL_STATES: FrozenSet[AppointmentStatus] = frozenset({_S.CANCELLED, _S.COMPLETED})


class LifecycleStateMachine:
    """Pure lookup over ALLOWED_TRANSITIONS. Never fetches or saves anything."""

    def __init__(
        self,
        transitions: FrozenSet[Tuple[AppointmentStatus, AppointmentStatus]] = ALLOWED_TRANSITIONS,
    ) -> None:
        self._transitions = transitions

    def can_transition(self, current: AppointmentStatus, target: AppointmentStatus) -> bool:
        return (current, target) in self._transitions

    def check(
        self,
        current: AppointmentStatus,
        target: AppointmentStatus,
    ) -> Optional[InvalidStateTransitionError]:
        """None if the edge is allowed, else the error carrying both states."""
        if self.can_transition(current, target):
            return None
        return InvalidStateTransitionError(current, target)

    def allowed_targets(self, current: AppointmentStatus) -> FrozenSet[AppointmentStatus]:
        return frozenset(to for frm, to in self._transitions if frm == current)

    @staticmethod
    def is_terminal(status: AppointmentStatus) -> bool:
        return status in TERMINAL_STATES
