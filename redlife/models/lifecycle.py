"""
RedLife Backend - Status Lifecycle
==================================

What:  A small finite-state machine over a resource's status values.
How:   Each lifecycle holds a map of status → statuses it may move to.
       `check()` raises InvalidTransitionError for anything else.
Who:   Donation request and blog lifecycles (models/donation.py, models/blog.py),
       enforced by the corresponding services.

Rules shared by every lifecycle:
    - Setting the current status again is a no-op and always allowed.
    - A status with no outgoing edges is terminal.
"""

from typing import Dict, FrozenSet, Iterable, Mapping

from redlife.exceptions import InvalidTransitionError, ValidationError


class StatusLifecycle:
    """Legal status transitions for one kind of resource."""

    def __init__(self, resource: str, transitions: Mapping[str, Iterable[str]], initial: str):
        self.resource = resource
        self.initial = initial
        self._transitions: Dict[str, FrozenSet[str]] = {
            state: frozenset(targets) for state, targets in transitions.items()
        }
        if initial not in self._transitions:
            raise ValueError(f"Initial status '{initial}' is not a known {resource} status")

    @property
    def states(self) -> FrozenSet[str]:
        return frozenset(self._transitions)

    def allowed_from(self, current: str) -> FrozenSet[str]:
        return self._transitions.get(current, frozenset())

    def is_terminal(self, status: str) -> bool:
        return not self.allowed_from(status)

    def can_transition(self, current: str, target: str) -> bool:
        if current == target:
            return True
        return target in self.allowed_from(current)

    def check(self, current: str, target: str) -> None:
        """
        Validate a status change.

        Raises:
            ValidationError: target is not a status of this lifecycle
            InvalidTransitionError: target is not reachable from current
        """
        if target not in self.states:
            raise ValidationError(
                message=f"Unknown {self.resource} status '{target}'",
                field="status",
                context={"allowed": sorted(self.states)},
            )
        if not self.can_transition(current, target):
            raise InvalidTransitionError(
                resource=self.resource,
                current=current,
                target=target,
                allowed=self.allowed_from(current),
                terminal=self.is_terminal(current),
            )
