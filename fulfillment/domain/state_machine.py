"""
Order lifecycle state machine.

Both the UI (which next actions to offer) and the server (which writes to
accept) read the same table below.
"""
from typing import FrozenSet, Union

from fulfillment.domain.models import OrderStatus

StatusLike = Union[OrderStatus, str]

# Current status -> allowed next statuses
TRANSITIONS: dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.pending: frozenset({OrderStatus.in_progress, OrderStatus.cancelled}),
    OrderStatus.in_progress: frozenset({OrderStatus.ready, OrderStatus.cancelled}),
    OrderStatus.ready: frozenset({OrderStatus.completed, OrderStatus.cancelled}),
    OrderStatus.completed: frozenset(),  # terminal
    OrderStatus.cancelled: frozenset(),  # terminal
}


def coerce_status(value: StatusLike) -> OrderStatus | None:
    """Return the matching OrderStatus, or None for unknown values."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def get_allowed_transitions(current: StatusLike) -> FrozenSet[OrderStatus]:
    status = coerce_status(current)
    if status is None:
        return frozenset()
    return TRANSITIONS[status]


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    """True if ``target`` may follow ``current``."""
    target_status = coerce_status(target)
    return target_status is not None and target_status in get_allowed_transitions(current)


def is_terminal(status: StatusLike) -> bool:
    return not get_allowed_transitions(status)
