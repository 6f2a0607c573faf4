import pytest

from fulfillment.domain.models import OrderStatus
from fulfillment.domain.state_machine import (
    TRANSITIONS,
    can_transition,
    get_allowed_transitions,
    is_terminal,
)


def test_validates_forward_transitions():
    assert can_transition("pending", "in_progress") is True
    assert can_transition("pending", "completed") is False
    assert can_transition("in_progress", "ready") is True
    assert can_transition("ready", "completed") is True


def test_allowed_next_statuses_from_pending():
    allowed = get_allowed_transitions("pending")
    assert OrderStatus.in_progress in allowed
    assert OrderStatus.cancelled in allowed
    assert OrderStatus.completed not in allowed


@pytest.mark.parametrize("status", ["completed", "cancelled"])
def test_terminal_statuses_have_no_way_out(status):
    assert get_allowed_transitions(status) == frozenset()
    assert is_terminal(status)


def test_any_open_order_can_be_cancelled():
    for status in ("pending", "in_progress", "ready"):
        assert can_transition(status, OrderStatus.cancelled)


def test_predicate_and_enumeration_agree_everywhere():
    for current in OrderStatus:
        allowed = get_allowed_transitions(current)
        for target in OrderStatus:
            assert can_transition(current, target) == (target in allowed)


def test_table_covers_every_status():
    assert set(TRANSITIONS) == set(OrderStatus)


def test_unknown_statuses_are_rejected_quietly():
    assert get_allowed_transitions("shipped") == frozenset()
    assert can_transition("pending", "shipped") is False
    assert can_transition("shipped", "pending") is False


def test_no_backwards_moves():
    assert not can_transition("ready", "pending")
    assert not can_transition("completed", "ready")
