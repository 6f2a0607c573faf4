"""Operator-facing filters over an in-memory order collection.

Every function returns a new list in the input's order and leaves the input
untouched.
"""
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from fulfillment.core.timeutils import end_of_day, local_date, start_of_day, to_local
from fulfillment.domain.models import Order, OrderStatus

DateLike = Union[date, datetime, str]


def as_date(value: DateLike) -> date:
    """Accept a date, a datetime (its local calendar day) or 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return local_date(value)
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def filter_by_date_range(orders: Iterable[Order], date_from: Optional[DateLike], date_to: Optional[DateLike]) -> List[Order]:
    """Inclusive on both ends: ``date_from`` 00:00 through ``date_to`` 23:59:59.999999 local time."""
    start = start_of_day(as_date(date_from)) if date_from else None
    end = end_of_day(as_date(date_to)) if date_to else None

    def in_range(order: Order) -> bool:
        created = to_local(order.created_at)
        if start is not None and created < start:
            return False
        if end is not None and created > end:
            return False
        return True

    return [o for o in orders if in_range(o)]


def filter_by_status(orders: Iterable[Order], status) -> List[Order]:
    """``status`` may be one status or any collection of them."""
    if isinstance(status, (str, OrderStatus)):
        wanted = {OrderStatus(status)}
    else:
        wanted = {OrderStatus(s) for s in status}
    return [o for o in orders if o.status in wanted]


def apply_filters(
    orders: Iterable[Order],
    status=None,
    date_from: Optional[DateLike] = None,
    date_to: Optional[DateLike] = None,
) -> List[Order]:
    filtered = list(orders)
    if status:
        filtered = filter_by_status(filtered, status)
    if date_from or date_to:
        filtered = filter_by_date_range(filtered, date_from, date_to)
    return filtered


def _matches(order: Order, needle: str) -> bool:
    fields = [order.id, order.customer_name, order.customer_email]
    fields += [item.name for item in order.items]
    return any(field and needle in field.lower() for field in fields)


def search(orders: Iterable[Order], query: Optional[str]) -> List[Order]:
    """Case-insensitive substring match on id, customer name/email and item names.

    A blank query matches everything, so clearing the search box restores
    the full list.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(orders)
    return [o for o in orders if _matches(o, needle)]
