from collections import Counter
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from fulfillment.core.timeutils import local_date
from fulfillment.domain.models import Order, OrderStatus, to_money
from fulfillment.domain.results import PopularItem, SummaryStats


def get_summary_stats(orders: Iterable[Order]) -> SummaryStats:
    """Totals over exactly the orders given; filter first for a time window."""
    orders = list(orders)
    total_revenue = sum((o.total for o in orders), Decimal("0.00"))
    average = total_revenue / len(orders) if orders else Decimal("0")
    return SummaryStats(
        total_orders=len(orders),
        total_revenue=to_money(total_revenue),
        average_order_value=to_money(average),
        completed_orders=sum(1 for o in orders if o.status == OrderStatus.completed),
        pending_orders=sum(1 for o in orders if o.status == OrderStatus.pending),
    )


def group_by_date(orders: Iterable[Order]) -> Dict[str, List[Order]]:
    """Local calendar day (ISO string) -> orders of that day, input order kept."""
    grouped: Dict[str, List[Order]] = {}
    for order in orders:
        grouped.setdefault(local_date(order.created_at).isoformat(), []).append(order)
    return grouped


def get_revenue_by_date(orders: Iterable[Order]) -> Dict[str, Decimal]:
    return {
        day: to_money(sum((o.total for o in day_orders), Decimal("0.00")))
        for day, day_orders in group_by_date(orders).items()
    }


def get_popular_items(orders: Iterable[Order], limit: Optional[int] = None) -> List[PopularItem]:
    counts: Counter = Counter()
    for order in orders:
        for item in order.items:
            counts[item.name] += item.quantity

    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order.
    ranked = sorted(counts.items(), key=lambda pair: pair[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [PopularItem(name=name, count=count) for name, count in ranked]
