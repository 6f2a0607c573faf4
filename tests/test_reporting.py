from datetime import datetime
from decimal import Decimal

from fulfillment.application.reporting import (
    get_popular_items,
    get_revenue_by_date,
    get_summary_stats,
    group_by_date,
)
from fulfillment.domain.models import Order


def test_calculates_summary_statistics():
    orders = [
        Order(id="1", total=10, status="completed"),
        Order(id="2", total=15, status="completed"),
        Order(id="3", total=20, status="pending"),
    ]

    stats = get_summary_stats(orders)

    assert stats.total_orders == 3
    assert stats.total_revenue == 45
    assert stats.average_order_value == 15
    assert stats.completed_orders == 2
    assert stats.pending_orders == 1


def test_summary_of_nothing_is_all_zero():
    stats = get_summary_stats([])

    assert stats.total_orders == 0
    assert stats.total_revenue == 0
    assert stats.average_order_value == 0
    assert stats.completed_orders == 0


def test_average_is_rounded_to_cents():
    stats = get_summary_stats([Order(id="1", total=10), Order(id="2", total=10), Order(id="3", total="10.01")])
    assert stats.total_revenue == Decimal("30.01")
    assert stats.average_order_value == Decimal("10.00")


def test_revenue_sum_is_exact():
    orders = [Order(id=str(i), total="0.10") for i in range(3)]
    assert get_summary_stats(orders).total_revenue == Decimal("0.30")


def test_groups_orders_by_date():
    orders = [
        Order(id="1", created_at=datetime(2025, 11, 13), total=10),
        Order(id="2", created_at=datetime(2025, 11, 14), total=20),
        Order(id="3", created_at=datetime(2025, 11, 13, 22, 0), total=15),
    ]

    grouped = group_by_date(orders)

    assert list(grouped) == ["2025-11-13", "2025-11-14"]
    assert [o.id for o in grouped["2025-11-13"]] == ["1", "3"]
    assert len(grouped["2025-11-14"]) == 1


def test_revenue_by_date():
    orders = [
        Order(id="1", created_at=datetime(2025, 11, 13), total=10),
        Order(id="2", created_at=datetime(2025, 11, 13), total="2.50"),
    ]
    assert get_revenue_by_date(orders) == {"2025-11-13": Decimal("12.50")}


def test_identifies_popular_items():
    orders = [
        Order(id="1", items=[{"name": "Burger", "quantity": 2}, {"name": "Fries", "quantity": 1}]),
        Order(id="2", items=[{"name": "Burger", "quantity": 1}, {"name": "Pizza", "quantity": 1}]),
    ]

    popular = get_popular_items(orders)

    assert popular[0].name == "Burger"
    assert popular[0].count == 3
    # Fries and Pizza tie; first seen wins.
    assert [p.name for p in popular[1:]] == ["Fries", "Pizza"]


def test_popular_items_limit():
    orders = [Order(id="1", items=[{"name": "A", "quantity": 3}, {"name": "B", "quantity": 2}, {"name": "C"}])]
    assert [p.name for p in get_popular_items(orders, limit=2)] == ["A", "B"]
