from datetime import datetime, timedelta, timezone

import pytest

from fulfillment.application.batch import BatchOperator
from fulfillment.application.dashboard import OrderDashboard
from fulfillment.application.status_service import OrderStatusService
from fulfillment.application.tickets import TicketFormatter
from fulfillment.domain.models import Order
from fulfillment.infrastructure.report_cache import ReportCache
from fulfillment.infrastructure.repositories.memory_repository import InMemoryOrderRepository


class FakeClock:
    """Hands out increasing timestamps one second apart."""

    def __init__(self, start=datetime(2025, 11, 13, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


class FakeTimer:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_order(order_id, **fields) -> Order:
    return Order(id=order_id, **fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_orders():
    return [
        make_order(
            "1001",
            status="pending",
            customer_name="John Doe",
            customer_email="john@example.com",
            items=[{"name": "Burger", "quantity": 2, "price": "8.50"}, {"name": "Fries", "quantity": 1, "price": 3}],
            subtotal="20.00", tax="1.60", tip="2.00", total="23.60",
            created_at=datetime(2025, 11, 10, 18, 30),
        ),
        make_order(
            "1002",
            status="in_progress",
            customer_name="Jane Smith",
            customer_email="jane@example.com",
            items=[{"name": "Pizza", "quantity": 1, "price": "12.99"}],
            subtotal="12.99", tax="1.04", tip="2.00", total="16.03",
            created_at=datetime(2025, 11, 13, 12, 0),
        ),
        make_order(
            "1003",
            status="ready",
            customer_name="Sam Lee",
            items=[{"name": "Burger", "quantity": 1, "price": "8.50"}],
            subtotal="8.50", tax="0.68", tip="0", total="9.18",
            created_at=datetime(2025, 11, 15, 9, 15),
        ),
    ]


@pytest.fixture
def repo(sample_orders):
    return InMemoryOrderRepository(sample_orders)


@pytest.fixture
def status_service(repo, clock):
    return OrderStatusService(order_repo=repo, clock=clock)


@pytest.fixture
def batch_operator(status_service, repo):
    return BatchOperator(status_service=status_service, order_repo=repo)


@pytest.fixture
def dashboard(repo, status_service, batch_operator):
    return OrderDashboard(
        order_repo=repo,
        status_service=status_service,
        batch_operator=batch_operator,
        tickets=TicketFormatter(),
        cache=ReportCache(ttl=60, clock=FakeTimer()),
    )
