import threading
from typing import Dict, Iterable, List, Optional

from fulfillment.core.timeutils import to_local
from fulfillment.domain.errors import OrderNotFound, StaleOrderError
from fulfillment.domain.models import Order, OrderStatus, StatusChange
from fulfillment.interfaces.IOrderRepository import IOrderRepository


class InMemoryOrderRepository(IOrderRepository):
    """Process-local store for headless runs and tests.

    Every write holds the lock, so a status check and its history append are
    atomic per order. Callers get copies; mutating them never touches the store.
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.RLock()
        for order in orders or []:
            self.save_order(order)

    def list_orders(self, statuses: Optional[Iterable[OrderStatus]] = None, limit: Optional[int] = None) -> List[Order]:
        with self._lock:
            orders = list(self._orders.values())
        if statuses:
            wanted = {OrderStatus(s) for s in statuses}
            orders = [o for o in orders if o.status in wanted]
        orders.sort(key=lambda o: to_local(o.created_at), reverse=True)
        if limit:
            orders = orders[:limit]
        return [o.model_copy(deep=True) for o in orders]

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return order.model_copy(deep=True) if order is not None else None

    def save_order(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = order.model_copy(deep=True)
        return order

    def update_status(self, order_id: str, expected_status: OrderStatus, change: StatusChange) -> Order:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise OrderNotFound(order_id)
            if current.status != OrderStatus(expected_status):
                raise StaleOrderError(order_id, OrderStatus(expected_status).value)
            updated = current.model_copy(
                update={
                    "status": change.status,
                    "status_history": [*current.status_history, change],
                },
                deep=True,
            )
            self._orders[order_id] = updated
            return updated.model_copy(deep=True)

    def set_printed(self, order_id: str, printed: bool = True) -> Order:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise OrderNotFound(order_id)
            updated = current.model_copy(update={"printed": printed}, deep=True)
            self._orders[order_id] = updated
            return updated.model_copy(deep=True)
