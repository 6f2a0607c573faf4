from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from fulfillment.domain.models import Order, OrderStatus, StatusChange

class IOrderRepository(ABC):
    @abstractmethod
    def list_orders(self, statuses: Optional[Iterable[OrderStatus]] = None, limit: Optional[int] = None) -> List[Order]:
        """Newest first."""

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    def save_order(self, order: Order) -> Order:
        pass

    @abstractmethod
    def update_status(self, order_id: str, expected_status: OrderStatus, change: StatusChange) -> Order:
        """
        Atomically set ``change.status`` and append ``change`` to the history.
        Raises OrderNotFound, or StaleOrderError if the stored status is no
        longer ``expected_status``.
        """

    @abstractmethod
    def set_printed(self, order_id: str, printed: bool = True) -> Order:
        pass
