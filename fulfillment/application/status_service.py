import logging
from datetime import datetime
from typing import Callable, List, Optional

from fulfillment.core.timeutils import now
from fulfillment.domain.errors import InvalidTransition, OrderNotFound
from fulfillment.domain.models import Order, OrderStatus, StatusChange
from fulfillment.domain.state_machine import can_transition, coerce_status, get_allowed_transitions
from fulfillment.infrastructure.notification_service import NotificationService
from fulfillment.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


class OrderStatusService:
    """
    Executes validated status transitions against the order store.

    Stateless apart from its collaborators: two updates for different orders
    need no coordination, and same-order races are settled by the
    repository's guarded write (StaleOrderError).
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        notifier: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = now,
    ):
        self.order_repo = order_repo
        self.notifier = notifier
        self.clock = clock

    def _require(self, order_id: str) -> Order:
        order = self.order_repo.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    async def update_order_status(self, order_id: str, new_status, actor: Optional[str] = None) -> Order:
        """
        Move an order to ``new_status`` and append one history entry.

        Raises:
            OrderNotFound: no order with that id
            InvalidTransition: the move is not in the transition table
            StaleOrderError: the order changed underneath us
        """
        order = self._require(order_id)
        target = coerce_status(new_status)
        if target is None or not can_transition(order.status, target):
            logger.warning(f"Rejected transition for {order_id}: {order.status.value} -> {new_status}")
            raise InvalidTransition(order_id, order.status.value, str(getattr(new_status, "value", new_status)))

        change = StatusChange(status=target, timestamp=self.clock(), actor=actor)
        updated = self.order_repo.update_status(order_id, order.status, change)
        logger.info(f"Order {order_id}: {order.status.value} -> {target.value}" + (f" by {actor}" if actor else ""))

        if self.notifier is not None:
            # Already committed; alerts are best effort.
            try:
                self.notifier.notify_status_change(updated, target)
            except Exception:
                logger.exception(f"❌ Status notification for {order_id} failed")
        return updated

    async def get_status_history(self, order_id: str) -> List[StatusChange]:
        return list(self._require(order_id).status_history)

    def get_allowed_actions(self, order_id: str) -> List[OrderStatus]:
        """Next statuses for one stored order, in declaration order."""
        allowed = get_allowed_transitions(self._require(order_id).status)
        return [s for s in OrderStatus if s in allowed]
