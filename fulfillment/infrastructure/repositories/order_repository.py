import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import desc, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from fulfillment.core.timeutils import to_local
from fulfillment.domain.errors import OrderNotFound, StaleOrderError
from fulfillment.domain.models import Order, OrderStatus, StatusChange
from fulfillment.infrastructure.database import SessionLocal
from fulfillment.infrastructure.tables import OrderRow, StatusHistoryRow
from fulfillment.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


def _to_utc(moment: datetime) -> datetime:
    return to_local(moment).astimezone(timezone.utc)


def _from_db(moment: datetime) -> datetime:
    # SQLite hands back naive values; everything is written as UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class SqlOrderRepository(IOrderRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def list_orders(self, statuses: Optional[Iterable[OrderStatus]] = None, limit: Optional[int] = None) -> List[Order]:
        """
        Retrieves orders from the database.
        Ordered by created_at DESC (Newest first).
        """
        session = self.session_factory()
        try:
            query = session.query(OrderRow).options(selectinload(OrderRow.history))
            if statuses:
                query = query.filter(OrderRow.status.in_([OrderStatus(s).value for s in statuses]))
            query = query.order_by(desc(OrderRow.created_at))
            if limit:
                query = query.limit(limit)
            return [self._to_domain(row) for row in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Read Error: {e}")
            raise
        finally:
            session.close()

    def get_order(self, order_id: str) -> Optional[Order]:
        session = self.session_factory()
        try:
            row = session.get(OrderRow, order_id)
            return self._to_domain(row) if row is not None else None
        finally:
            session.close()

    def save_order(self, order: Order) -> Order:
        session = self.session_factory()
        try:
            row = OrderRow(
                id=order.id,
                status=order.status.value,
                customer_name=order.customer_name,
                customer_email=order.customer_email,
                items=[item.model_dump(mode="json") for item in order.items],
                subtotal=order.subtotal,
                tax=order.tax,
                tip=order.tip,
                total=order.total,
                created_at=_to_utc(order.created_at),
                printed=order.printed,
            )
            row.history = [
                StatusHistoryRow(status=c.status.value, changed_at=_to_utc(c.timestamp), actor=c.actor)
                for c in order.status_history
            ]
            session.merge(row)
            session.commit()
            return order
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error saving order {order.id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def update_status(self, order_id: str, expected_status: OrderStatus, change: StatusChange) -> Order:
        session = self.session_factory()
        try:
            # Guarded write: only lands if nobody moved the order since it was read.
            result = session.execute(
                update(OrderRow)
                .where(OrderRow.id == order_id, OrderRow.status == OrderStatus(expected_status).value)
                .values(status=change.status.value)
            )
            if result.rowcount == 0:
                exists = session.get(OrderRow, order_id) is not None
                session.rollback()
                if not exists:
                    raise OrderNotFound(order_id)
                raise StaleOrderError(order_id, OrderStatus(expected_status).value)

            session.add(StatusHistoryRow(
                order_id=order_id,
                status=change.status.value,
                changed_at=_to_utc(change.timestamp),
                actor=change.actor,
            ))
            session.commit()
            return self._to_domain(session.get(OrderRow, order_id))
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error updating status of {order_id}: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def set_printed(self, order_id: str, printed: bool = True) -> Order:
        session = self.session_factory()
        try:
            row = session.get(OrderRow, order_id)
            if row is None:
                raise OrderNotFound(order_id)
            row.printed = printed
            session.commit()
            return self._to_domain(row)
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error marking {order_id} printed: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            status=row.status,
            customer_name=row.customer_name,
            customer_email=row.customer_email,
            items=row.items or [],
            subtotal=row.subtotal,
            tax=row.tax,
            tip=row.tip,
            total=row.total,
            created_at=_from_db(row.created_at),
            printed=bool(row.printed),
            status_history=[
                StatusChange(status=h.status, timestamp=_from_db(h.changed_at), actor=h.actor)
                for h in row.history
            ],
        )
