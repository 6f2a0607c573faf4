import logging
from typing import Iterable, Optional

from fulfillment.application.status_service import OrderStatusService
from fulfillment.domain.errors import OrderError
from fulfillment.domain.results import BatchError, BatchResult
from fulfillment.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)


class BatchOperator:
    """Applies one operation across many order ids.

    Each id succeeds or fails on its own; a failing id, whatever the
    cause, never keeps the legitimate ones from landing. Ids are processed
    in the given order.
    """

    def __init__(self, status_service: OrderStatusService, order_repo: IOrderRepository):
        self.status_service = status_service
        self.order_repo = order_repo

    async def batch_update_status(self, order_ids: Iterable[str], new_status, actor: Optional[str] = None) -> BatchResult:
        result = BatchResult(success=True)
        for order_id in order_ids:
            try:
                await self.status_service.update_order_status(order_id, new_status, actor=actor)
                result.updated += 1
            except OrderError as e:
                result.failed += 1
                result.errors.append(BatchError(order_id=order_id, error=str(e)))
            except Exception as e:
                logger.exception(f"❌ Unexpected error on order {order_id}")
                result.failed += 1
                result.errors.append(BatchError(order_id=order_id, error=str(e)))

        result.success = result.failed == 0
        logger.info(f"Batch status -> {getattr(new_status, 'value', new_status)}: {result.updated} updated, {result.failed} failed")
        return result

    async def batch_mark_printed(self, order_ids: Iterable[str], printed: bool = True) -> BatchResult:
        result = BatchResult(success=True)
        for order_id in order_ids:
            try:
                self.order_repo.set_printed(order_id, printed)
                result.updated += 1
            except OrderError as e:
                result.failed += 1
                result.errors.append(BatchError(order_id=order_id, error=str(e)))
            except Exception as e:
                logger.exception(f"❌ Unexpected error on order {order_id}")
                result.failed += 1
                result.errors.append(BatchError(order_id=order_id, error=str(e)))

        result.success = result.failed == 0
        logger.info(f"Batch printed={printed}: {result.updated} updated, {result.failed} failed")
        return result
